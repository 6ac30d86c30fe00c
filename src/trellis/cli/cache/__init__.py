"""Cache commands."""
