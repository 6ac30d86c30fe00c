"""Extension commands."""
