"""Theme commands."""
