"""Library commands."""
