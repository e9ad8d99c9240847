"""CBC mode."""
