"""User-facing interfaces (command line)."""
