"""simconsole command-line interface."""
