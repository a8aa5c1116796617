"""formgen command line interface."""
