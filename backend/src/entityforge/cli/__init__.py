"""EntityForge command line interface."""
