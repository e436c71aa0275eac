"""Registry managers: logging, access control and registry operations."""
