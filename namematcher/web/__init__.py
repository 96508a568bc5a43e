"""HTTP transport for the name matcher."""
