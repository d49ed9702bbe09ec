"""Command-line interface for airlinkctl."""
