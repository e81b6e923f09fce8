"""Command line tools for mdquery."""
