"""Command line interface for topomap."""
