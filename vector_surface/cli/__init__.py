"""Command line interface for vector-surface."""
