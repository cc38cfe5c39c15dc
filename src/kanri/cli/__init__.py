"""Command line interface helpers."""
