"""Command line interface for the password validator."""
