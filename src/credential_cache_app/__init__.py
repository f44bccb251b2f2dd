"""Command-line application for the credential cache."""
