"""Command-line interface for ftprelay."""
