"""Command-line interface for the fieldsync client."""
