"""Reference HTTP API for run progress."""
