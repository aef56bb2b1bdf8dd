"""Shared utilities: logging, HTTP connections and error reporting."""
