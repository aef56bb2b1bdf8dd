"""Prometheus exporter for GitHub repositories, issues and pull requests."""

__version__ = "0.1.0"
