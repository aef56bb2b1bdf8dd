"""Application wiring and configuration for the GitHub exporter."""
