"""Command-line and environment handling for the GitHub exporter."""

from github_exporter.cli.args import parse_args
from github_exporter.cli.environment import Environment
