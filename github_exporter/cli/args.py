"""Command-line argument parsing for the GitHub exporter."""

import argparse

COLLECTOR_CHOICES = ("repos", "issues", "pull_requests")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Every option defaults to None so that only flags given on the command
    line override the file and environment configuration.
    """
    parser = argparse.ArgumentParser(description="Prometheus exporter for GitHub repositories, issues and pull requests")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a JSON configuration file"
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Path to a .env file (default: ./.env if present)"
    )
    parser.add_argument(
        "--github.url",
        dest="github_url",
        default=None,
        help="GitHub API URL, change for GitHub Enterprise (default: https://api.github.com)"
    )
    parser.add_argument(
        "--github.token",
        dest="github_token",
        default=None,
        help="Access token for the GitHub API (prefer GITHUB_EXPORTER_TOKEN)"
    )
    parser.add_argument(
        "--github.insecure",
        dest="insecure",
        action="store_true",
        help="Skip TLS verification of the GitHub API"
    )
    parser.add_argument(
        "--github.repo",
        dest="repos",
        action="append",
        default=None,
        help="Repository to report on as owner/name, name may contain * (repeatable, comma lists allowed)"
    )
    parser.add_argument(
        "--request.timeout",
        dest="timeout",
        type=float,
        default=None,
        help="Seconds allowed for the API calls of one repository (default: 10)"
    )
    parser.add_argument(
        "--request.per-page",
        dest="per_page",
        type=int,
        default=None,
        help="Issues or pull requests fetched per repository (default: 30, max 100)"
    )
    parser.add_argument(
        "--no-collector",
        dest="disabled_collectors",
        action="append",
        choices=COLLECTOR_CHOICES,
        default=None,
        help="Disable a collector (repeatable)"
    )
    parser.add_argument(
        "--web.address",
        dest="web_address",
        default=None,
        help="Address to bind the metrics server to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--web.port",
        dest="web_port",
        type=int,
        default=None,
        help="Port to bind the metrics server to (default: 9504)"
    )
    parser.add_argument(
        "--log.level",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set logging level (default: INFO)"
    )
    parser.add_argument(
        "--log.dir",
        dest="log_dir",
        default=None,
        help="Directory for log files (default: console only)"
    )
    parser.add_argument(
        "--list-metrics",
        action="store_true",
        help="Print the metrics exposed by the enabled collectors and exit"
    )
    return parser


def parse_args(argv=None):
    """Parse command-line arguments for the GitHub exporter.

    Args:
        argv: Argument list, sys.argv[1:] if None

    Returns:
        Namespace containing the parsed arguments.
    """
    return build_parser().parse_args(argv)
