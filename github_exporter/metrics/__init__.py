"""
Metrics package for the GitHub exporter.

This package provides the Prometheus collectors that turn GitHub records
into samples, and the request metrics they share.
"""

from .collector import COLLECTORS, RepoCollector, IssueCollector, PullRequestCollector
from .request_metrics import RequestMetrics
