"""
Collectors for the GitHub exporter.

One collector per record kind; all share the skeleton in ``base``.
"""

from .base import BaseCollector
from .repo import RepoCollector
from .issues import IssueCollector
from .pull_requests import PullRequestCollector

COLLECTORS = {
    "repos": RepoCollector,
    "issues": IssueCollector,
    "pull_requests": PullRequestCollector,
}
