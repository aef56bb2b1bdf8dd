"""
GitHub API interface package for the GitHub exporter.

This package provides the REST client, the typed records built from its
payloads, and the resolver that expands configured targets.
"""

# Import main components for convenient access
from github_exporter.api.api_client import GitHubApiClient, Deadline
from github_exporter.api.repository_fetcher import RepositoryResolver, parse_target, glob_match
from github_exporter.api.models import Repository, Issue, PullRequest
from github_exporter.api.github_exceptions import GitHubException, GitHubAPIError, GitHubRateLimitError
