"""
Interfaces module for the GitHub exporter.

This module defines protocol classes for the seams between the collectors,
the resolver and the API client, so that collectors can be exercised
against any object with the same shape.
"""

from typing import Any, Dict, List, Optional, Protocol, Tuple


class IGitHubClient(Protocol):
    """Interface for the GitHub REST calls the collectors make."""

    def get_repository(self, owner: str, name: str, deadline) -> Dict[str, Any]:
        """Fetch a single repository."""
        ...

    def search_repositories(self, query_text: str, deadline, page: Optional[int] = None,
                            per_page: int = 50) -> Tuple[List[Dict[str, Any]], Optional[int]]:
        """Fetch one page of repository search results and the next page number."""
        ...

    def list_issues(self, owner: str, name: str, deadline,
                    per_page: Optional[int] = None) -> List[Dict[str, Any]]:
        """List the first page of a repository's issues."""
        ...

    def list_pull_requests(self, owner: str, name: str, deadline,
                           per_page: Optional[int] = None) -> List[Dict[str, Any]]:
        """List the first page of a repository's pull requests."""
        ...


class IRequestMetrics(Protocol):
    """Interface for the failure and duration metrics collectors report to."""

    def init_collector(self, kind: str) -> None:
        ...

    def record_failure(self, kind: str) -> None:
        ...

    def observe_duration(self, kind: str, seconds: float) -> None:
        ...
