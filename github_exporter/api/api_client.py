"""
GitHub API client for the REST endpoints the exporter polls.

This module provides a client for making authenticated requests to the
GitHub REST API, translating transport and HTTP failures into the
exporter's exception hierarchy. It performs no retries and no caching:
every scrape sees fresh data, and failures are left to the caller to count.
"""
import logging
import time
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

import requests

from github_exporter.utils.connection_manager import ConnectionManager, mask_token
from github_exporter.api.github_exceptions import (
    GitHubAPIError,
    GitHubAuthenticationError,
    GitHubNetworkError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubServerError,
    GitHubTimeoutError,
)

# Configure logging
logger = logging.getLogger(__name__)

GITHUB_REST_API_URL = "https://api.github.com"

# Page size used when expanding glob targets through the search endpoint
SEARCH_PER_PAGE = 50


class Deadline:
    """Time budget shared by every request made for one target."""

    def __init__(self, timeout: float, clock=time.monotonic):
        self._clock = clock
        self.timeout = timeout
        self.expires_at = clock() + timeout

    def remaining(self) -> float:
        """Seconds left before the deadline.

        Raises:
            GitHubTimeoutError: If the deadline has already passed
        """
        left = self.expires_at - self._clock()
        if left <= 0:
            raise GitHubTimeoutError(f"Deadline of {self.timeout:g}s exceeded")
        return left


class GitHubApiClient:
    """Client for the GitHub REST API."""

    def __init__(self, token: Optional[str] = None, base_url: str = GITHUB_REST_API_URL,
                 connection_manager: Optional[ConnectionManager] = None):
        """Initialize the API client.

        Args:
            token: Optional bearer token; requests are anonymous without one
            base_url: API root, e.g. https://github.example.com/api/v3 for Enterprise
            connection_manager: Optional manager for HTTP connections
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.connection_manager = connection_manager or ConnectionManager()

    def get_repository(self, owner: str, name: str, deadline: Deadline) -> Dict[str, Any]:
        """Fetch a single repository.

        Args:
            owner: Repository owner login
            name: Repository name
            deadline: Time budget for the call

        Returns:
            Repository JSON object
        """
        data, _ = self.execute_rest_api_call(f"/repos/{owner}/{name}", deadline=deadline)
        return data

    def search_repositories(self, query_text: str, deadline: Deadline, page: Optional[int] = None,
                            per_page: int = SEARCH_PER_PAGE) -> Tuple[List[Dict[str, Any]], Optional[int]]:
        """Run one page of a repository search.

        Args:
            query_text: Search query, e.g. "user:acme"
            deadline: Time budget for the call
            page: Page to fetch, None for the first page
            per_page: Results per page

        Returns:
            Tuple of the page's repository items and the next page number,
            or None when the response signals no further page
        """
        params = {"q": query_text, "per_page": per_page}
        if page:
            params["page"] = page

        data, next_page = self.execute_rest_api_call("/search/repositories", params=params, deadline=deadline)
        items = (data.get("items") or []) if isinstance(data, dict) else []
        return items, next_page

    def list_issues(self, owner: str, name: str, deadline: Deadline,
                    per_page: Optional[int] = None) -> List[Dict[str, Any]]:
        """List the first page of a repository's issues."""
        params = {"per_page": per_page} if per_page else None
        data, _ = self.execute_rest_api_call(f"/repos/{owner}/{name}/issues", params=params, deadline=deadline)
        return data if isinstance(data, list) else []

    def list_pull_requests(self, owner: str, name: str, deadline: Deadline,
                           per_page: Optional[int] = None) -> List[Dict[str, Any]]:
        """List the first page of a repository's pull requests."""
        params = {"per_page": per_page} if per_page else None
        data, _ = self.execute_rest_api_call(f"/repos/{owner}/{name}/pulls", params=params, deadline=deadline)
        return data if isinstance(data, list) else []

    def execute_rest_api_call(self, endpoint: str, deadline: Deadline,
                              params: Optional[Dict[str, Any]] = None) -> Tuple[Any, Optional[int]]:
        """Execute a GET request against the REST API.

        Args:
            endpoint: API endpoint path (e.g., "/repos/owner/repo")
            deadline: Time budget; the remaining time bounds this request
            params: Optional URL parameters

        Returns:
            Tuple of the decoded JSON body and the next page number (or None)

        Raises:
            GitHubTimeoutError: If the deadline passes or the request times out
            GitHubNetworkError: If the connection fails
            GitHubAPIError: If the API answers with an error status
        """
        headers = {
            "Accept": "application/vnd.github.v3+json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        url = f"{self.base_url}{endpoint}"
        timeout = deadline.remaining()

        start_time = time.time()
        try:
            session = self.connection_manager.get_session(self.token)
            response = session.get(url, headers=headers, params=params, timeout=timeout)
        except requests.exceptions.Timeout as e:
            raise GitHubTimeoutError(f"Request to {endpoint} timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            raise GitHubNetworkError(f"Request to {endpoint} failed: {e}") from e

        logger.debug(f"GET {endpoint} -> {response.status_code} in {time.time() - start_time:.3f}s "
                     f"(token {mask_token(self.token)})")

        if response.status_code >= 400:
            raise self._error_for_response(endpoint, response)

        try:
            data = response.json() if response.content else {}
        except ValueError as e:
            raise GitHubAPIError(f"Invalid JSON from {endpoint}: {e}", response.status_code) from e

        return data, next_page_number(response)

    def _error_for_response(self, endpoint: str, response: requests.Response) -> GitHubAPIError:
        """Map an error response to the matching exception."""
        status = response.status_code
        try:
            message = (response.json() or {}).get("message", "")
        except ValueError:
            message = response.text[:200]

        detail = f"GitHub API error {status} for {endpoint}: {message}".rstrip(": ")

        if status == 401:
            return GitHubAuthenticationError(detail, status)
        if status == 429 or (status == 403 and (
                response.headers.get("X-RateLimit-Remaining") == "0"
                or "rate limit" in message.lower())):
            return GitHubRateLimitError(detail, status)
        if status == 404:
            return GitHubNotFoundError(detail, status)
        if status >= 500:
            return GitHubServerError(detail, status)
        return GitHubAPIError(detail, status)


def next_page_number(response: requests.Response) -> Optional[int]:
    """Extract the next page number from a response's Link header.

    Returns:
        The page number of the rel="next" link, or None if there is none
    """
    next_link = response.links.get("next") if response.links else None
    if not next_link or not next_link.get("url"):
        return None

    query = parse_qs(urlparse(next_link["url"]).query)
    try:
        return int(query["page"][0])
    except (KeyError, IndexError, ValueError):
        return None
