"""
Repository resolution for the GitHub exporter.

This module turns configured ``owner/name`` targets into the concrete
repositories to report on. Plain names are fetched directly; names
containing ``*`` are expanded through a paginated user-scoped search and
filtered with an anchored glob match.
"""

import logging
import re
from typing import List, Optional, Tuple

from github_exporter.api.api_client import Deadline, SEARCH_PER_PAGE
from github_exporter.api.github_exceptions import InvalidTargetError
from github_exporter.api.models import Repository
from github_exporter.interfaces import IGitHubClient

# Configure logging
logger = logging.getLogger(__name__)

GLOB_WILDCARD = "*"


def parse_target(target: str) -> Tuple[str, str]:
    """Split a target into owner and name.

    Args:
        target: Configured target, e.g. "acme/web" or "acme/*-service"

    Returns:
        Tuple of (owner, name)

    Raises:
        InvalidTargetError: If the target does not have exactly two segments
    """
    parts = target.split("/")
    if len(parts) != 2:
        raise InvalidTargetError(f"Invalid repo name {target!r}, expected owner/name")
    return parts[0], parts[1]


def glob_match(pattern: str, subject: str) -> bool:
    """Match a subject against a pattern where ``*`` matches any run of characters.

    The match is case-sensitive and anchored at both ends. No other
    character has a special meaning.
    """
    if GLOB_WILDCARD not in pattern:
        return pattern == subject

    regex = ".*".join(re.escape(part) for part in pattern.split(GLOB_WILDCARD))
    return re.fullmatch(regex, subject, flags=re.DOTALL) is not None


class RepositoryResolver:
    """Resolves configured targets to repository records."""

    def __init__(self, api_client: IGitHubClient, per_page: int = SEARCH_PER_PAGE):
        """Initialize the resolver.

        Args:
            api_client: Client used for the get and search calls
            per_page: Page size for glob expansion searches
        """
        self.api_client = api_client
        self.per_page = per_page

    def resolve(self, target: str, deadline: Deadline) -> List[Repository]:
        """Resolve one target to the repositories it names.

        Args:
            target: Configured ``owner/name`` target
            deadline: Time budget for every call made for this target

        Returns:
            List of repository records, in API order. Each record's owner
            is the owner as written in the target and its position is its
            index among the unfiltered search results (0 for a direct fetch).

        Raises:
            InvalidTargetError: If the target is malformed
            GitHubException: If an API call fails
        """
        owner, name = parse_target(target)

        if GLOB_WILDCARD in name:
            repositories = []
            for position, repo in enumerate(self.search_owner_repositories(owner, deadline)):
                if repo.full_name is None or not glob_match(target, repo.full_name):
                    continue
                repo.owner = owner
                repo.position = position
                repositories.append(repo)

            logger.debug(f"Target {target} matched {len(repositories)} repositories")
            return repositories

        data = self.api_client.get_repository(owner, name, deadline)
        repo = Repository.from_api(data)
        repo.owner = owner
        return [repo]

    def search_owner_repositories(self, owner: str, deadline: Deadline) -> List[Repository]:
        """Page through every repository the search endpoint lists for an owner."""
        repositories = []
        page: Optional[int] = None

        while True:
            items, next_page = self.api_client.search_repositories(
                f"user:{owner}",
                deadline=deadline,
                page=page,
                per_page=self.per_page,
            )

            repositories.extend(Repository.from_api(item, from_search=True) for item in items)

            if not next_page:
                break

            page = next_page

        return repositories
