"""
Typed records for the GitHub REST payloads the exporter reads.

Every field that GitHub may omit or send as null is Optional; None means
the field was absent upstream. Records are built fresh on every scrape.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

# Fields the search endpoint never returns for repositories
SEARCH_OMITTED_FIELDS = frozenset({
    "network_count",
    "subscribers_count",
    "allow_rebase_merge",
    "allow_squash_merge",
    "allow_merge_commit",
})


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a GitHub ISO-8601 timestamp into an aware datetime."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None


def _login(user: Optional[Dict[str, Any]]) -> Optional[str]:
    if not isinstance(user, dict):
        return None
    return user.get("login")


def _label_names(items: Optional[List[Optional[Dict[str, Any]]]]) -> List[Optional[str]]:
    """Label names in API order, None where a label carries no name."""
    return [item.get("name") if isinstance(item, dict) else None for item in items or []]


def _names(items: Optional[List[Optional[Dict[str, Any]]]], key: str) -> List[str]:
    names = []
    for item in items or []:
        if isinstance(item, dict) and item.get(key) is not None:
            names.append(item[key])
    return names


@dataclass
class Repository:
    """A repository as returned by the get or search endpoints."""

    owner: str
    name: str
    full_name: Optional[str] = None
    fork: Optional[bool] = None
    forks_count: Optional[int] = None
    network_count: Optional[int] = None
    open_issues_count: Optional[int] = None
    stargazers_count: Optional[int] = None
    subscribers_count: Optional[int] = None
    watchers_count: Optional[int] = None
    size: Optional[int] = None
    allow_rebase_merge: Optional[bool] = None
    allow_squash_merge: Optional[bool] = None
    allow_merge_commit: Optional[bool] = None
    archived: Optional[bool] = None
    private: Optional[bool] = None
    has_issues: Optional[bool] = None
    has_wiki: Optional[bool] = None
    has_pages: Optional[bool] = None
    has_projects: Optional[bool] = None
    has_downloads: Optional[bool] = None
    pushed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Index among the raw results the repository was resolved from
    position: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any], from_search: bool = False) -> "Repository":
        """Build a repository record from a REST payload.

        Args:
            data: Repository JSON object
            from_search: Whether the payload came from the search endpoint,
                which does not carry network, subscriber or merge settings

        Returns:
            Repository record
        """
        if from_search:
            data = {k: v for k, v in data.items() if k not in SEARCH_OMITTED_FIELDS}

        full_name = data.get("full_name")
        owner = _login(data.get("owner"))
        name = data.get("name")
        if full_name and (owner is None or name is None):
            split_owner, _, split_name = full_name.partition("/")
            owner = owner or split_owner
            name = name or split_name

        return cls(
            owner=owner or "",
            name=name or "",
            full_name=full_name,
            fork=data.get("fork"),
            forks_count=data.get("forks_count"),
            network_count=data.get("network_count"),
            open_issues_count=data.get("open_issues_count"),
            stargazers_count=data.get("stargazers_count"),
            subscribers_count=data.get("subscribers_count"),
            watchers_count=data.get("watchers_count"),
            size=data.get("size"),
            allow_rebase_merge=data.get("allow_rebase_merge"),
            allow_squash_merge=data.get("allow_squash_merge"),
            allow_merge_commit=data.get("allow_merge_commit"),
            archived=data.get("archived"),
            private=data.get("private"),
            has_issues=data.get("has_issues"),
            has_wiki=data.get("has_wiki"),
            has_pages=data.get("has_pages"),
            has_projects=data.get("has_projects"),
            has_downloads=data.get("has_downloads"),
            pushed_at=parse_timestamp(data.get("pushed_at")),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
        )


@dataclass
class Reactions:
    total_count: Optional[int] = None
    plus_one: Optional[int] = None
    minus_one: Optional[int] = None

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "Reactions":
        if not isinstance(data, dict):
            return cls()
        return cls(
            total_count=data.get("total_count"),
            plus_one=data.get("+1"),
            minus_one=data.get("-1"),
        )


@dataclass
class Issue:
    """An issue from the repository issue list."""

    id: Optional[int] = None
    number: Optional[int] = None
    state: Optional[str] = None
    locked: Optional[bool] = None
    title: Optional[str] = None
    body: Optional[str] = None
    user: Optional[str] = None
    author_association: Optional[str] = None
    labels: List[Optional[str]] = field(default_factory=list)
    comments: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    url: Optional[str] = None
    html_url: Optional[str] = None
    reactions: Reactions = field(default_factory=Reactions)
    assignee: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Issue":
        return cls(
            id=data.get("id"),
            number=data.get("number"),
            state=data.get("state"),
            locked=data.get("locked"),
            title=data.get("title"),
            body=data.get("body"),
            user=_login(data.get("user")),
            author_association=data.get("author_association"),
            labels=_label_names(data.get("labels")),
            comments=data.get("comments"),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
            url=data.get("url"),
            html_url=data.get("html_url"),
            reactions=Reactions.from_api(data.get("reactions")),
            assignee=_login(data.get("assignee")),
        )


@dataclass
class PullRequest:
    """A pull request from the repository pull list.

    The list endpoint omits merged, comment and diff statistics; those
    stay None unless the payload carries them.
    """

    number: Optional[int] = None
    state: Optional[str] = None
    title: Optional[str] = None
    body: Optional[str] = None
    created_at: Optional[datetime] = None
    labels: List[str] = field(default_factory=list)
    user: Optional[str] = None
    merged: Optional[bool] = None
    comments: Optional[int] = None
    commits: Optional[int] = None
    additions: Optional[int] = None
    deletions: Optional[int] = None
    changed_files: Optional[int] = None
    html_url: Optional[str] = None
    review_comments: Optional[int] = None
    assignee: Optional[str] = None
    assignees: List[str] = field(default_factory=list)
    author_association: Optional[str] = None
    requested_reviewers: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PullRequest":
        return cls(
            number=data.get("number"),
            state=data.get("state"),
            title=data.get("title"),
            body=data.get("body"),
            created_at=parse_timestamp(data.get("created_at")),
            labels=_names(data.get("labels"), "name"),
            user=_login(data.get("user")),
            merged=data.get("merged"),
            comments=data.get("comments"),
            commits=data.get("commits"),
            additions=data.get("additions"),
            deletions=data.get("deletions"),
            changed_files=data.get("changed_files"),
            html_url=data.get("html_url"),
            review_comments=data.get("review_comments"),
            assignee=_login(data.get("assignee")),
            assignees=_names(data.get("assignees"), "login"),
            author_association=data.get("author_association"),
            requested_reviewers=_names(data.get("requested_reviewers"), "login"),
        )
