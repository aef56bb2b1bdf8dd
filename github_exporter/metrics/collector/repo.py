"""Repository metrics: counts, feature flags and timestamps per repository."""

from typing import Dict, Iterable, List, Optional, Tuple

from prometheus_client.core import GaugeMetricFamily

from github_exporter.api.api_client import Deadline
from github_exporter.api.models import Repository
from github_exporter.metrics.collector.base import BaseCollector
from github_exporter.metrics.utils import bool_to_float, int_or_empty, timestamp_value

LABELS = ("owner", "name")

ALL_LABELS = ("forks", "network", "issues", "stargazers", "subscribers", "watchers", "size")

# Count gauges: (metric name, help, record attribute)
COUNT_METRICS = (
    ("github_repo_forks", "How often has this repository been forked", "forks_count"),
    ("github_repo_network", "Number of repositories in the network", "network_count"),
    ("github_repo_issues", "Number of open issues on this repository", "open_issues_count"),
    ("github_repo_stargazers", "Number of stargazers on this repository", "stargazers_count"),
    ("github_repo_subscribers", "Number of subscribers on this repository", "subscribers_count"),
    ("github_repo_watchers", "Number of watchers on this repository", "watchers_count"),
    ("github_repo_size", "Size of the repository content", "size"),
)

FLAG_METRICS = (
    ("github_repo_forked", "Show if this repository is a forked repository", "fork"),
    ("github_repo_allow_rebase_merge", "Show if this repository allows rebase merges", "allow_rebase_merge"),
    ("github_repo_allow_squash_merge", "Show if this repository allows squash merges", "allow_squash_merge"),
    ("github_repo_allow_merge_commit", "Show if this repository allows merge commits", "allow_merge_commit"),
    ("github_repo_archived", "Show if this repository have been archived", "archived"),
    ("github_repo_private", "Show if this repository is private", "private"),
    ("github_repo_has_issues", "Show if this repository got issues enabled", "has_issues"),
    ("github_repo_has_wiki", "Show if this repository got wiki enabled", "has_wiki"),
    ("github_repo_has_pages", "Show if this repository got pages enabled", "has_pages"),
    ("github_repo_has_projects", "Show if this repository got projects enabled", "has_projects"),
    ("github_repo_has_downloads", "Show if this repository got downloads enabled", "has_downloads"),
)

TIMESTAMP_METRICS = (
    ("github_repo_pushed_timestamp", "Timestamp of the last push to repo", "pushed_at"),
    ("github_repo_created_timestamp", "Timestamp of the creation of repo", "created_at"),
    ("github_repo_updated_timestamp", "Timestamp of the last modification of repo", "updated_at"),
)


class RepoCollector(BaseCollector):
    """Collects metrics about repositories."""

    kind = "repo"
    families = (("github_repo_all", "All info about github repo", ALL_LABELS),) + tuple(
        (name, documentation, LABELS)
        for name, documentation, _ in COUNT_METRICS + FLAG_METRICS + TIMESTAMP_METRICS
    )

    @property
    def fetch_failure_message(self) -> str:
        return "Failed to fetch repos"

    def fetch(self, repository: Repository, deadline: Optional[Deadline]) -> List[Repository]:
        # Resolution already returned the full record
        return [repository]

    def fetch_batches(self, target: str,
                      repositories: List[Repository]) -> Iterable[List[Tuple[int, Repository, Repository]]]:
        # One batch for the whole target, indexed by search position
        yield [
            (repository.position, repository, record)
            for repository in repositories
            for record in self.fetch(repository, None)
        ]

    def extract(self, families: Dict[str, GaugeMetricFamily], index: int,
                repository: Repository, record: Repository):
        labels = [record.owner, record.name]

        for name, _, attribute in FLAG_METRICS:
            value = getattr(record, attribute)
            if value is not None:
                families[name].add_metric(labels, bool_to_float(value))

        for name, _, attribute in COUNT_METRICS:
            value = getattr(record, attribute)
            if value is not None:
                families[name].add_metric(labels, float(value))

        for name, _, attribute in TIMESTAMP_METRICS:
            value = getattr(record, attribute)
            if value is not None:
                families[name].add_metric(labels, timestamp_value(value))

        families["github_repo_all"].add_metric(
            [int_or_empty(getattr(record, attribute)) for _, _, attribute in COUNT_METRICS],
            float(index),
        )
