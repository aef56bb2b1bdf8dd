"""Issue metrics: one sample per issue on the first page of each repository."""

from typing import Dict, List, Optional

from prometheus_client.core import GaugeMetricFamily

from github_exporter.api.api_client import Deadline
from github_exporter.api.models import Issue, Repository
from github_exporter.metrics.collector.base import BaseCollector
from github_exporter.metrics.utils import (
    bool_or_empty,
    first_or_empty,
    int_or_empty,
    string_or_empty,
    time_or_empty,
)

ALL_LABELS = (
    "id",
    "status",
    "locked",
    "title",
    "body",
    "user",
    "author_association",
    "label",
    "num_comments",
    "created_at",
    "updated_at",
    "url",
    "html_url",
    "reactions_total",
    "reactions_plus_one",
    "reactions_minus_one",
    "assignee",
)


class IssueCollector(BaseCollector):
    """Collects metrics about issues."""

    kind = "issue"
    families = (
        ("github_issues_all", "All info about github issues", ALL_LABELS),
    )
    failure_log_level = "warning"

    @property
    def fetch_failure_message(self) -> str:
        return "Failed to fetch issues"

    def fetch(self, repository: Repository, deadline: Deadline) -> List[Optional[Issue]]:
        items = self.api_client.list_issues(repository.owner, repository.name, deadline, per_page=self.per_page)
        return [Issue.from_api(item) if item else None for item in items]

    def extract(self, families: Dict[str, GaugeMetricFamily], index: int,
                repository: Repository, record: Issue):
        families["github_issues_all"].add_metric(
            [
                int_or_empty(record.id),
                string_or_empty(record.state),
                bool_or_empty(record.locked),
                string_or_empty(record.title),
                string_or_empty(record.body),
                string_or_empty(record.user),
                string_or_empty(record.author_association),
                first_or_empty(record.labels),
                int_or_empty(record.comments),
                time_or_empty(record.created_at),
                time_or_empty(record.updated_at),
                string_or_empty(record.url),
                string_or_empty(record.html_url),
                int_or_empty(record.reactions.total_count),
                int_or_empty(record.reactions.plus_one),
                int_or_empty(record.reactions.minus_one),
                string_or_empty(record.assignee),
            ],
            float(index),
        )
