"""Pull request metrics: one sample per pull request on the first page of each repository."""

from typing import Dict, List, Optional

from prometheus_client.core import GaugeMetricFamily

from github_exporter.api.api_client import Deadline
from github_exporter.api.models import PullRequest, Repository
from github_exporter.metrics.collector.base import BaseCollector
from github_exporter.metrics.utils import (
    bool_or_empty,
    int_or_empty,
    join_or_empty,
    string_or_empty,
    time_or_empty,
)

ALL_LABELS = (
    "number",
    "state",
    "title",
    "body",
    "created_at",
    "labels",
    "user",
    "merged",
    "comments",
    "commits",
    "additions",
    "deletions",
    "changed_files",
    "html_url",
    "review_comments",
    "assignee",
    "assignees",
    "author_association",
    "requested_reviewers",
)


class PullRequestCollector(BaseCollector):
    """Collects metrics about pull requests."""

    kind = "pull_request"
    families = (
        ("github_pull_requests_all", "All info about github pull requests", ALL_LABELS),
    )
    failure_log_level = "warning"

    @property
    def fetch_failure_message(self) -> str:
        return "Failed to fetch pull requests"

    def fetch(self, repository: Repository, deadline: Deadline) -> List[Optional[PullRequest]]:
        items = self.api_client.list_pull_requests(repository.owner, repository.name, deadline,
                                                   per_page=self.per_page)
        return [PullRequest.from_api(item) if item else None for item in items]

    def extract(self, families: Dict[str, GaugeMetricFamily], index: int,
                repository: Repository, record: PullRequest):
        families["github_pull_requests_all"].add_metric(
            [
                int_or_empty(record.number),
                string_or_empty(record.state),
                string_or_empty(record.title),
                string_or_empty(record.body),
                time_or_empty(record.created_at),
                join_or_empty(record.labels),
                string_or_empty(record.user),
                bool_or_empty(record.merged),
                int_or_empty(record.comments),
                int_or_empty(record.commits),
                int_or_empty(record.additions),
                int_or_empty(record.deletions),
                int_or_empty(record.changed_files),
                string_or_empty(record.html_url),
                int_or_empty(record.review_comments),
                string_or_empty(record.assignee),
                join_or_empty(record.assignees),
                string_or_empty(record.author_association),
                join_or_empty(record.requested_reviewers),
            ],
            float(index),
        )
