"""
Shared collector skeleton for the GitHub exporter.

Every scrape runs ``collect()`` in the scrape request thread. For each
configured target the collector resolves repositories, fetches the records
of its kind, extracts labels from each record and emits one sample per
record. An error on one target (or one repository of a glob target) is
counted and logged, and the collector moves on to the next one.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from prometheus_client.core import GaugeMetricFamily

from github_exporter.api.api_client import Deadline
from github_exporter.api.github_exceptions import ConfigurationError, GitHubException
from github_exporter.api.models import Repository
from github_exporter.api.repository_fetcher import RepositoryResolver
from github_exporter.interfaces import IGitHubClient, IRequestMetrics
from github_exporter.utils.error_handling import log_error

logger = logging.getLogger(__name__)

# (name, help, label names) for every metric family a collector exposes
FamilySpec = Tuple[str, str, Sequence[str]]


class BaseCollector(ABC):
    """Poll-extract-emit cycle common to all record kinds.

    Subclasses declare their metric families and provide the fetch and
    extract steps for their record kind.
    """

    kind: str = ""
    families: Sequence[FamilySpec] = ()
    # Level used when an API call for a target fails
    failure_log_level: str = "error"

    def __init__(self, api_client: IGitHubClient, request_metrics: IRequestMetrics,
                 targets: List[str], timeout: float,
                 resolver: Optional[RepositoryResolver] = None,
                 per_page: Optional[int] = None,
                 stop_event: Optional[threading.Event] = None):
        """Initialize the collector.

        Args:
            api_client: Client for the GitHub REST API
            request_metrics: Shared failure and duration metrics
            targets: Configured owner/name patterns, in order
            timeout: Seconds allowed for the calls of one target
            resolver: Optional resolver, built from api_client if omitted
            per_page: Optional page size for list calls
            stop_event: Set when the process is shutting down
        """
        self.api_client = api_client
        self.request_metrics = request_metrics
        self.targets = list(targets)
        self.timeout = timeout
        self.resolver = resolver or RepositoryResolver(api_client)
        self.per_page = per_page
        self.stop_event = stop_event or threading.Event()

        self.request_metrics.init_collector(self.kind)

    def describe(self) -> List[GaugeMetricFamily]:
        """Return the sample-free descriptors of every family this collector emits."""
        return list(self._new_families().values())

    def collect(self) -> Iterator[GaugeMetricFamily]:
        """Poll every target and yield the resulting metric families."""
        families = self._new_families()

        for target in self.targets:
            if self.stop_event.is_set():
                logger.info(f"Shutdown requested, stopping {self.kind} collection early")
                break

            self.collect_target(target, families)

        return iter(families.values())

    def collect_target(self, target: str, families: Dict[str, GaugeMetricFamily]):
        """Resolve, fetch, extract and emit for one target."""
        start_time = time.time()
        try:
            try:
                repositories = self.resolver.resolve(target, self.new_deadline())
            except ConfigurationError as e:
                self._record_failure("Invalid repo name", e, target, level="error")
                return
            except GitHubException as e:
                self._record_failure(self.fetch_failure_message, e, target)
                return

            for records in self.fetch_batches(target, repositories):
                for index, repository, record in records:
                    self.extract(families, index, repository, record)
        finally:
            self.request_metrics.observe_duration(self.kind, time.time() - start_time)

    def fetch_batches(self, target: str,
                      repositories: List[Repository]) -> Iterable[List[Tuple[int, Repository, Any]]]:
        """Fetch the records of every resolved repository.

        Yields one list of (index, repository, record) triples per
        repository, where index is the record's position in the API
        response. Empty entries keep their index but emit nothing. A
        repository whose call fails is counted and skipped.
        """
        for repository in repositories:
            if self.stop_event.is_set():
                return
            try:
                records = self.fetch(repository, self.new_deadline())
            except GitHubException as e:
                self._record_failure(self.fetch_failure_message, e,
                                     f"{repository.owner}/{repository.name}")
                continue

            yield [(index, repository, record) for index, record in enumerate(records) if record is not None]

    @abstractmethod
    def fetch(self, repository: Repository, deadline: Optional[Deadline]) -> List[Any]:
        """Fetch the records of this kind for one repository, None for empty entries."""

    @abstractmethod
    def extract(self, families: Dict[str, GaugeMetricFamily], index: int,
                repository: Repository, record: Any):
        """Add the samples for one record to the families."""

    @property
    def fetch_failure_message(self) -> str:
        return f"Failed to fetch {self.kind} records"

    def new_deadline(self) -> Deadline:
        return Deadline(self.timeout)

    def _new_families(self) -> Dict[str, GaugeMetricFamily]:
        return {
            name: GaugeMetricFamily(name, documentation, labels=list(labels))
            for name, documentation, labels in self.families
        }

    def _record_failure(self, message: str, exception: Exception, target: str, level: Optional[str] = None):
        self.request_metrics.record_failure(self.kind)
        log_error(logger, message, exception=exception, level=level or self.failure_log_level,
                  traceback=False, collector=self.kind, name=target)
