"""
Pytest configuration shared by the exporter tests.
"""

from unittest.mock import Mock

import pytest
from prometheus_client import CollectorRegistry

from github_exporter.metrics.request_metrics import RequestMetrics


@pytest.fixture
def registry():
    """A fresh registry per test so metric values never leak between tests."""
    return CollectorRegistry()


@pytest.fixture
def request_metrics(registry):
    return RequestMetrics(registry)


@pytest.fixture
def api_client():
    """Mock GitHub client exposing only the calls the collectors make."""
    return Mock(spec=["get_repository", "search_repositories", "list_issues", "list_pull_requests"])


@pytest.fixture
def repo_payload():
    """Factory for repository payloads as the REST API returns them."""
    def make(owner, name, **fields):
        payload = {
            "name": name,
            "full_name": f"{owner}/{name}",
            "owner": {"login": owner},
        }
        payload.update(fields)
        return payload
    return make


@pytest.fixture
def collect_samples():
    """Run one poll of a collector and index its samples by family name."""
    def collect(collector):
        return {family.name: family.samples for family in collector.collect()}
    return collect
