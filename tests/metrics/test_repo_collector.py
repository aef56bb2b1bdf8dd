"""
Unit tests for the repository collector.

Tests the poll-extract-emit cycle for repositories:
- Gauges for counts, flags and timestamps
- Empty labels for absent fields
- Failure counting and isolation between targets
- Glob targets resolved through search
"""

import threading

import pytest

from github_exporter.api.github_exceptions import GitHubNetworkError, GitHubNotFoundError
from github_exporter.api.models import Repository
from github_exporter.metrics.collector.base import BaseCollector
from github_exporter.metrics.collector.repo import RepoCollector

FAILURES = "github_request_failures_total"
LABELS = {"owner": "acme", "name": "web"}


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def make_collector(api_client, request_metrics):
    def make(targets, **kwargs):
        return RepoCollector(api_client, request_metrics, targets, timeout=10, **kwargs)
    return make


@pytest.fixture
def full_repo(repo_payload):
    return repo_payload(
        "acme", "web",
        fork=False,
        forks_count=3,
        network_count=5,
        open_issues_count=7,
        stargazers_count=12,
        subscribers_count=4,
        watchers_count=12,
        size=2048,
        allow_rebase_merge=True,
        allow_squash_merge=False,
        allow_merge_commit=True,
        archived=False,
        private=True,
        has_issues=True,
        has_wiki=False,
        has_pages=False,
        has_projects=True,
        has_downloads=True,
        pushed_at="2024-01-01T00:00:00Z",
        created_at="2020-06-15T12:30:00Z",
        updated_at="2024-01-02T00:00:00Z",
    )


def sample_value(samples, family, labels):
    for sample in samples.get(family, []):
        if sample.labels == labels:
            return sample.value
    return None


# ============================================================================
# Emission
# ============================================================================

class TestRepoEmission:
    """Test suite for the gauges emitted per repository."""

    def test_direct_target_emits_every_gauge(self, make_collector, api_client, full_repo, collect_samples):
        api_client.get_repository.return_value = full_repo

        samples = collect_samples(make_collector(["acme/web"]))

        assert sample_value(samples, "github_repo_forks", LABELS) == 3
        assert sample_value(samples, "github_repo_network", LABELS) == 5
        assert sample_value(samples, "github_repo_issues", LABELS) == 7
        assert sample_value(samples, "github_repo_stargazers", LABELS) == 12
        assert sample_value(samples, "github_repo_subscribers", LABELS) == 4
        assert sample_value(samples, "github_repo_size", LABELS) == 2048
        assert sample_value(samples, "github_repo_forked", LABELS) == 0
        assert sample_value(samples, "github_repo_private", LABELS) == 1
        assert sample_value(samples, "github_repo_allow_squash_merge", LABELS) == 0
        assert sample_value(samples, "github_repo_pushed_timestamp", LABELS) == 1704067200
        assert sample_value(samples, "github_repo_updated_timestamp", LABELS) == 1704153600

    def test_all_metric_carries_counts_as_labels(self, make_collector, api_client, full_repo, collect_samples):
        api_client.get_repository.return_value = full_repo

        samples = collect_samples(make_collector(["acme/web"]))

        sample, = samples["github_repo_all"]
        assert sample.labels == {
            "forks": "3",
            "network": "5",
            "issues": "7",
            "stargazers": "12",
            "subscribers": "4",
            "watchers": "12",
            "size": "2048",
        }
        assert sample.value == 0

    def test_absent_fields_give_empty_labels_and_no_gauge(self, make_collector, api_client,
                                                          repo_payload, collect_samples):
        api_client.get_repository.return_value = repo_payload("acme", "web", forks_count=0)

        samples = collect_samples(make_collector(["acme/web"]))

        sample, = samples["github_repo_all"]
        assert sample.labels["forks"] == "0"
        assert sample.labels["stargazers"] == ""
        assert samples["github_repo_stargazers"] == []
        assert samples["github_repo_pushed_timestamp"] == []
        assert sample_value(samples, "github_repo_forks", LABELS) == 0

    def test_glob_target_emits_one_sample_per_match(self, make_collector, api_client,
                                                    repo_payload, collect_samples):
        api_client.search_repositories.return_value = (
            [
                repo_payload("acme", "auth-service", stargazers_count=1, network_count=8),
                repo_payload("acme", "web", stargazers_count=2),
                repo_payload("acme", "pay-service", stargazers_count=3),
            ],
            None,
        )

        samples = collect_samples(make_collector(["acme/*-service"]))

        assert [s.labels["name"] for s in samples["github_repo_stargazers"]] == ["auth-service", "pay-service"]
        # values are positions among the unfiltered search results
        assert [s.value for s in samples["github_repo_all"]] == [0, 2]
        # search results carry no network or subscriber counts
        assert samples["github_repo_network"] == []
        assert samples["github_repo_subscribers"] == []
        api_client.get_repository.assert_not_called()

    def test_positions_continue_across_search_pages(self, make_collector, api_client,
                                                    repo_payload, collect_samples):
        api_client.search_repositories.side_effect = [
            ([repo_payload("acme", "web"), repo_payload("acme", "docs")], 2),
            ([repo_payload("acme", "pay-service")], None),
        ]

        samples = collect_samples(make_collector(["acme/*-service"]))

        sample, = samples["github_repo_all"]
        assert sample.value == 2

    def test_owner_label_follows_configured_target(self, make_collector, api_client,
                                                   repo_payload, collect_samples):
        api_client.get_repository.return_value = repo_payload("acme", "web", stargazers_count=12)

        samples = collect_samples(make_collector(["Acme/web"]))

        assert sample_value(samples, "github_repo_stargazers", {"owner": "Acme", "name": "web"}) == 12


# ============================================================================
# Failures
# ============================================================================

class TestRepoFailures:
    """Test suite for failure counting and isolation."""

    def test_failure_counter_starts_at_zero(self, make_collector, registry):
        make_collector(["acme/web"])

        assert registry.get_sample_value(FAILURES, {"collector": "repo"}) == 0

    def test_malformed_target_counts_one_failure(self, make_collector, api_client, registry, collect_samples):
        samples = collect_samples(make_collector(["justaname"]))

        assert all(family_samples == [] for family_samples in samples.values())
        assert registry.get_sample_value(FAILURES, {"collector": "repo"}) == 1
        api_client.get_repository.assert_not_called()

    def test_failed_target_does_not_block_later_targets(self, make_collector, api_client, registry,
                                                        repo_payload, collect_samples):
        api_client.get_repository.side_effect = [
            GitHubNetworkError("connection refused"),
            repo_payload("acme", "web", stargazers_count=12),
        ]

        samples = collect_samples(make_collector(["acme/down", "acme/web"]))

        assert sample_value(samples, "github_repo_stargazers", LABELS) == 12
        assert registry.get_sample_value(FAILURES, {"collector": "repo"}) == 1

    def test_failures_accumulate_across_scrapes(self, make_collector, api_client, registry, collect_samples):
        api_client.get_repository.side_effect = GitHubNotFoundError("Not Found", status_code=404)
        collector = make_collector(["acme/missing"])

        collect_samples(collector)
        collect_samples(collector)

        assert registry.get_sample_value(FAILURES, {"collector": "repo"}) == 2

    def test_duration_observed_per_target(self, make_collector, api_client, registry,
                                          repo_payload, collect_samples):
        api_client.get_repository.return_value = repo_payload("acme", "web")

        collect_samples(make_collector(["acme/web", "bad-target"]))

        assert registry.get_sample_value("github_request_duration_seconds_count", {"collector": "repo"}) == 2


# ============================================================================
# Registry integration
# ============================================================================

class TestRepoRegistration:
    """Test suite for describe() and shutdown handling."""

    def test_describe_lists_families_without_calling_api(self, make_collector, api_client):
        families = make_collector(["acme/web"]).describe()

        names = {family.name for family in families}
        assert "github_repo_all" in names
        assert "github_repo_has_downloads" in names
        assert all(family.samples == [] for family in families)
        api_client.get_repository.assert_not_called()

    def test_registered_collector_is_scraped(self, make_collector, api_client, registry, repo_payload):
        api_client.get_repository.return_value = repo_payload("acme", "web", stargazers_count=12)
        registry.register(make_collector(["acme/web"]))

        assert registry.get_sample_value("github_repo_stargazers", LABELS) == 12

    def test_stop_event_skips_remaining_targets(self, make_collector, api_client, collect_samples):
        stop_event = threading.Event()
        stop_event.set()

        samples = collect_samples(make_collector(["acme/web"], stop_event=stop_event))

        assert samples["github_repo_all"] == []
        api_client.get_repository.assert_not_called()


# ============================================================================
# Collector contract
# ============================================================================

class TestCollectorContract:
    """Test suite for the hooks every collector must provide."""

    def test_collector_without_fetch_cannot_be_built(self, api_client, request_metrics):
        class NoFetchCollector(BaseCollector):
            kind = "nofetch"

            def extract(self, families, index, repository, record):
                pass

        with pytest.raises(TypeError):
            NoFetchCollector(api_client, request_metrics, ["acme/web"], timeout=10)

    def test_repo_fetch_returns_resolved_record(self, make_collector, repo_payload):
        repository = Repository.from_api(repo_payload("acme", "web"))

        assert make_collector(["acme/web"]).fetch(repository, None) == [repository]
