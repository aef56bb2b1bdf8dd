"""
Unit tests for the GitHub REST client.

Tests the request construction and the mapping of transport and HTTP
failures onto the exporter's exceptions:
- Authentication and accept headers
- Link header pagination
- Status code to exception mapping
- Per-target deadlines
"""

from unittest.mock import Mock

import pytest
import requests

from github_exporter.api.api_client import Deadline, GitHubApiClient, next_page_number
from github_exporter.api.github_exceptions import (
    GitHubAPIError,
    GitHubAuthenticationError,
    GitHubNetworkError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubServerError,
    GitHubTimeoutError,
)


# ============================================================================
# Fixtures
# ============================================================================

def make_response(status_code=200, body=None, links=None, headers=None):
    response = Mock()
    response.status_code = status_code
    response.content = b"{}" if body is None else b"payload"
    response.json.return_value = {} if body is None else body
    response.links = links or {}
    response.headers = headers or {}
    response.text = ""
    return response


@pytest.fixture
def session():
    return Mock()


@pytest.fixture
def client(session):
    connection_manager = Mock()
    connection_manager.get_session.return_value = session
    return GitHubApiClient(token="ghp_testtoken123", connection_manager=connection_manager)


@pytest.fixture
def deadline():
    return Deadline(10)


# ============================================================================
# Request construction
# ============================================================================

class TestRequests:
    """Test suite for the requests the client sends."""

    def test_get_repository_sends_bearer_token(self, client, session, deadline):
        session.get.return_value = make_response(body={"name": "web"})

        result = client.get_repository("acme", "web", deadline)

        assert result == {"name": "web"}
        args, kwargs = session.get.call_args
        assert args[0] == "https://api.github.com/repos/acme/web"
        assert kwargs["headers"]["Authorization"] == "Bearer ghp_testtoken123"
        assert kwargs["headers"]["Accept"] == "application/vnd.github.v3+json"
        assert 0 < kwargs["timeout"] <= 10

    def test_anonymous_client_sends_no_authorization(self, session, deadline):
        connection_manager = Mock()
        connection_manager.get_session.return_value = session
        client = GitHubApiClient(connection_manager=connection_manager)
        session.get.return_value = make_response(body={"name": "web"})

        client.get_repository("acme", "web", deadline)

        assert "Authorization" not in session.get.call_args.kwargs["headers"]

    def test_enterprise_base_url_is_used(self, session, deadline):
        connection_manager = Mock()
        connection_manager.get_session.return_value = session
        client = GitHubApiClient(base_url="https://github.example.com/api/v3/",
                                 connection_manager=connection_manager)
        session.get.return_value = make_response(body=[])

        client.list_issues("acme", "web", deadline)

        assert session.get.call_args.args[0] == "https://github.example.com/api/v3/repos/acme/web/issues"

    def test_list_issues_passes_page_size(self, client, session, deadline):
        session.get.return_value = make_response(body=[{"id": 1}])

        result = client.list_issues("acme", "web", deadline, per_page=50)

        assert result == [{"id": 1}]
        assert session.get.call_args.kwargs["params"] == {"per_page": 50}

    def test_list_pull_requests_returns_empty_for_non_list_body(self, client, session, deadline):
        session.get.return_value = make_response(body={"unexpected": True})

        assert client.list_pull_requests("acme", "web", deadline) == []


# ============================================================================
# Pagination
# ============================================================================

class TestSearchPagination:
    """Test suite for search paging via the Link header."""

    def test_search_returns_items_and_next_page(self, client, session, deadline):
        session.get.return_value = make_response(
            body={"items": [{"full_name": "acme/web"}]},
            links={"next": {"url": "https://api.github.com/search/repositories?q=user%3Aacme&page=3"}},
        )

        items, next_page = client.search_repositories("user:acme", deadline, page=2)

        assert items == [{"full_name": "acme/web"}]
        assert next_page == 3
        assert session.get.call_args.kwargs["params"] == {"q": "user:acme", "per_page": 50, "page": 2}

    def test_search_without_next_link_ends_pagination(self, client, session, deadline):
        session.get.return_value = make_response(
            body={"items": []},
            links={"last": {"url": "https://api.github.com/search/repositories?page=1"}},
        )

        _, next_page = client.search_repositories("user:acme", deadline)

        assert next_page is None

    def test_next_page_number_ignores_links_without_page(self):
        response = make_response(links={"next": {"url": "https://api.github.com/search?cursor=abc"}})

        assert next_page_number(response) is None


# ============================================================================
# Error mapping
# ============================================================================

class TestErrorMapping:
    """Test suite for HTTP status and transport error handling."""

    @pytest.mark.parametrize("status,headers,body,expected", [
        (401, {}, {"message": "Bad credentials"}, GitHubAuthenticationError),
        (403, {"X-RateLimit-Remaining": "0"}, {"message": "Forbidden"}, GitHubRateLimitError),
        (403, {}, {"message": "API rate limit exceeded for user"}, GitHubRateLimitError),
        (429, {}, {"message": "Too many requests"}, GitHubRateLimitError),
        (404, {}, {"message": "Not Found"}, GitHubNotFoundError),
        (502, {}, {"message": "Bad Gateway"}, GitHubServerError),
        (422, {}, {"message": "Validation Failed"}, GitHubAPIError),
    ])
    def test_status_codes_map_to_exceptions(self, client, session, deadline, status, headers, body, expected):
        session.get.return_value = make_response(status_code=status, body=body, headers=headers)

        with pytest.raises(expected) as excinfo:
            client.get_repository("acme", "web", deadline)

        assert excinfo.value.status_code == status

    def test_forbidden_without_rate_limit_is_plain_api_error(self, client, session, deadline):
        session.get.return_value = make_response(status_code=403, body={"message": "Resource not accessible"})

        with pytest.raises(GitHubAPIError) as excinfo:
            client.get_repository("acme", "web", deadline)

        assert not isinstance(excinfo.value, GitHubRateLimitError)

    def test_request_timeout_raises_timeout_error(self, client, session, deadline):
        session.get.side_effect = requests.exceptions.ReadTimeout("read timed out")

        with pytest.raises(GitHubTimeoutError):
            client.get_repository("acme", "web", deadline)

    def test_connection_failure_raises_network_error(self, client, session, deadline):
        session.get.side_effect = requests.exceptions.ConnectionError("connection refused")

        with pytest.raises(GitHubNetworkError):
            client.get_repository("acme", "web", deadline)

    def test_invalid_json_raises_api_error(self, client, session, deadline):
        response = make_response(body={"name": "web"})
        response.json.side_effect = ValueError("Expecting value")
        session.get.return_value = response

        with pytest.raises(GitHubAPIError):
            client.get_repository("acme", "web", deadline)


# ============================================================================
# Deadlines
# ============================================================================

class TestDeadline:
    """Test suite for per-target time budgets."""

    def test_remaining_shrinks_with_time(self):
        now = [100.0]
        deadline = Deadline(5, clock=lambda: now[0])

        now[0] = 102.0

        assert deadline.remaining() == pytest.approx(3.0)

    def test_expired_deadline_raises(self):
        now = [100.0]
        deadline = Deadline(5, clock=lambda: now[0])

        now[0] = 105.5

        with pytest.raises(GitHubTimeoutError):
            deadline.remaining()

    def test_expired_deadline_skips_request(self, client, session):
        now = [0.0]
        deadline = Deadline(1, clock=lambda: now[0])
        now[0] = 2.0

        with pytest.raises(GitHubTimeoutError):
            client.get_repository("acme", "web", deadline)

        session.get.assert_not_called()
