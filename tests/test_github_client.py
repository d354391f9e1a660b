"""Tests for the GitHub GraphQL client."""
from datetime import datetime, timezone
import pytest
from collector.domain.errors import GitHubAPIError
from collector.infrastructure.github_client import (
    GitHubGraphQLClient,
    RepositoryQuery,
    parse_repository_result,
)


def _result(language="Go", branch=True):
    repository = {
        "pullRequests": {"totalCount": 3},
        "stargazers": {"totalCount": 10},
        "watchers": {"totalCount": 2},
        "issues": {"totalCount": 1},
        "primaryLanguage": {"name": language} if language else None,
        "defaultBranchRef": None,
    }
    if branch:
        repository["defaultBranchRef"] = {
            "name": "main",
            "target": {
                "history": {
                    "totalCount": 2,
                    "nodes": [
                        {"committedDate": "2024-03-13T08:00:00Z"},
                        {"committedDate": "2024-02-24T08:00:00Z"},
                    ],
                }
            },
        }
    return {"repository": repository}


def test_query_variables_are_built_per_call():
    since = datetime(2024, 2, 15, 12, 0, 0, tzinfo=timezone.utc)

    first = RepositoryQuery(owner="acme", name="repo1", since=since)
    second = RepositoryQuery(owner="acme", name="repo2", since=since)

    assert first.variable_values() == {
        "owner": "acme",
        "name": "repo1",
        "since": "2024-02-15T12:00:00Z",
    }
    assert second.variable_values()["name"] == "repo2"


def test_parse_repository_result():
    metadata = parse_repository_result(_result())

    assert metadata.pull_requests_count == 3
    assert metadata.stargazers_count == 10
    assert metadata.watchers_count == 2
    assert metadata.issues_count == 1
    assert metadata.primary_language == "Go"
    assert metadata.commit_history == ("2024-03-13T08:00:00Z", "2024-02-24T08:00:00Z")
    assert metadata.history_total_count == 2


def test_parse_repository_result_without_language_or_branch():
    metadata = parse_repository_result(_result(language=None, branch=False))

    assert metadata.primary_language == ""
    assert metadata.commit_history == ()
    assert metadata.history_total_count == 0


def test_parse_repository_result_missing_repository():
    with pytest.raises(GitHubAPIError):
        parse_repository_result({"repository": None})


@pytest.mark.asyncio
async def test_fetch_metadata_sends_query_variables(monkeypatch):
    client = GitHubGraphQLClient("token")
    queries = []

    async def fake_execute_query(query):
        queries.append(query)
        return _result()

    monkeypatch.setattr(client, "_execute_query", fake_execute_query)
    since = datetime(2024, 2, 15, tzinfo=timezone.utc)

    metadata = await client.fetch_metadata("acme", "repo1", since)

    assert queries == [RepositoryQuery(owner="acme", name="repo1", since=since)]
    assert metadata.primary_language == "Go"


@pytest.mark.asyncio
async def test_fetch_metadata_wraps_unexpected_shape(monkeypatch):
    client = GitHubGraphQLClient("token")

    async def fake_execute_query(query):
        return {"repository": {"pullRequests": {}}}

    monkeypatch.setattr(client, "_execute_query", fake_execute_query)

    with pytest.raises(GitHubAPIError):
        await client.fetch_metadata("acme", "repo1", datetime(2024, 2, 15, tzinfo=timezone.utc))


class _FailingClient:
    async def __aenter__(self):
        raise ConnectionError("connection refused")

    async def __aexit__(self, *exc_info):
        return False


@pytest.mark.asyncio
async def test_transport_errors_become_api_errors():
    client = GitHubGraphQLClient("token")
    client._client = _FailingClient()

    with pytest.raises(GitHubAPIError, match="connection refused"):
        await client.fetch_metadata("acme", "repo1", datetime(2024, 2, 15, tzinfo=timezone.utc))
