from __future__ import annotations

import threading
from unittest.mock import MagicMock

import pytest
import requests

from catalog_ingestion.client import GitHubGraphQLClient, graphql_endpoint
from catalog_ingestion.config import GitHubIntegrationConfig
from catalog_ingestion.errors import GraphQLError


@pytest.mark.parametrize(
    "base, expected",
    [
        ("https://api.github.com", "https://api.github.com/graphql"),
        ("https://api.github.com/", "https://api.github.com/graphql"),
        ("https://ghe.example.com/api/v3", "https://ghe.example.com/api/graphql"),
    ],
)
def test_graphql_endpoint(base: str, expected: str) -> None:
    assert graphql_endpoint(base) == expected


def _session(payload=None, error: Exception = None, json_error: Exception = None):
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    response = MagicMock()
    response.json.return_value = payload
    if json_error is not None:
        response.json.side_effect = json_error
    if error is not None:
        response.raise_for_status.side_effect = error
    session.post.return_value = response
    return session


def _client(payload=None, error: Exception = None, json_error: Exception = None):
    session = _session(payload, error, json_error)
    integration = GitHubIntegrationConfig(token="secret-token")
    return GitHubGraphQLClient(integration, session_factory=lambda: session), session


def test_query_posts_document_and_returns_data() -> None:
    client, session = _client({"data": {"viewer": {"login": "bot"}}})

    data = client.query("query { viewer { login } }", {"cursor": None})

    assert data == {"viewer": {"login": "bot"}}
    assert session.headers["Authorization"] == "bearer secret-token"
    args, kwargs = session.post.call_args
    assert args == ("https://api.github.com/graphql",)
    assert kwargs["json"] == {"query": "query { viewer { login } }", "variables": {"cursor": None}}


def test_graphql_errors_are_raised() -> None:
    client, _ = _client({"data": None, "errors": [{"message": "Could not resolve to an Organization"}]})

    with pytest.raises(GraphQLError) as excinfo:
        client.query("query", {})

    assert "Could not resolve" in str(excinfo.value)
    assert excinfo.value.errors[0]["message"].startswith("Could not resolve")


def test_http_errors_are_raised() -> None:
    client, _ = _client(error=requests.HTTPError("401 Client Error"))

    with pytest.raises(GraphQLError, match="401"):
        client.query("query", {})


def test_non_json_body_is_a_graphql_error() -> None:
    client, _ = _client(json_error=ValueError("Expecting value: line 1 column 1"))

    with pytest.raises(GraphQLError, match="not JSON"):
        client.query("query", {})


def test_non_object_body_is_a_graphql_error() -> None:
    client, _ = _client(["unexpected"])

    with pytest.raises(GraphQLError, match="not a JSON object"):
        client.query("query", {})


def test_each_thread_gets_its_own_session() -> None:
    sessions = []

    def factory():
        session = _session({"data": {}})
        sessions.append(session)
        return session

    client = GitHubGraphQLClient(GitHubIntegrationConfig(token="t"), session_factory=factory)
    client.query("query", {})
    client.query("query", {})

    worker = threading.Thread(target=client.query, args=("query", {}))
    worker.start()
    worker.join()

    assert len(sessions) == 2
    assert sessions[0].post.call_count == 2
    assert sessions[1].post.call_count == 1
    assert all(s.headers["Authorization"] == "bearer t" for s in sessions)


def test_close_closes_every_session() -> None:
    sessions = []

    def factory():
        session = _session({"data": {}})
        sessions.append(session)
        return session

    client = GitHubGraphQLClient(GitHubIntegrationConfig(token="t"), session_factory=factory)
    client.query("query", {})
    worker = threading.Thread(target=client.query, args=("query", {}))
    worker.start()
    worker.join()

    client.close()

    assert len(sessions) == 2
    for session in sessions:
        session.close.assert_called_once()
