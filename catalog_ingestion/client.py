"""GitHub GraphQL client over requests sessions."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Mapping

import requests

from catalog_ingestion.config import GitHubIntegrationConfig
from catalog_ingestion.errors import GraphQLError

logger = logging.getLogger("ingestion.client")

REQUEST_TIMEOUT = (5, 60)


def graphql_endpoint(api_base_url: str) -> str:
    """GraphQL lives beside the REST API root (``/api/v3`` -> ``/api/graphql``)."""
    base = api_base_url.rstrip("/")
    if base.endswith("/api/v3"):
        base = base[: -len("/v3")]
    return f"{base}/graphql"


class GitHubGraphQLClient:
    """Sends GraphQL requests, with one session per calling thread.

    ``query`` may be called from several threads at once (parallel
    organization reads); sessions are never shared between threads.
    """

    def __init__(
        self,
        integration: GitHubIntegrationConfig,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self._endpoint = graphql_endpoint(integration.api_base_url)
        self._headers = {
            "Authorization": f"bearer {integration.token}",
            "Accept": "application/vnd.github+json",
        }
        self._session_factory = session_factory
        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._lock = threading.Lock()

    def _session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._session_factory()
            session.headers.update(self._headers)
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def query(self, text: str, variables: Mapping[str, Any]) -> Mapping[str, Any]:
        """Run one GraphQL request and return its ``data`` member."""
        try:
            resp = self._session().post(
                self._endpoint,
                json={"query": text, "variables": dict(variables)},
                timeout=REQUEST_TIMEOUT,
            )
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as exc:
            raise GraphQLError(f"GitHub GraphQL request failed: {exc}") from exc
        except ValueError as exc:
            raise GraphQLError(f"GitHub GraphQL response is not JSON: {exc}") from exc

        if not isinstance(payload, Mapping):
            raise GraphQLError("GitHub GraphQL response is not a JSON object")
        errors = payload.get("errors")
        if errors:
            messages = "; ".join(str(e.get("message", e)) for e in errors)
            raise GraphQLError(f"GitHub GraphQL errors: {messages}", errors)
        return payload.get("data") or {}

    def close(self) -> None:
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
