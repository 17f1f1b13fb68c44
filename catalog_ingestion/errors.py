"""Exceptions raised while reading an organization."""

from __future__ import annotations

import json
from typing import Any, Iterable, Mapping, Optional


class IngestionError(Exception):
    """Base class for all ingestion failures."""


class MissingConnectionError(IngestionError):
    """A page response did not contain the expected connection."""

    def __init__(self, variables: Mapping[str, Any]) -> None:
        self.variables = dict(variables)
        super().__init__(
            f"Found no match for {json.dumps(self.variables, sort_keys=True, default=str)}"
        )


class PaginationLimitError(IngestionError):
    """The remote still reported more pages after max_pages requests."""

    def __init__(self, variables: Mapping[str, Any], max_pages: int) -> None:
        self.variables = dict(variables)
        self.max_pages = max_pages
        super().__init__(
            f"Gave up after {max_pages} pages for "
            f"{json.dumps(self.variables, sort_keys=True, default=str)}"
        )


class HierarchyCycleError(IngestionError):
    """Team parent links form a cycle."""

    def __init__(self, slugs: Iterable[str]) -> None:
        self.slugs = list(slugs)
        super().__init__(f"Team hierarchy cycle: {' -> '.join(self.slugs)}")


class IntegrationNotFoundError(IngestionError):
    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(
            f"There is no GitHub integration that matches {url}. "
            "Please add a configuration for an integration."
        )


class GraphQLError(IngestionError):
    """The GraphQL endpoint rejected the request or returned errors."""

    def __init__(self, message: str, errors: Optional[list[dict]] = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class StalledCursorError(IngestionError):
    """The remote reported another page without a new cursor to reach it."""

    def __init__(self, variables: Mapping[str, Any], cursor: Optional[str]) -> None:
        self.variables = dict(variables)
        self.cursor = cursor
        super().__init__(
            f"Cursor {cursor!r} does not advance for "
            f"{json.dumps(self.variables, sort_keys=True, default=str)}"
        )
