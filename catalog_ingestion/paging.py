"""Cursor pagination over GraphQL connections."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, TypeVar

from catalog_ingestion.errors import (
    MissingConnectionError,
    PaginationLimitError,
    StalledCursorError,
)
from catalog_ingestion.models import Connection

logger = logging.getLogger("ingestion.paging")

N = TypeVar("N")
R = TypeVar("R")

QueryFn = Callable[[str, Mapping[str, Any]], Mapping[str, Any]]

DEFAULT_MAX_PAGES = 1000


def fetch_all(
    query: QueryFn,
    text: str,
    extract_connection: Callable[[Mapping[str, Any]], Optional[Connection[N]]],
    map_node: Callable[[N], R],
    variables: Mapping[str, Any],
    max_pages: int = DEFAULT_MAX_PAGES,
) -> list[R]:
    """Fetch every page of a connection and map its nodes.

    The first request is sent with ``cursor=None``; each following request
    carries the previous page's ``endCursor``. Nodes are mapped one at a
    time, in page order, so ``map_node`` may issue queries of its own.

    Raises MissingConnectionError when a response has no connection,
    StalledCursorError when a page promises more without a fresh
    ``endCursor`` and PaginationLimitError when ``max_pages`` pages did not
    exhaust it.
    """
    results: list[R] = []
    cursor: Optional[str] = None

    for page in range(1, max_pages + 1):
        response = query(text, {**variables, "cursor": cursor})
        conn = extract_connection(response)
        if conn is None:
            raise MissingConnectionError(variables)

        for node in conn.nodes:
            results.append(map_node(node))

        if not conn.page_info.has_next_page:
            logger.debug(
                "Fetched %d nodes in %d pages", len(results), page,
                extra={"records": len(results), "pages": page},
            )
            return results
        next_cursor = conn.page_info.end_cursor
        if next_cursor is None or next_cursor == cursor:
            raise StalledCursorError(variables, next_cursor)
        cursor = next_cursor

    logger.error(
        "Page limit of %d reached with more pages pending", max_pages,
        extra={"records": len(results), "pages": max_pages},
    )
    raise PaginationLimitError(variables, max_pages)
