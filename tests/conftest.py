from __future__ import annotations

from typing import Any, Mapping, Optional

import pytest


def connection(nodes: list, has_next_page: bool = False, end_cursor: Optional[str] = None) -> dict:
    return {
        "pageInfo": {"hasNextPage": has_next_page, "endCursor": end_cursor},
        "nodes": nodes,
    }


def repo_node(name: str, archived: bool = False) -> dict:
    return {"name": name, "url": f"https://github.com/acme/{name}", "isArchived": archived}


def user_node(login: str, **fields: Any) -> dict:
    return {"login": login, **fields}


def team_node(
    slug: str,
    parent: Optional[str] = None,
    members: Optional[list[str]] = None,
    members_next_page: bool = False,
) -> dict:
    return {
        "slug": slug,
        "combinedSlug": f"acme/{slug}",
        "name": slug.title(),
        "description": None,
        "avatarUrl": None,
        "parentTeam": {"slug": parent} if parent else None,
        "members": connection(
            [{"login": m} for m in members or []],
            has_next_page=members_next_page,
            end_cursor="m1" if members_next_page else None,
        ),
    }


class FakeGraphQL:
    """Serves scripted responses per query text and records every call."""

    def __init__(self, responses: Mapping[str, list]) -> None:
        self._responses = {text: list(pages) for text, pages in responses.items()}
        self.calls: list[tuple[str, dict]] = []
        self.closed = False

    def query(self, text: str, variables: Mapping[str, Any]) -> Mapping[str, Any]:
        self.calls.append((text, dict(variables)))
        pages = self._responses.get(text)
        if not pages:
            raise AssertionError(f"Unexpected query with {dict(variables)}")
        return pages.pop(0)

    __call__ = query

    def close(self) -> None:
        self.closed = True

    def calls_for(self, text: str) -> list[dict]:
        return [v for t, v in self.calls if t == text]


@pytest.fixture
def fake_graphql():
    return FakeGraphQL
