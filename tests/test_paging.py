from __future__ import annotations

import pytest

from catalog_ingestion.errors import (
    MissingConnectionError,
    PaginationLimitError,
    StalledCursorError,
)
from catalog_ingestion.paging import fetch_all
from catalog_ingestion.queries import repositories_connection

from conftest import FakeGraphQL, connection, repo_node

TEXT = "query"


def _repo_pages(sizes: list[int]) -> list[dict]:
    pages = []
    counter = 0
    for i, size in enumerate(sizes):
        nodes = []
        for _ in range(size):
            nodes.append(repo_node(f"repo-{counter}"))
            counter += 1
        last = i == len(sizes) - 1
        pages.append({
            "repositoryOwner": {
                "repositories": connection(
                    nodes, has_next_page=not last, end_cursor=None if last else f"c{i + 1}"
                )
            }
        })
    return pages


def test_three_pages_return_every_node_in_order() -> None:
    fake = FakeGraphQL({TEXT: _repo_pages([100, 100, 47])})

    names = fetch_all(fake, TEXT, repositories_connection, lambda n: n["name"], {"org": "acme"})

    assert len(names) == 247
    assert names == [f"repo-{i}" for i in range(247)]
    assert [v["cursor"] for v in fake.calls_for(TEXT)] == [None, "c1", "c2"]
    assert all(v["org"] == "acme" for v in fake.calls_for(TEXT))


@pytest.mark.parametrize("sizes", [[1], [5, 5], [3, 0, 7], [0]])
def test_output_length_matches_node_count(sizes: list[int]) -> None:
    fake = FakeGraphQL({TEXT: _repo_pages(sizes)})

    names = fetch_all(fake, TEXT, repositories_connection, lambda n: n["name"], {"org": "acme"})

    assert len(names) == sum(sizes)
    assert len(fake.calls) == len(sizes)


def test_stops_at_last_page() -> None:
    pages = _repo_pages([2, 2])
    # Anything served after the final page would be a protocol violation.
    pages.append({"repositoryOwner": {"repositories": connection([repo_node("extra")])}})
    fake = FakeGraphQL({TEXT: pages})

    names = fetch_all(fake, TEXT, repositories_connection, lambda n: n["name"], {"org": "acme"})

    assert "extra" not in names
    assert len(fake.calls) == 2


def test_missing_connection_raises_and_stops() -> None:
    pages = _repo_pages([2, 2, 2])
    pages[1] = {"repositoryOwner": None}
    fake = FakeGraphQL({TEXT: pages})

    with pytest.raises(MissingConnectionError) as excinfo:
        fetch_all(fake, TEXT, repositories_connection, lambda n: n, {"org": "ghost"})

    assert excinfo.value.variables == {"org": "ghost"}
    assert "ghost" in str(excinfo.value)
    assert len(fake.calls) == 2


def test_page_limit_is_reported() -> None:
    endless = [
        {"repositoryOwner": {"repositories": connection([repo_node(f"r{i}")], True, f"c{i}")}}
        for i in range(5)
    ]
    fake = FakeGraphQL({TEXT: endless})

    with pytest.raises(PaginationLimitError) as excinfo:
        fetch_all(fake, TEXT, repositories_connection, lambda n: n, {"org": "acme"}, max_pages=3)

    assert excinfo.value.max_pages == 3
    assert len(fake.calls) == 3


@pytest.mark.parametrize("cursors", [[None], ["c1", "c1"]])
def test_cursor_that_does_not_advance_is_reported(cursors: list) -> None:
    pages = [
        {"repositoryOwner": {"repositories": connection([repo_node(f"r{i}")], True, c)}}
        for i, c in enumerate(cursors)
    ]
    fake = FakeGraphQL({TEXT: pages})

    with pytest.raises(StalledCursorError) as excinfo:
        fetch_all(fake, TEXT, repositories_connection, lambda n: n, {"org": "acme"})

    assert excinfo.value.cursor == cursors[-1]
    assert len(fake.calls) == len(cursors)


def test_last_page_at_limit_is_not_an_error() -> None:
    fake = FakeGraphQL({TEXT: _repo_pages([1, 1, 1])})

    names = fetch_all(
        fake, TEXT, repositories_connection, lambda n: n["name"], {"org": "acme"}, max_pages=3,
    )

    assert names == ["repo-0", "repo-1", "repo-2"]


def test_nodes_are_mapped_one_at_a_time_in_order() -> None:
    fake = FakeGraphQL({TEXT: _repo_pages([2, 2])})
    seen: list[str] = []

    def mapper(node: dict) -> str:
        seen.append(node["name"])
        # Each mapping happens before the next page is requested.
        assert len(fake.calls) == (1 if len(seen) <= 2 else 2)
        return node["name"].upper()

    result = fetch_all(fake, TEXT, repositories_connection, mapper, {"org": "acme"})

    assert seen == ["repo-0", "repo-1", "repo-2", "repo-3"]
    assert result == ["REPO-0", "REPO-1", "REPO-2", "REPO-3"]


def test_variables_are_not_mutated() -> None:
    fake = FakeGraphQL({TEXT: _repo_pages([1, 1])})
    variables = {"org": "acme"}

    fetch_all(fake, TEXT, repositories_connection, lambda n: n, variables)

    assert variables == {"org": "acme"}
