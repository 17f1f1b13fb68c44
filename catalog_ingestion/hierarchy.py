"""Resolve team parent references into a navigable forest."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from catalog_ingestion.errors import HierarchyCycleError
from catalog_ingestion.models import Team

logger = logging.getLogger("ingestion.hierarchy")


def _check_cycles(teams: Sequence[Team], index: dict[str, Team]) -> None:
    acyclic: set[str] = set()
    for team in teams:
        chain: list[str] = []
        positions: dict[str, int] = {}
        current: Optional[Team] = team
        while current is not None and current.slug not in acyclic:
            if current.slug in positions:
                cycle = chain[positions[current.slug]:] + [current.slug]
                raise HierarchyCycleError(cycle)
            positions[current.slug] = len(chain)
            chain.append(current.slug)
            current = index.get(current.parent_slug) if current.parent_slug else None
        acyclic.update(chain)


def link_teams(teams: Sequence[Team]) -> Sequence[Team]:
    """Set ``parent`` and ``children`` on every team and return the same teams.

    Parents may appear anywhere in ``teams``. A parent slug that is not in
    the input leaves the team as a root. When a slug occurs more than once
    only its first team takes part in the hierarchy.
    """
    index: dict[str, Team] = {}
    for team in teams:
        index.setdefault(team.slug, team)

    _check_cycles(list(index.values()), index)

    for team in index.values():
        team.parent = None
        team.children = []

    unresolved = 0
    for team in index.values():
        if not team.parent_slug:
            continue
        parent = index.get(team.parent_slug)
        if parent is None:
            unresolved += 1
            continue
        team.parent = parent
        parent.children.append(team)

    for team in index.values():
        team.children.sort(key=lambda t: t.slug)

    if unresolved:
        logger.debug("%d teams reference a parent outside the organization", unresolved)
    return teams


def root_teams(teams: Sequence[Team]) -> list[Team]:
    return [t for t in teams if t.parent is None]
