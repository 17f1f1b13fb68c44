"""Merge team membership into user records."""

from __future__ import annotations

import logging
from typing import Sequence

from catalog_ingestion.models import Team, User

logger = logging.getLogger("ingestion.membership")


def merge_memberships(users: Sequence[User], teams: Sequence[Team]) -> list[User]:
    """Return the canonical users with ``member_of`` filled from ``teams``.

    The first user seen for a login and the first team seen for a slug are
    kept; later duplicates are dropped. ``member_of`` is rebuilt from
    scratch, so running this again with the same inputs gives the same
    result. Members that are not among ``users`` are skipped. Teams are
    left as they are.
    """
    canonical: dict[str, User] = {}
    for user in users:
        canonical.setdefault(user.login, user)

    duplicates = len(users) - len(canonical)
    if duplicates:
        logger.debug("Collapsed %d duplicate users", duplicates)

    for user in canonical.values():
        user.member_of = []

    seen_slugs: set[str] = set()
    skipped = 0
    for team in teams:
        if team.slug in seen_slugs:
            continue
        seen_slugs.add(team.slug)
        for login in team.members:
            user = canonical.get(login)
            if user is None:
                skipped += 1
                continue
            if team.slug not in user.member_of:
                user.member_of.append(team.slug)

    if skipped:
        logger.debug("Skipped %d team members outside the user list", skipped)
    return list(canonical.values())
