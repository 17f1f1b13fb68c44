"""Read repositories, users and teams of one GitHub organization."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Mapping
from urllib.parse import unquote, urlparse

from catalog_ingestion.hierarchy import link_teams
from catalog_ingestion.membership import merge_memberships
from catalog_ingestion.models import (
    Connection,
    OrganizationSnapshot,
    Repository,
    Team,
    User,
)
from catalog_ingestion.paging import DEFAULT_MAX_PAGES, QueryFn, fetch_all
from catalog_ingestion.queries import (
    REPOSITORIES_QUERY,
    TEAM_MEMBERS_QUERY,
    TEAMS_QUERY,
    USERS_QUERY,
    repositories_connection,
    team_members_connection,
    teams_connection,
    users_connection,
)

logger = logging.getLogger("ingestion.reader")


def parse_org_url(url: str) -> tuple[str, bool]:
    """Return ``(org, is_org_url)`` for a URL.

    Only a path with exactly one non-empty segment addresses an
    organization; ``org`` is that segment, URL-decoded, or "" otherwise.
    """
    segments = [s for s in urlparse(url).path.split("/") if s]
    if len(segments) != 1:
        return (unquote(segments[0]) if segments else "", False)
    return unquote(segments[0]), True


def matching_repositories(repositories: Iterable[Repository]) -> list[Repository]:
    return [r for r in repositories if not r.is_archived]


def unique_teams(teams: Iterable[Team]) -> list[Team]:
    """Keep the first team seen for each slug."""
    unique: dict[str, Team] = {}
    for team in teams:
        if team.slug in unique:
            logger.warning("Dropping duplicate team %s", team.slug)
            continue
        unique[team.slug] = team
    return list(unique.values())


class OrganizationReader:
    """Runs the three organization traversals and reconciles their output.

    With ``parallel`` the traversals call ``query`` from three threads at
    once; ``GitHubGraphQLClient.query`` keeps one session per thread.
    """

    def __init__(
        self,
        query: QueryFn,
        max_pages: int = DEFAULT_MAX_PAGES,
        parallel: bool = False,
    ) -> None:
        self._query = query
        self._max_pages = max_pages
        self._parallel = parallel

    def read(self, org: str) -> OrganizationSnapshot:
        start = time.monotonic()

        if self._parallel:
            with ThreadPoolExecutor(max_workers=3, thread_name_prefix=f"read-{org}") as pool:
                repos_future = pool.submit(self.read_repositories, org)
                users_future = pool.submit(self.read_users, org)
                teams_future = pool.submit(self.read_teams, org)
                repositories = repos_future.result()
                users = users_future.result()
                teams = teams_future.result()
        else:
            repositories = self.read_repositories(org)
            users = self.read_users(org)
            teams = self.read_teams(org)

        teams = unique_teams(teams)
        link_teams(teams)
        users = merge_memberships(users, teams)

        snapshot = OrganizationSnapshot(
            org=org, repositories=repositories, users=users, teams=teams,
        )
        duration = time.monotonic() - start
        logger.info(
            "Read %d repositories (%d matching), %d users and %d teams from %s in %.1f seconds",
            len(repositories), len(snapshot.matching_repositories),
            len(users), len(teams), org, duration,
            extra={
                "org": org,
                "records": len(repositories) + len(users) + len(teams),
                "matching": len(snapshot.matching_repositories),
                "duration_s": round(duration, 3),
            },
        )
        return snapshot

    def read_repositories(self, org: str) -> list[Repository]:
        return fetch_all(
            self._query, REPOSITORIES_QUERY, repositories_connection,
            Repository.from_node, {"org": org}, max_pages=self._max_pages,
        )

    def read_users(self, org: str) -> list[User]:
        return fetch_all(
            self._query, USERS_QUERY, users_connection,
            User.from_node, {"org": org}, max_pages=self._max_pages,
        )

    def read_teams(self, org: str) -> list[Team]:
        def to_team(node: Mapping[str, Any]) -> Team:
            members = Connection.from_payload(node.get("members"))
            if members is None or not members.page_info.has_next_page:
                return Team.from_node(node)
            # The embedded page is incomplete; fetch the whole member list.
            logins = fetch_all(
                self._query, TEAM_MEMBERS_QUERY, team_members_connection,
                lambda m: m["login"], {"org": org, "teamSlug": node["slug"]},
                max_pages=self._max_pages,
            )
            return Team.from_node(node, members=logins)

        return fetch_all(
            self._query, TEAMS_QUERY, teams_connection,
            to_team, {"org": org}, max_pages=self._max_pages,
        )
