"""Typed records for the GraphQL nodes read from an organization.

Each record is built from a raw node mapping with ``from_node``. Connections
are built with ``Connection.from_payload``, which is where the presence of
``pageInfo`` and ``nodes`` is checked.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageInfo:
    has_next_page: bool
    end_cursor: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> PageInfo:
        return cls(
            has_next_page=bool(payload.get("hasNextPage")),
            end_cursor=payload.get("endCursor"),
        )


@dataclass(frozen=True)
class Connection(Generic[T]):
    """One page of a paginated relation."""

    page_info: PageInfo
    nodes: list[T]

    @classmethod
    def from_payload(cls, payload: Any) -> Optional[Connection[Any]]:
        """Return the connection, or None when the payload does not have its shape."""
        if not isinstance(payload, Mapping):
            return None
        page_info = payload.get("pageInfo")
        nodes = payload.get("nodes")
        if not isinstance(page_info, Mapping) or not isinstance(nodes, list):
            return None
        # GraphQL lists may hold nulls for nodes the viewer cannot see.
        return cls(
            page_info=PageInfo.from_payload(page_info),
            nodes=[n for n in nodes if n is not None],
        )


@dataclass(frozen=True)
class Repository:
    name: str
    url: str
    is_archived: bool = False

    @classmethod
    def from_node(cls, node: Mapping[str, Any]) -> Repository:
        return cls(
            name=node["name"],
            url=node["url"],
            is_archived=bool(node.get("isArchived", False)),
        )


@dataclass
class User:
    login: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    # Team slugs; filled in by merge_memberships.
    member_of: list[str] = field(default_factory=list)

    @classmethod
    def from_node(cls, node: Mapping[str, Any]) -> User:
        return cls(
            login=node["login"],
            bio=node.get("bio") or None,
            avatar_url=node.get("avatarUrl") or None,
            email=node.get("email") or None,
            name=node.get("name") or None,
        )


@dataclass
class Team:
    slug: str
    combined_slug: str
    name: Optional[str] = None
    description: Optional[str] = None
    avatar_url: Optional[str] = None
    parent_slug: Optional[str] = None
    members: list[str] = field(default_factory=list)
    # Resolved by link_teams.
    parent: Optional[Team] = field(default=None, repr=False, compare=False)
    children: list[Team] = field(default_factory=list, repr=False, compare=False)

    @classmethod
    def from_node(
        cls, node: Mapping[str, Any], members: Optional[list[str]] = None
    ) -> Team:
        """Build a team; ``members`` overrides the logins embedded in the node."""
        if members is None:
            conn = Connection.from_payload(node.get("members"))
            members = [m["login"] for m in conn.nodes] if conn else []
        parent = node.get("parentTeam") or {}
        return cls(
            slug=node["slug"],
            combined_slug=node.get("combinedSlug") or node["slug"],
            name=node.get("name") or None,
            description=node.get("description") or None,
            avatar_url=node.get("avatarUrl") or None,
            parent_slug=parent.get("slug"),
            members=list(dict.fromkeys(members)),
        )


@dataclass(frozen=True)
class Location:
    type: str
    target: str
    presence_optional: bool = False


@dataclass
class OrganizationSnapshot:
    """Everything read for one organization in one pass."""

    org: str
    repositories: list[Repository] = field(default_factory=list)
    users: list[User] = field(default_factory=list)
    teams: list[Team] = field(default_factory=list)

    @property
    def matching_repositories(self) -> list[Repository]:
        return [r for r in self.repositories if not r.is_archived]
