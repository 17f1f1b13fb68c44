"""Catalog entities and the results processors emit."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, Union

from catalog_ingestion.models import Location, Team, User

API_VERSION = "backstage.io/v1alpha1"
USER_LOGIN_ANNOTATION = "github.com/user-login"
TEAM_SLUG_ANNOTATION = "github.com/team-slug"


@dataclass(frozen=True)
class LocationResult:
    location: Location

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "location", **asdict(self.location)}


@dataclass(frozen=True)
class EntityResult:
    entity: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "entity", "entity": self.entity}


ProcessorResult = Union[LocationResult, EntityResult]
Emit = Callable[[ProcessorResult], None]


def location_result(target: str, presence_optional: bool = False) -> LocationResult:
    return LocationResult(Location(type="url", target=target, presence_optional=presence_optional))


def _profile(display_name, email, picture) -> dict[str, str]:
    profile = {"displayName": display_name, "email": email, "picture": picture}
    return {k: v for k, v in profile.items() if v}


def user_entity(user: User) -> dict[str, Any]:
    metadata: dict[str, Any] = {
        "name": user.login,
        "annotations": {USER_LOGIN_ANNOTATION: user.login},
    }
    if user.bio:
        metadata["description"] = user.bio
    return {
        "apiVersion": API_VERSION,
        "kind": "User",
        "metadata": metadata,
        "spec": {
            "profile": _profile(user.name, user.email, user.avatar_url),
            "memberOf": list(user.member_of),
        },
    }


def group_entity(team: Team) -> dict[str, Any]:
    metadata: dict[str, Any] = {
        "name": team.slug,
        "annotations": {TEAM_SLUG_ANNOTATION: team.combined_slug},
    }
    if team.description:
        metadata["description"] = team.description
    spec: dict[str, Any] = {
        "type": "team",
        "profile": _profile(team.name, None, team.avatar_url),
        "children": [c.slug for c in team.children],
        "members": list(team.members),
    }
    if team.parent is not None:
        spec["parent"] = team.parent.slug
    return {
        "apiVersion": API_VERSION,
        "kind": "Group",
        "metadata": metadata,
        "spec": spec,
    }
