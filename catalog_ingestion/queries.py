"""GraphQL documents and the connection extractor for each of them."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from catalog_ingestion.models import Connection

REPOSITORIES_QUERY = """
query repositories($org: String!, $cursor: String) {
  repositoryOwner(login: $org) {
    login
    repositories(first: 100, after: $cursor) {
      nodes {
        name
        url
        isArchived
      }
      pageInfo {
        hasNextPage
        endCursor
      }
    }
  }
}
"""

USERS_QUERY = """
query users($org: String!, $cursor: String) {
  organization(login: $org) {
    membersWithRole(first: 100, after: $cursor) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        avatarUrl
        bio
        email
        login
        name
      }
    }
  }
}
"""

TEAMS_QUERY = """
query teams($org: String!, $cursor: String) {
  organization(login: $org) {
    teams(first: 100, after: $cursor) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        slug
        combinedSlug
        name
        description
        avatarUrl
        parentTeam {
          slug
        }
        members(first: 100, membership: IMMEDIATE) {
          pageInfo {
            hasNextPage
            endCursor
          }
          nodes {
            login
          }
        }
      }
    }
  }
}
"""

TEAM_MEMBERS_QUERY = """
query members($org: String!, $teamSlug: String!, $cursor: String) {
  organization(login: $org) {
    team(slug: $teamSlug) {
      members(first: 100, after: $cursor, membership: IMMEDIATE) {
        pageInfo {
          hasNextPage
          endCursor
        }
        nodes {
          login
        }
      }
    }
  }
}
"""

ORGANIZATIONS_QUERY = """
query organizations($cursor: String) {
  viewer {
    organizations(first: 100, after: $cursor) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        ... on Organization {
          url
        }
      }
    }
  }
}
"""


def _dig(response: Any, *path: str) -> Any:
    value = response
    for key in path:
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


def repositories_connection(response: Mapping[str, Any]) -> Optional[Connection[Any]]:
    return Connection.from_payload(_dig(response, "repositoryOwner", "repositories"))


def users_connection(response: Mapping[str, Any]) -> Optional[Connection[Any]]:
    return Connection.from_payload(_dig(response, "organization", "membersWithRole"))


def teams_connection(response: Mapping[str, Any]) -> Optional[Connection[Any]]:
    return Connection.from_payload(_dig(response, "organization", "teams"))


def team_members_connection(response: Mapping[str, Any]) -> Optional[Connection[Any]]:
    return Connection.from_payload(_dig(response, "organization", "team", "members"))


def organizations_connection(response: Mapping[str, Any]) -> Optional[Connection[Any]]:
    return Connection.from_payload(_dig(response, "viewer", "organizations"))
