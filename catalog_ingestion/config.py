"""Configuration via environment variables.

Supports:
  - Environment variables
  - A local .env file (python-dotenv) for development
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from catalog_ingestion.errors import IntegrationNotFoundError


@dataclass(frozen=True)
class GitHubIntegrationConfig:
    token: str
    host: str = "github.com"
    api_base_url: str = "https://api.github.com"


@dataclass(frozen=True)
class SchedulerConfig:
    interval_min: int = 30
    misfire_grace_time: int = 300


@dataclass(frozen=True)
class LocationConfig:
    target: str
    type: str = "url"


@dataclass(frozen=True)
class IngestionConfig:
    integrations: list[GitHubIntegrationConfig] = field(default_factory=list)
    locations: list[LocationConfig] = field(default_factory=list)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    max_pages: int = 1000
    parallel_reads: bool = False

    def integration_for(self, url: str) -> GitHubIntegrationConfig:
        """Pick the integration whose host serves ``url``."""
        host = urlparse(url).hostname or ""
        for integration in self.integrations:
            if integration.host == host:
                return integration
        raise IntegrationNotFoundError(url)


def _split(raw: Optional[str]) -> list[str]:
    return [s.strip() for s in (raw or "").split(",") if s.strip()]


def load_config() -> IngestionConfig:
    """Load configuration from environment variables.

    GITHUB_TOKEN is required. Organization URLs in GITHUB_ORG_URLS and
    instance URLs in GITHUB_INSTANCE_URLS become the scheduled locations.
    """
    load_dotenv()

    token = os.environ.get("GITHUB_TOKEN", "")
    if not token:
        raise ValueError("GITHUB_TOKEN environment variable is required")

    integration = GitHubIntegrationConfig(
        token=token,
        host=os.environ.get("GITHUB_HOST", "github.com"),
        api_base_url=os.environ.get("GITHUB_API_BASE_URL", "https://api.github.com"),
    )

    locations = [LocationConfig(target=u) for u in _split(os.environ.get("GITHUB_ORG_URLS"))]
    locations += [
        LocationConfig(target=u, type="github-instance")
        for u in _split(os.environ.get("GITHUB_INSTANCE_URLS"))
    ]

    max_pages = int(os.environ.get("INGESTION_MAX_PAGES", "1000"))
    if max_pages < 1:
        raise ValueError("INGESTION_MAX_PAGES must be at least 1")

    return IngestionConfig(
        integrations=[integration],
        locations=locations,
        scheduler=SchedulerConfig(
            interval_min=int(os.environ.get("INGESTION_INTERVAL_MIN", "30")),
            misfire_grace_time=int(os.environ.get("INGESTION_MISFIRE_GRACE_S", "300")),
        ),
        max_pages=max_pages,
        parallel_reads=os.environ.get("INGESTION_PARALLEL_READS", "").lower() == "true",
    )
