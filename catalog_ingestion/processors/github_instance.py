"""GitHub instance processor.

Starting from a GitHub site, emits one location per organization the
token's viewer belongs to. Those locations are then picked up by the
organization processor.
"""

from __future__ import annotations

import logging

from catalog_ingestion.base_processor import BaseProcessor
from catalog_ingestion.entities import Emit, location_result
from catalog_ingestion.models import Location
from catalog_ingestion.paging import fetch_all
from catalog_ingestion.queries import ORGANIZATIONS_QUERY, organizations_connection

logger = logging.getLogger("ingestion.github_instance")

LOCATION_TYPES = ("github-instance", "x-github-instance")


class GitHubInstanceProcessor(BaseProcessor):
    PROCESSOR_NAME = "github_instance"

    def read_location(self, location: Location, optional: bool, emit: Emit) -> bool:
        if location.type not in LOCATION_TYPES:
            return False

        client = self.create_client(location.target)
        try:
            urls = fetch_all(
                client.query,
                ORGANIZATIONS_QUERY,
                organizations_connection,
                lambda node: node.get("url"),
                {},
                max_pages=self.config.max_pages,
            )
        finally:
            client.close()

        # Non-organization nodes come back as empty objects.
        urls = [u for u in urls if u]
        logger.info("Found %d organizations", len(urls), extra={"records": len(urls)})

        for url in urls:
            emit(location_result(url, presence_optional=True))
        return True
