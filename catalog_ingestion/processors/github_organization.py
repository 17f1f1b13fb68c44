"""GitHub organization processor: users, teams and repository locations."""

from __future__ import annotations

import logging

from catalog_ingestion.base_processor import BaseProcessor
from catalog_ingestion.entities import (
    EntityResult,
    Emit,
    group_entity,
    location_result,
    user_entity,
)
from catalog_ingestion.models import Location
from catalog_ingestion.reader import OrganizationReader, parse_org_url

logger = logging.getLogger("ingestion.github_organization")


class GitHubOrganizationProcessor(BaseProcessor):
    PROCESSOR_NAME = "github_organization"

    def read_location(self, location: Location, optional: bool, emit: Emit) -> bool:
        if location.type != "url":
            return False
        org, is_org_url = parse_org_url(location.target)
        if not is_org_url:
            return False

        logger.info("Reading GitHub organization %s", location.target, extra={"org": org})

        client = self.create_client(location.target)
        try:
            reader = OrganizationReader(
                client.query,
                max_pages=self.config.max_pages,
                parallel=self.config.parallel_reads,
            )
            snapshot = reader.read(org)
        finally:
            client.close()

        for user in snapshot.users:
            emit(EntityResult(user_entity(user)))
        for team in snapshot.teams:
            emit(EntityResult(group_entity(team)))
        for repository in snapshot.matching_repositories:
            emit(location_result(repository.url))

        return True
