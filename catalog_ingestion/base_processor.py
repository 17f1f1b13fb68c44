"""Abstract base class for catalog location processors."""

from __future__ import annotations

import logging
import time
import uuid
from abc import ABC, abstractmethod
from typing import Callable

from catalog_ingestion.client import GitHubGraphQLClient
from catalog_ingestion.config import GitHubIntegrationConfig, IngestionConfig
from catalog_ingestion.entities import Emit, ProcessorResult
from catalog_ingestion.models import Location

logger = logging.getLogger("ingestion.processor")

ClientFactory = Callable[[GitHubIntegrationConfig], GitHubGraphQLClient]


class BaseProcessor(ABC):
    """Each processor overrides read_location() and declares PROCESSOR_NAME."""

    PROCESSOR_NAME: str = ""

    def __init__(
        self,
        config: IngestionConfig,
        client_factory: ClientFactory = GitHubGraphQLClient,
    ) -> None:
        self.config = config
        self.client_factory = client_factory

    @abstractmethod
    def read_location(self, location: Location, optional: bool, emit: Emit) -> bool:
        """Emit results for ``location``. Returns False when it is not handled here."""

    def create_client(self, url: str) -> GitHubGraphQLClient:
        """Build a client for the integration that serves ``url``."""
        return self.client_factory(self.config.integration_for(url))

    def read_with_tracking(self, location: Location, emit: Emit, optional: bool = False) -> bool:
        """Wrap read_location() with a run id, timing and result counts."""
        run_id = str(uuid.uuid4())
        emitted = 0

        def counting_emit(result: ProcessorResult) -> None:
            nonlocal emitted
            emitted += 1
            emit(result)

        start = time.monotonic()
        try:
            handled = self.read_location(location, optional, counting_emit)
        except Exception as exc:
            logger.error(
                "Read failed for %s: %s",
                location.target,
                exc,
                extra={"processor": self.PROCESSOR_NAME, "run_id": run_id},
            )
            raise

        if handled:
            logger.info(
                "Read complete for %s",
                location.target,
                extra={
                    "processor": self.PROCESSOR_NAME,
                    "records": emitted,
                    "duration_s": round(time.monotonic() - start, 3),
                    "run_id": run_id,
                },
            )
        return handled
