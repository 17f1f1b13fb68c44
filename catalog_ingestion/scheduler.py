"""APScheduler-based interval scheduling for full organization reads."""

from __future__ import annotations

import logging
from collections import deque

from apscheduler.events import EVENT_JOB_ERROR
from apscheduler.schedulers.blocking import BlockingScheduler

from catalog_ingestion.config import IngestionConfig, LocationConfig
from catalog_ingestion.entities import LocationResult, ProcessorResult
from catalog_ingestion.models import Location
from catalog_ingestion.reader import parse_org_url

logger = logging.getLogger("ingestion.scheduler")


def _read_location(location_config: LocationConfig, config: IngestionConfig) -> None:
    """Read one configured location, following the organizations it yields."""
    from catalog_ingestion.cli import print_result, read_location

    pending = deque([Location(type=location_config.type, target=location_config.target)])
    seen: set[Location] = set()

    def emit(result: ProcessorResult) -> None:
        print_result(result)
        if isinstance(result, LocationResult) and parse_org_url(result.location.target)[1]:
            pending.append(result.location)

    while pending:
        location = pending.popleft()
        if location in seen:
            continue
        seen.add(location)
        read_location(location, config, emit)


def _on_job_error(event) -> None:
    """Log job execution errors."""
    logger.error(
        "Job %s raised an exception: %s",
        event.job_id,
        event.exception,
    )


def build_scheduler(config: IngestionConfig) -> BlockingScheduler:
    """Create a scheduler with one interval job per configured location."""
    scheduler = BlockingScheduler()
    scheduler.add_listener(_on_job_error, EVENT_JOB_ERROR)
    sched = config.scheduler

    for location in config.locations:
        scheduler.add_job(
            _read_location,
            "interval",
            minutes=sched.interval_min,
            args=[location, config],
            id=f"{location.type}:{location.target}",
            max_instances=1,
            misfire_grace_time=sched.misfire_grace_time,
        )
    return scheduler


def start_scheduler(config: IngestionConfig) -> None:
    """Start the blocking scheduler."""
    if not config.locations:
        logger.warning("No locations configured, nothing to schedule")
        return
    scheduler = build_scheduler(config)
    logger.info("Starting scheduler with jobs: %s",
                [j.id for j in scheduler.get_jobs()])
    scheduler.start()
