"""CLI entry point: read, scheduler."""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys

from catalog_ingestion.config import IngestionConfig, load_config
from catalog_ingestion.entities import Emit, ProcessorResult
from catalog_ingestion.logging_config import configure_logging
from catalog_ingestion.models import Location

logger = logging.getLogger("ingestion.cli")

LOCATION_TYPES = ["url", "github-instance", "x-github-instance"]

PROCESSOR_REGISTRY: dict[str, tuple[str, str]] = {
    # name -> (module_path, class_name)
    "github_instance": ("catalog_ingestion.processors.github_instance", "GitHubInstanceProcessor"),
    "github_organization": ("catalog_ingestion.processors.github_organization", "GitHubOrganizationProcessor"),
}


def _get_processors(config: IngestionConfig) -> list:
    processors = []
    for module_path, class_name in PROCESSOR_REGISTRY.values():
        module = importlib.import_module(module_path)
        processors.append(getattr(module, class_name)(config))
    return processors


def read_location(location: Location, config: IngestionConfig, emit: Emit) -> bool:
    """Offer ``location`` to each processor until one handles it."""
    for processor in _get_processors(config):
        if processor.read_with_tracking(location, emit):
            return True
    logger.warning("No processor handles %s location %s", location.type, location.target)
    return False


def print_result(result: ProcessorResult) -> None:
    print(json.dumps(result.to_dict(), sort_keys=True))


def cmd_read(args: argparse.Namespace) -> None:
    """Read one location and print every result as a JSON line."""
    config = load_config()
    location = Location(type=args.type, target=args.url)
    if not read_location(location, config, print_result):
        sys.exit(1)


def cmd_scheduler(args: argparse.Namespace) -> None:
    """Start the APScheduler-based scheduling loop."""
    from catalog_ingestion.scheduler import start_scheduler

    start_scheduler(load_config())


def main() -> None:
    """Main CLI entry point."""
    configure_logging()

    parser = argparse.ArgumentParser(
        prog="catalog-ingestion",
        description="Read GitHub organizations into catalog entities",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    read_parser = subparsers.add_parser("read", help="Read one location")
    read_parser.add_argument("url", help="Organization or GitHub instance URL")
    read_parser.add_argument(
        "--type", "-t",
        choices=LOCATION_TYPES,
        default="url",
        help="Location type (default: url)",
    )
    read_parser.set_defaults(func=cmd_read)

    sched_parser = subparsers.add_parser("scheduler", help="Start scheduled read loop")
    sched_parser.set_defaults(func=cmd_scheduler)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
