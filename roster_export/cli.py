"""CLI entry point: export, inspect."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from typing import Any, Optional

import requests

from roster_export.auth import CredentialProvider
from roster_export.config import ExportConfig, load_config
from roster_export.enricher import StatusEnricher
from roster_export.fetcher import PaginatedFetcher
from roster_export.logging_config import configure_logging
from roster_export.orchestrator import SyncOrchestrator
from roster_export.sheets import SheetsDestination
from roster_export.source_api import RosterApiClient
from roster_export.writer import ProgressCallback, TabularWriter

logger = logging.getLogger("roster_export.cli")


def build_orchestrator(
    config: ExportConfig,
    progress: Optional[ProgressCallback] = None,
    session: Optional[requests.Session] = None,
    sheets_service: Optional[Any] = None,
) -> SyncOrchestrator:
    """Log in and wire fetcher, enricher and writer from config."""
    session = session or requests.Session()
    token = CredentialProvider(config.api, session=session).acquire_token()
    api = RosterApiClient(config.api, token, session=session)

    destination = SheetsDestination(config.sheet, service=sheets_service)
    writer = TabularWriter(
        destination,
        retry=config.retry,
        batch_size=config.batch_size,
        progress=progress,
    )
    return SyncOrchestrator(
        PaginatedFetcher(api, config.page_size, config.stop_on_short_page),
        StatusEnricher(api),
        writer,
        duplicate_policy=config.duplicate_policy,
    )


def cmd_export(args: argparse.Namespace) -> None:
    """Run one full export."""
    config = load_config()
    overrides: dict[str, Any] = {}
    if args.dedupe:
        overrides["duplicate_policy"] = "dedupe"
    if args.stop_on_short_page:
        overrides["stop_on_short_page"] = True
    if overrides:
        config = dataclasses.replace(config, **overrides)

    progress = None
    if args.progress:
        from roster_export.progress import TqdmProgress
        progress = TqdmProgress()

    results = build_orchestrator(config, progress=progress).run()
    logger.info("Export results: %s", results)


def cmd_inspect(args: argparse.Namespace) -> None:
    """Show capacity and used rows of the destination sheet."""
    config = load_config()
    destination = SheetsDestination(config.sheet)
    print(f"Spreadsheet: {config.sheet.spreadsheet_id}")
    print(f"Sheet:       {config.sheet.sheet_name}")
    print(f"Capacity:    {destination.row_capacity()} rows")
    print(f"Used:        {destination.used_row_count()} rows")


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entry point."""
    configure_logging(os.environ.get("LOG_LEVEL", "INFO"))

    parser = argparse.ArgumentParser(
        prog="roster-export",
        description="Export the client roster with live statuses to Google Sheets",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # export command
    export_parser = subparsers.add_parser("export", help="Run a full export")
    export_parser.add_argument(
        "--dedupe",
        action="store_true",
        help="Keep only the first row per client id (default: append all)",
    )
    export_parser.add_argument(
        "--stop-on-short-page",
        action="store_true",
        help="Treat a page shorter than the page size as the last page",
    )
    export_parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while writing",
    )
    export_parser.set_defaults(func=cmd_export)

    # inspect command
    inspect_parser = subparsers.add_parser("inspect", help="Show destination sheet state")
    inspect_parser.set_defaults(func=cmd_inspect)

    args = parser.parse_args(argv)
    try:
        args.func(args)
    except Exception as exc:
        logger.error("%s failed: %s", args.command, exc, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
