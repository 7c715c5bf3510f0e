"""GCP Cloud Run Job entry point for the roster export.

Deployed as a Cloud Run Job triggered by Cloud Scheduler. Credentials for
the Sheets API come from the job's service account (ADC) unless
GOOGLE_SA_KEY_FILE is set.

Usage:
  python -m roster_export.entrypoints.gcp_cloudrun
"""

from __future__ import annotations

import logging
import os
import sys

from roster_export.cli import build_orchestrator
from roster_export.config import load_config
from roster_export.logging_config import configure_logging

logger = logging.getLogger("roster_export.cloudrun")


def main() -> None:
    configure_logging(os.environ.get("LOG_LEVEL", "INFO"))
    logger.info("Cloud Run Job started")

    try:
        config = load_config()
        results = build_orchestrator(config).run()
    except Exception as exc:
        logger.error("Export failed: %s", exc, exc_info=True)
        sys.exit(1)

    logger.info("Export complete: %s", results)


if __name__ == "__main__":
    main()
