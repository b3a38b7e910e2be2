"""Housekeeping: the live-session sweeper and the ``dora-cleanup`` CLI.

Two things grow without bound unless trimmed:

``run_session_sweeper``
    Background task started by the server lifespan.  Every
    ``SESSION_SWEEP_INTERVAL_SECONDS`` it evicts live sessions idle for
    longer than ``SESSION_IDLE_TTL_SECONDS``.

``run_cleanup`` / ``cli``
    Standalone command that deletes stored drafts older than
    ``DRAFT_RETENTION_DAYS``.  Intended for cron jobs.

Examples::

    # Purge drafts older than $DRAFT_RETENTION_DAYS (default 90)
    uv run dora-cleanup

    # Purge drafts older than 30 days
    uv run dora-cleanup --days 30

    # Purge every stored draft
    uv run dora-cleanup --days 0
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from dora_server.registry import SessionRegistry

logger = logging.getLogger(__name__)


async def run_session_sweeper(
    registry: SessionRegistry,
    *,
    idle_ttl_seconds: float,
    interval_seconds: float,
) -> None:
    """Evict idle sessions every ``interval_seconds`` until cancelled."""
    logger.info(
        "Session sweeper started: idle_ttl=%ss interval=%ss",
        idle_ttl_seconds, interval_seconds,
    )
    while True:
        await asyncio.sleep(interval_seconds)
        registry.sweep(idle_ttl_seconds)


async def run_cleanup(*, days: int | None = None, repo=None) -> int:
    """Delete stored drafts older than ``days`` and return the row count.

    ``days`` defaults to ``DRAFT_RETENTION_DAYS``.  Opens its own
    transaction and disposes the engine when done.
    """
    # Lazy imports to avoid loading DB machinery at module import time
    from dora_db.config import load_db_settings
    from dora_db.engine import dispose_engine, session_scope
    from dora_db.repository import DraftRepository

    if days is None:
        days = load_db_settings().draft_retention_days
    repo = repo or DraftRepository()

    try:
        async with session_scope() as db:
            affected = await repo.purge_old_drafts(db, older_than_days=days)
        logger.info("Cleanup complete: purged_drafts=%d, days=%d", affected, days)
        return affected
    finally:
        await dispose_engine()


def cli() -> None:
    """Console-script entry point: ``dora-cleanup``."""
    parser = argparse.ArgumentParser(
        prog="dora-cleanup",
        description="Delete old assessment drafts from the database.",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help=(
            "Age threshold in days (default: $DRAFT_RETENTION_DAYS, or 90). "
            "0 deletes every stored draft."
        ),
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    affected = asyncio.run(run_cleanup(days=args.days))

    print(f"Purged drafts: {affected}")
    sys.exit(0)
