"""Database settings for the assessment store.

Everything the persistence layer reads from the environment lives in one
frozen ``DatabaseSettings`` value:

- connection: ``DATABASE_URL``, or the ``PG_HOST``/``PG_PORT``/``PG_USER``/
  ``PG_PASSWORD``/``PG_DATABASE`` parts used by docker-compose
- pool: ``PG_POOL_SIZE``, ``PG_MAX_OVERFLOW``, ``PG_POOL_RECYCLE_SECONDS``
- per-connection: ``PG_STATEMENT_TIMEOUT_MS`` and the ``application_name``
  reported to ``pg_stat_activity``
- retention: ``DRAFT_RETENTION_DAYS`` for the ``dora-cleanup`` purge
- ``DB_ECHO=1`` logs every SQL statement

The runtime engine speaks asyncpg; Alembic needs a libpq URL, so both forms
are derived from the same setting.
"""

import os
from dataclasses import dataclass

APPLICATION_NAME = "dora-assessment"

# Tables owned by this package; migrations ignore anything else in the schema.
TABLES = ("assessment_drafts", "assessment_submissions")

_ASYNC_SCHEME = "postgresql+asyncpg://"
_SYNC_SCHEME = "postgresql://"


def _url_from_env() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    host = os.getenv("PG_HOST", "localhost")
    port = os.getenv("PG_PORT", "5432")
    user = os.getenv("PG_USER", "dora")
    password = os.getenv("PG_PASSWORD", "dora")
    database = os.getenv("PG_DATABASE", "dora")
    return f"{_SYNC_SCHEME}{user}:{password}@{host}:{port}/{database}"


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection, pool and retention settings for ``dora_db``."""

    url: str
    pool_size: int = 5
    max_overflow: int = 10
    # Recycle pooled connections older than this; 0 keeps them forever
    pool_recycle_seconds: int = 1800
    # Server-side cap per statement; 0 leaves the server default
    statement_timeout_ms: int = 0
    echo: bool = False
    # Stored drafts older than this are purged by dora-cleanup; 0 keeps all
    draft_retention_days: int = 90

    @property
    def async_url(self) -> str:
        """URL for the asyncpg runtime engine."""
        if self.url.startswith(_SYNC_SCHEME):
            return self.url.replace(_SYNC_SCHEME, _ASYNC_SCHEME, 1)
        return self.url

    @property
    def sync_url(self) -> str:
        """URL for Alembic, which runs synchronously over psycopg2."""
        return self.url.replace(_ASYNC_SCHEME, _SYNC_SCHEME, 1)

    def connect_args(self) -> dict:
        """asyncpg ``server_settings`` applied to every pooled connection."""
        server_settings = {"application_name": APPLICATION_NAME}
        if self.statement_timeout_ms:
            server_settings["statement_timeout"] = str(self.statement_timeout_ms)
        return {"server_settings": server_settings}


def load_db_settings() -> DatabaseSettings:
    """Build settings from the environment."""
    return DatabaseSettings(
        url=_url_from_env(),
        pool_size=int(os.getenv("PG_POOL_SIZE", "5")),
        max_overflow=int(os.getenv("PG_MAX_OVERFLOW", "10")),
        pool_recycle_seconds=int(os.getenv("PG_POOL_RECYCLE_SECONDS", "1800")),
        statement_timeout_ms=int(os.getenv("PG_STATEMENT_TIMEOUT_MS", "0")),
        echo=os.getenv("DB_ECHO", "0") == "1",
        draft_retention_days=int(os.getenv("DRAFT_RETENTION_DAYS", "90")),
    )
