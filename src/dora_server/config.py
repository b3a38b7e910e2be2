"""Server configuration — reads settings from environment variables.

All settings have sensible defaults for local development.  In production
the values are typically overridden via env vars or a ``.env`` file.
"""

import os
from dataclasses import dataclass, field

from dora_assessment.constants import DEFAULT_CATALOG

# Module-level constants read at import time so FastAPI Query() defaults
# can reference them.
DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "20"))
MAX_PAGE_LIMIT = int(os.getenv("MAX_PAGE_LIMIT", "100"))


@dataclass(frozen=True)
class ServerSettings:
    """Immutable server configuration read from environment at startup."""

    # Network
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS — comma-separated origins, or "*" for wide-open dev mode
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    # Catalog directory (None → CatalogStore default, v1/catalog from repo root)
    catalog_dir: str | None = None
    # Catalog used when a new session does not name one
    default_catalog: str = DEFAULT_CATALOG

    # Logging
    log_level: str = "INFO"

    # Upper bound (seconds) on one submission including report delivery.
    # 0 disables the timeout.
    submit_timeout_seconds: float = 0.0

    # Drop a respondent's stored drafts once their submission completes
    delete_drafts_on_submit: bool = True

    # Live sessions untouched for this long are evicted from memory.
    # 0 disables the sweeper.
    session_idle_ttl_seconds: float = 3600.0
    # How often the sweeper runs
    session_sweep_interval_seconds: float = 60.0

    # Trusted proxy secret — when set, every request that carries
    # X-User-ID must also carry a matching X-Proxy-Secret.
    trusted_proxy_secret: str | None = None


def load_settings() -> ServerSettings:
    """Build settings from ``SERVER_*`` environment variables."""
    raw_origins = os.getenv("SERVER_CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]

    return ServerSettings(
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "8080")),
        cors_origins=origins,
        catalog_dir=os.getenv("SERVER_CATALOG_DIR") or None,
        default_catalog=DEFAULT_CATALOG,
        log_level=os.getenv("SERVER_LOG_LEVEL", "INFO").upper(),
        submit_timeout_seconds=float(os.getenv("SUBMIT_TIMEOUT_SECONDS", "0")),
        delete_drafts_on_submit=os.getenv("DELETE_DRAFTS_ON_SUBMIT", "1") == "1",
        session_idle_ttl_seconds=float(os.getenv("SESSION_IDLE_TTL_SECONDS", "3600")),
        session_sweep_interval_seconds=float(
            os.getenv("SESSION_SWEEP_INTERVAL_SECONDS", "60")
        ),
        trusted_proxy_secret=os.getenv("TRUSTED_PROXY_SECRET") or None,
    )
