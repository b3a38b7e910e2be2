"""Route registration — mounts all routers under ``/api/v1``."""

from fastapi import FastAPI

from dora_server.routes.catalogs import router as catalogs_router
from dora_server.routes.drafts import router as drafts_router
from dora_server.routes.sessions import router as sessions_router
from dora_server.routes.steps import router as steps_router
from dora_server.routes.submissions import router as submissions_router

API_PREFIX = "/api/v1"


def register_routes(app: FastAPI) -> None:
    """Include all sub-routers under the versioned API prefix."""
    app.include_router(sessions_router, prefix=API_PREFIX)
    app.include_router(steps_router, prefix=API_PREFIX)
    app.include_router(drafts_router, prefix=API_PREFIX)
    app.include_router(submissions_router, prefix=API_PREFIX)
    app.include_router(catalogs_router, prefix=API_PREFIX)
