"""Reference data endpoints — the questionnaire catalogs.

Read-only views of the YAML catalogs loaded at startup.  No identity
header is required.
"""

from fastapi import APIRouter, Depends

from dora_assessment.catalog import CatalogStore
from dora_assessment.models.catalog import Catalog

from dora_server.dependencies import get_catalogs

router = APIRouter(prefix="/catalogs", tags=["catalogs"])


@router.get("")
def list_catalogs(
    catalogs: CatalogStore = Depends(get_catalogs),
) -> list[dict]:
    """Return every loaded catalog version with its size."""
    return [
        {
            "version": version,
            "categories": len(catalogs.get(version).categories),
            "questions": len(catalogs.get(version).questions),
        }
        for version in catalogs.versions()
    ]


@router.get("/{version}")
def get_catalog(
    version: str,
    catalogs: CatalogStore = Depends(get_catalogs),
) -> Catalog:
    """Return the full catalog; 404 for an unknown version."""
    return catalogs.get(version)
