"""CatalogStore — loads questionnaire catalogs from ``v1/catalog/`` YAML.

The store is loaded once at startup and hands out immutable ``Catalog``
instances by version name (the YAML file stem).

Usage::

    store = CatalogStore()          # defaults to v1/catalog relative to repo root
    store.load()                    # parse all YAML files

    catalog = store.get("dora_v1")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from dora_assessment.models.catalog import Catalog

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------

def find_repo_root(start: Optional[Path] = None) -> Path:
    """Walk upwards from *start* to find the repo root (dir with pyproject.toml or .git).

    Falls back to cwd if no marker is found.
    """
    p = (start or Path(__file__).resolve()).parent
    for parent in [p, *p.parents]:
        if (parent / "pyproject.toml").exists() or (parent / ".git").exists():
            return parent
    return Path.cwd()


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


# ---------------------------------------------------------------------------
# CatalogStore
# ---------------------------------------------------------------------------

class CatalogStore:
    """Loads every ``*.yaml`` under the catalog directory into a ``Catalog``.

    Each file holds two top-level keys, ``categories`` and ``questions``,
    both ordered lists.  The file stem becomes the catalog version.
    """

    def __init__(self, catalog_dir: str | Path | None = None) -> None:
        if catalog_dir is None:
            catalog_dir = find_repo_root() / "v1" / "catalog"
        self._base = Path(catalog_dir)

        # Populated by load()
        self.catalogs: dict[str, Catalog] = {}

    def load(self) -> None:
        """Parse all catalog files.

        Raises ``FileNotFoundError`` if the catalog directory is missing and
        ``pydantic.ValidationError`` if a file does not describe a valid
        catalog (duplicate ids, unknown category references).
        """
        if not self._base.is_dir():
            raise FileNotFoundError(f"Missing catalog directory: {self._base}")

        for path in sorted(self._base.glob("*.yaml")):
            raw = load_yaml(path) or {}
            catalog = Catalog(
                version=path.stem,
                categories=raw.get("categories") or [],
                questions=raw.get("questions") or [],
            )
            self.catalogs[catalog.version] = catalog

        logger.info(
            "CatalogStore loaded %d catalogs: %s",
            len(self.catalogs),
            ", ".join(self.catalogs) or "-",
        )

    def get(self, version: str) -> Catalog:
        """Return the catalog for ``version``.

        Raises:
            KeyError: if no catalog with that version was loaded.
        """
        return self.catalogs[version]

    def versions(self) -> list[str]:
        return list(self.catalogs)
