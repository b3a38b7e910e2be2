import pytest

from dora_assessment.catalog import CatalogStore, find_repo_root
from dora_assessment.models.session import Respondent

from helpers.catalogs import build_catalog


@pytest.fixture(scope="session")
def catalog_store():
    store = CatalogStore(catalog_dir=find_repo_root() / "v1" / "catalog")
    store.load()
    return store


@pytest.fixture(scope="session")
def dora_catalog(catalog_store):
    return catalog_store.get("dora_v1")


@pytest.fixture
def two_question_catalog():
    """Q1 in category A, Q2 in category B, options 1/2/3."""
    return build_catalog({"A": ["Q1"], "B": ["Q2"]})


@pytest.fixture
def empty_catalog():
    return build_catalog({"A": []})


@pytest.fixture
def respondent():
    return Respondent(
        user_name="ana",
        provider_name="CloudCo",
        financial_entity_name="BancoX",
    )
