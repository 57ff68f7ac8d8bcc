"""Global test configuration

Role:
- test environment setup
- parsed catalog fixtures and shared fakes

Raw test data and fake collaborators live in tests/fixtures.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


# Put the project root on the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from intake_pricer.catalog.ingestor import Catalog, parse_catalog  # noqa: E402
from tests.fixtures.catalogs import (  # noqa: E402
    GEN15_ONLY_CATALOG_CSV,
    IPHONE_CATALOG_CSV,
    MIXED_CATALOG_CSV,
)
from tests.fixtures.fakes import FakeCatalogFetcher  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def test_env() -> None:
    """Test environment variables (session wide)"""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "INFO"


@pytest.fixture
def iphone_catalog() -> Catalog:
    return parse_catalog(IPHONE_CATALOG_CSV)


@pytest.fixture
def mixed_catalog() -> Catalog:
    return parse_catalog(MIXED_CATALOG_CSV)


@pytest.fixture
def gen15_catalog() -> Catalog:
    return parse_catalog(GEN15_ONLY_CATALOG_CSV)


@pytest.fixture
def iphone_fetcher() -> FakeCatalogFetcher:
    return FakeCatalogFetcher(text=IPHONE_CATALOG_CSV)
