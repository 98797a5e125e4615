"""Shared fixtures."""

import pytest

from mpnmatch.catalog import Catalog, build_catalog


@pytest.fixture(scope="session")
def catalog() -> Catalog:
    """Catalog of all bundled providers, built once per test session."""
    return build_catalog()


@pytest.fixture(scope="session")
def resolver(catalog):
    return catalog.resolver


@pytest.fixture(scope="session")
def engine(catalog):
    return catalog.engine
