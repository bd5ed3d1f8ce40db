# tests/conftest.py

"""Shared pytest fixtures."""

from collections.abc import Generator

import pytest

import src.api.routes as routes


@pytest.fixture(autouse=True)
def reset_increases_client() -> Generator[None, None, None]:
    """Start every test without a cached predictions client."""
    routes._increases_client = None
    yield
    routes._increases_client = None
