"""Shared fixtures for API (controller) tests.

Builds the gateway application through create_app() with an injected
ProcessCache. The lifespan is not entered, so no AWS client is created:
tests either pass a cache that is already ready or one that never loaded.

Key exports:
    - app / client: application with a ready cache (catalog template, reviews entry)
    - unready_app / unready_client: application whose cache never loaded
    - app_factory: build an application around a custom cache
"""

import sys
from pathlib import Path
from typing import Any, Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_test_app(cache: Any, **settings_overrides: Any) -> FastAPI:
    """Build the application with test settings and the given cache.

    Args:
        cache: ProcessCache to inject
        **settings_overrides: AppSettings field overrides

    Returns:
        Configured FastAPI application
    """
    from composer.config.app_settings import AppSettings
    from composer.main import create_app

    return create_app(AppSettings(**settings_overrides), cache)


def _make_unready_cache() -> Any:
    from composer.engine.process_cache import ProcessCache

    return ProcessCache()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def app(ready_cache) -> FastAPI:
    """Provide the application backed by a ready cache."""
    return _make_test_app(ready_cache)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Provide a TestClient for the ready application."""
    return TestClient(app)


@pytest.fixture
def unready_app() -> FastAPI:
    """Provide the application whose cache was never loaded."""
    return _make_test_app(_make_unready_cache())


@pytest.fixture
def unready_client(unready_app: FastAPI) -> TestClient:
    """Provide a TestClient for the unready application."""
    return TestClient(unready_app)


@pytest.fixture
def app_factory():
    """Provide a builder for applications around custom caches."""

    def factory(cache: Optional[Any] = None, **settings_overrides: Any) -> FastAPI:
        return _make_test_app(cache or _make_unready_cache(), **settings_overrides)

    return factory
