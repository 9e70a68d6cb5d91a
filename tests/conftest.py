"""Root-level pytest configuration and shared fixtures.

Adds the src/ directory to sys.path so composer can be imported without installation.
Provides common factories and pytest fixtures used across all test suites.

Key exports:
    - Registry/template factories (make_registry, make_ready_cache, ...)
    - Mock store factories (make_parameter_store, make_template_store)
    - Pytest fixtures for every factory default
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

TEMPLATE_BUCKET = "mfe-static-assets"
TEMPLATE_KEY = "templates/catalog.html"

PARAMETER_NAMES = {
    "template_bucket": "/ssr-mfe/templatesBucket",
    "template_key": "/ssr-mfe/catalogTemplate",
    "mfe_list": "/ssr-mfe/microFrontends",
    "catalog": "/ssr-mfe/catalogArn",
    "reviews": "/ssr-mfe/reviewsArn",
}

CATALOG_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <title>Product details</title>
    <link rel="stylesheet" href="/static/catalog.css">
  </head>
  <body>
    <header class="site-header"><h1>Catalog</h1></header>
    <main>
      <section id="catalog" class="mfe-slot"></section>
      <div id="reviews"><p>Loading reviews...</p></div>
    </main>
  </body>
</html>
"""


# ---------------------------------------------------------------------------
# Registry factories
# ---------------------------------------------------------------------------


def make_entry_data(
    name: str = "reviews",
    mount_selector: str = "#reviews",
    remote_url: Optional[str] = None,
) -> Dict[str, str]:
    """Build a registry entry as published in the Parameter Store (camelCase).

    Args:
        name: Micro-frontend name.
        mount_selector: Selector of the mount element.
        remote_url: Fragment URL, derived from the name by default.

    Returns:
        Dict with name, mountSelector and remoteUrl keys.
    """
    return {
        "name": name,
        "mountSelector": mount_selector,
        "remoteUrl": remote_url or f"https://cdn.example.com/{name}/main.js",
    }


def make_registry(
    entries: Optional[List[Dict[str, str]]] = None,
    downstream: Optional[Dict[str, str]] = None,
) -> Any:
    """Build a Registry with one 'reviews' entry by default.

    Args:
        entries: Entry dicts (camelCase or snake_case keys).
        downstream: Alias -> downstream identifier mapping.

    Returns:
        Registry instance.
    """
    from composer.engine.registry import Registry

    return Registry(
        entries=[make_entry_data()] if entries is None else entries,
        template_bucket=TEMPLATE_BUCKET,
        template_key=TEMPLATE_KEY,
        downstream=downstream
        if downstream is not None
        else {
            "catalog": "arn:aws:states:eu-west-1:123456789012:stateMachine:catalog",
            "reviews": "arn:aws:lambda:eu-west-1:123456789012:function:reviews",
        },
    )


def make_ready_cache(
    registry: Any = None,
    template: str = CATALOG_TEMPLATE,
) -> Any:
    """Build a ProcessCache already in the ready state.

    Args:
        registry: Registry to store, make_registry() by default.
        template: Template text to parse and store.

    Returns:
        ProcessCache in state ready.
    """
    from composer.engine.html_transformer import parse_template
    from composer.engine.process_cache import ProcessCache

    cache = ProcessCache()
    cache.begin_loading()
    cache.set(registry or make_registry(), parse_template(template))
    return cache


# ---------------------------------------------------------------------------
# Store factories
# ---------------------------------------------------------------------------


def make_parameter_values(
    entries: Optional[List[Dict[str, str]]] = None,
) -> Dict[str, str]:
    """Build the Parameter Store contents for a complete registry.

    Args:
        entries: Micro-frontend entry dicts.

    Returns:
        Parameter name -> value mapping.
    """
    return {
        PARAMETER_NAMES["template_bucket"]: TEMPLATE_BUCKET,
        PARAMETER_NAMES["template_key"]: TEMPLATE_KEY,
        PARAMETER_NAMES["mfe_list"]: json.dumps(
            entries
            if entries is not None
            else [
                make_entry_data("catalog", "#catalog"),
                make_entry_data("reviews", "#reviews"),
            ]
        ),
        PARAMETER_NAMES["catalog"]: "arn:aws:states:eu-west-1:123456789012:stateMachine:catalog",
        PARAMETER_NAMES["reviews"]: "arn:aws:lambda:eu-west-1:123456789012:function:reviews",
    }


def make_parameter_store(
    values: Optional[Dict[str, str]] = None,
    invalid: Optional[List[str]] = None,
) -> MagicMock:
    """Build a mock ParameterStoreClient.

    Args:
        values: Found parameters, make_parameter_values() by default.
        invalid: Names reported as invalid (missing).

    Returns:
        MagicMock with get_parameters as an AsyncMock.
    """
    store = MagicMock()
    found = make_parameter_values() if values is None else values
    store.get_parameters = AsyncMock(return_value=(dict(found), list(invalid or [])))
    return store


def make_template_store(template: str = CATALOG_TEMPLATE) -> MagicMock:
    """Build a mock S3Client returning the template bytes.

    Args:
        template: Template text to return UTF-8 encoded.

    Returns:
        MagicMock with fetch as an AsyncMock.
    """
    store = MagicMock()
    store.fetch = AsyncMock(return_value=template.encode("utf-8"))
    return store


def make_registry_loader(parameter_store: Optional[MagicMock] = None) -> Any:
    """Build a RegistryLoader over the default parameter names.

    Args:
        parameter_store: Mock Parameter Store, make_parameter_store() by default.

    Returns:
        RegistryLoader instance.
    """
    from composer.repository.registry_repository import RegistryLoader

    return RegistryLoader(
        parameter_store=parameter_store or make_parameter_store(),
        template_bucket_parameter=PARAMETER_NAMES["template_bucket"],
        template_key_parameter=PARAMETER_NAMES["template_key"],
        mfe_list_parameter=PARAMETER_NAMES["mfe_list"],
        downstream_parameters={
            "catalog": PARAMETER_NAMES["catalog"],
            "reviews": PARAMETER_NAMES["reviews"],
        },
    )


def make_client_error(code: str, operation: str = "GetObject") -> Any:
    """Build a botocore ClientError with the given error code."""
    from botocore.exceptions import ClientError

    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def registry() -> Any:
    """Provide a Registry with one 'reviews' entry."""
    return make_registry()


@pytest.fixture
def ready_cache() -> Any:
    """Provide a ProcessCache in the ready state."""
    return make_ready_cache()


@pytest.fixture
def parameter_store() -> MagicMock:
    """Provide a mock ParameterStoreClient with a complete registry."""
    return make_parameter_store()


@pytest.fixture
def template_store() -> MagicMock:
    """Provide a mock S3Client returning the catalog template."""
    return make_template_store()


@pytest.fixture
def registry_factory():
    """Provide make_registry for tests that need custom entries."""
    return make_registry


@pytest.fixture
def cache_factory():
    """Provide make_ready_cache for tests that need custom state."""
    return make_ready_cache


@pytest.fixture
def entry_factory():
    """Provide make_entry_data."""
    return make_entry_data


@pytest.fixture
def parameter_store_factory():
    """Provide make_parameter_store."""
    return make_parameter_store


@pytest.fixture
def parameter_values_factory():
    """Provide make_parameter_values."""
    return make_parameter_values


@pytest.fixture
def template_store_factory():
    """Provide make_template_store."""
    return make_template_store


@pytest.fixture
def registry_loader_factory():
    """Provide make_registry_loader."""
    return make_registry_loader


@pytest.fixture
def client_error_factory():
    """Provide make_client_error."""
    return make_client_error


@pytest.fixture
def catalog_template() -> str:
    """Provide the catalog page template text."""
    return CATALOG_TEMPLATE


@pytest.fixture
def parameter_names() -> Dict[str, str]:
    """Provide the default Parameter Store names."""
    return dict(PARAMETER_NAMES)
