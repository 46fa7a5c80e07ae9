"""
Pytest configuration and fixtures for composefn tests.
"""

from __future__ import annotations

import copy
import logging
import os
from typing import Any, Dict, Generator

import pytest

from composefn.config import reset_config
from composefn.logger import ROOT_LOGGER
from composefn.resource import DesiredComposed, Ready, Unstructured


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_env() -> Generator[None, None, None]:
    """Strip COMPOSEFN_* variables and reset the config singleton around each test."""
    original = {k: v for k, v in os.environ.items() if k.startswith("COMPOSEFN_")}
    for key in original:
        os.environ.pop(key)
    reset_config()

    yield

    for key in [k for k in os.environ if k.startswith("COMPOSEFN_")]:
        os.environ.pop(key)
    os.environ.update(original)
    reset_config()


@pytest.fixture(autouse=True)
def clean_log_handlers() -> Generator[None, None, None]:
    """Remove handlers installed by configure_logging during a test."""
    yield
    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        if getattr(handler, "_composefn", False):
            root.removeHandler(handler)


# ============================================================================
# Resource Fixtures
# ============================================================================


@pytest.fixture
def composite_doc() -> Dict[str, Any]:
    """Observed composite resource document."""
    return {
        "apiVersion": "example.org/v1alpha1",
        "kind": "XApp",
        "metadata": {"name": "web", "namespace": "prod"},
        "spec": {"image": "nginx", "tag": "1.25", "unrelated": {"x": 1}},
    }


@pytest.fixture
def composite(composite_doc: Dict[str, Any]) -> Unstructured:
    return Unstructured(composite_doc)


@pytest.fixture
def cache_doc() -> Dict[str, Any]:
    """An unrelated desired composed resource."""
    return {
        "apiVersion": "cache.example.org/v1",
        "kind": "Redis",
        "metadata": {"name": "web-cache"},
        "spec": {"size": "small"},
    }


@pytest.fixture
def desired_with_cache(cache_doc: Dict[str, Any]) -> Dict[str, DesiredComposed]:
    return {
        "cache": DesiredComposed(
            resource=Unstructured(copy.deepcopy(cache_doc)),
            ready=Ready.TRUE,
        ),
    }


# ============================================================================
# Envelope Fixtures
# ============================================================================


@pytest.fixture
def request_doc(composite_doc: Dict[str, Any], cache_doc: Dict[str, Any]) -> Dict[str, Any]:
    """RunFunctionRequest in its JSON/YAML form."""
    return {
        "meta": {"tag": "run-1"},
        "observed": {
            "composite": {"resource": composite_doc},
        },
        "desired": {
            "composite": {"resource": {"apiVersion": "example.org/v1alpha1", "kind": "XApp"}},
            "resources": {
                "cache": {"resource": cache_doc, "ready": "READY_TRUE"},
            },
        },
        "context": {"example.org/previous": {"step": 1}},
    }


# ============================================================================
# Codec Fixtures
# ============================================================================


class StubApiClient:
    """Stands in for ``kubernetes.client.ApiClient`` with a fixed serialization."""

    def __init__(self, document=None, error=None):
        self.document = document
        self.error = error

    def sanitize_for_serialization(self, obj):
        if self.error is not None:
            raise self.error
        return self.document


@pytest.fixture
def stub_api_client():
    """Factory for ApiClient stubs returning ``document`` or raising ``error``."""
    return StubApiClient


@pytest.fixture
def unencodable_codec():
    """Codec whose serialized Deployment carries a non-finite container image."""
    from composefn.codec import DocumentCodec

    document = {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": "web"},
        "spec": {"template": {"spec": {"containers": [{"name": "web", "image": float("inf")}]}}},
    }
    return DocumentCodec(api_client=StubApiClient(document=document))
