"""
Encoder/decoder pair between Kubernetes client models and documents.

``DocumentCodec`` converts typed ``kubernetes.client`` models into the
plain-mapping form held by ``Unstructured`` and back again. It keeps no
registration state: callers construct a codec and pass it where a
conversion is needed.

Usage::

    from composefn.codec import DocumentCodec

    codec = DocumentCodec()
    doc = codec.encode(deployment)          # Unstructured
    typed = codec.decode(doc, "V1Deployment")
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Optional

from kubernetes.client import ApiClient

from composefn.errors import ConversionError
from composefn.resource import Unstructured

logger = logging.getLogger(__name__)


class _JSONResponse:
    """Minimal response shim accepted by ``ApiClient.deserialize``."""

    def __init__(self, document: dict):
        self.data = json.dumps(document)


def _check_json(value: Any, path: str = "") -> None:
    """Raise TypeError/ValueError unless ``value`` is strict JSON."""
    if value is None or isinstance(value, (bool, int, str)):
        return
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise ValueError(f"{path or '<root>'}: non-finite number {value!r}")
        return
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"{path or '<root>'}: non-string key {key!r}")
            _check_json(item, f"{path}.{key}" if path else key)
        return
    if isinstance(value, list):
        for i, item in enumerate(value):
            _check_json(item, f"{path}[{i}]")
        return
    raise TypeError(f"{path or '<root>'}: unsupported type {type(value).__name__}")


class DocumentCodec:
    """Converts ``kubernetes.client`` models to and from documents."""

    def __init__(self, api_client: Optional[ApiClient] = None):
        self._api_client = api_client

    @property
    def api_client(self) -> ApiClient:
        if self._api_client is None:
            self._api_client = ApiClient()
        return self._api_client

    def encode(self, model: Any) -> Unstructured:
        """Convert a typed model into an ``Unstructured`` document.

        Raises:
            ConversionError: If the model has values that cannot be
                represented as JSON.
        """
        source = type(model).__name__
        try:
            document = self.api_client.sanitize_for_serialization(model)
            if not isinstance(document, dict):
                raise TypeError(f"expected an object, got {type(document).__name__}")
            _check_json(document)
        except (TypeError, ValueError, AttributeError) as e:
            logger.debug("Failed to encode %s: %s", source, e)
            raise ConversionError(source, "Unstructured", str(e)) from e
        return Unstructured(document)

    def decode(self, document: Unstructured, kind: str) -> Any:
        """Convert a document back into the typed model named ``kind``.

        ``kind`` is a ``kubernetes.client`` model name such as ``"V1Deployment"``.

        Raises:
            ConversionError: If the document cannot be deserialized.
        """
        try:
            return self.api_client.deserialize(_JSONResponse(document.object), kind)
        except (TypeError, ValueError, AttributeError) as e:
            raise ConversionError("Unstructured", kind, str(e)) from e
