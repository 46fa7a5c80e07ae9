"""
Dynamically typed resource documents.

``Unstructured`` wraps a plain nested mapping (as decoded from JSON or
YAML) and exposes the identifying fields of a Kubernetes object together
with field-path lookups such as ``spec.image`` or
``spec.containers[0].name``.

``DesiredComposed`` is one entry of the desired resource set: a document
plus its readiness as reported back to the runtime.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from composefn.errors import FieldPathError

_SEGMENT = re.compile(r"([^.\[\]]+)|\[(\d+)\]")


def parse_field_path(path: str) -> List[Union[str, int]]:
    """Split a field path into map keys and list indices.

    ``"spec.containers[0].name"`` becomes ``["spec", "containers", 0, "name"]``.
    """
    if not path:
        raise FieldPathError(path, "empty field path")

    segments: List[Union[str, int]] = []
    pos = 0
    while pos < len(path):
        if segments:
            if path[pos] == ".":
                pos += 1
            elif path[pos] != "[":
                raise FieldPathError(path, f"expected '.' or '[' at position {pos}")
        match = _SEGMENT.match(path, pos)
        if match is None:
            raise FieldPathError(path, f"unexpected character at position {pos}")
        key, index = match.groups()
        segments.append(key if key is not None else int(index))
        pos = match.end()
    return segments


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


class Ready(str, Enum):
    """Readiness of a desired composed resource."""
    UNSPECIFIED = "READY_UNSPECIFIED"
    TRUE = "READY_TRUE"
    FALSE = "READY_FALSE"


class Unstructured:
    """A resource document without a fixed schema."""

    def __init__(self, obj: Optional[Dict[str, Any]] = None):
        self.object: Dict[str, Any] = obj if obj is not None else {}

    def __repr__(self) -> str:
        return f"Unstructured(kind={self.kind!r}, name={self.name!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Unstructured):
            return NotImplemented
        return self.object == other.object

    @property
    def metadata(self) -> Dict[str, Any]:
        meta = self.object.get("metadata")
        return meta if isinstance(meta, dict) else {}

    @property
    def api_version(self) -> str:
        return _str(self.object.get("apiVersion"))

    @property
    def kind(self) -> str:
        return _str(self.object.get("kind"))

    @property
    def name(self) -> str:
        return _str(self.metadata.get("name"))

    @property
    def namespace(self) -> str:
        return _str(self.metadata.get("namespace"))

    def get_value(self, path: str) -> Any:
        """Return the value at ``path``.

        Raises:
            FieldPathError: If the path is malformed or any segment is missing.
        """
        current: Any = self.object
        walked = ""
        for segment in parse_field_path(path):
            if isinstance(segment, int):
                walked = f"{walked}[{segment}]"
                if not isinstance(current, list):
                    raise FieldPathError(walked, "not an array")
                if segment >= len(current):
                    raise FieldPathError(walked, "no such element")
                current = current[segment]
            else:
                walked = f"{walked}.{segment}" if walked else segment
                if not isinstance(current, dict):
                    raise FieldPathError(walked, "not an object")
                if segment not in current:
                    raise FieldPathError(walked, "no such field")
                current = current[segment]
        return current

    def get_string(self, path: str) -> str:
        """Return the string at ``path``.

        Raises:
            FieldPathError: If the value is missing or not a string.
        """
        value = self.get_value(path)
        if not isinstance(value, str):
            raise FieldPathError(path, f"not a string: {type(value).__name__}")
        return value

    def to_dict(self) -> Dict[str, Any]:
        """Return a deep copy of the underlying document."""
        return copy.deepcopy(self.object)


@dataclass
class DesiredComposed:
    """A composed resource the function wants to exist."""
    resource: Unstructured = field(default_factory=Unstructured)
    ready: Ready = Ready.UNSPECIFIED
