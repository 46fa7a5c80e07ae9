"""
Typed view of the composite resource's spec.

The composite arrives as an untyped document; its ``spec`` is validated
once at the boundary into ``CompositeParameters`` so that every missing
or mistyped field is reported together instead of one read at a time.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from composefn.errors import FieldReadError
from composefn.resource import Unstructured

logger = logging.getLogger(__name__)


class CompositeParameters(BaseModel):
    """Fields of the composite's spec that drive the Deployment.

    Empty strings are valid: only absence or a non-string value is an error.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    image: StrictStr = Field(..., description="Container image repository")
    tag: StrictStr = Field(..., description="Container image tag")

    @property
    def image_ref(self) -> str:
        return f"{self.image}:{self.tag}"


def _field_errors(exc: ValidationError) -> Dict[str, str]:
    """Map ``spec.<field>`` to the first validation message for that field."""
    errors: Dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ()
        if not loc:
            continue
        path = "spec." + ".".join(str(part) for part in loc)
        errors.setdefault(path, err.get("msg", "invalid value"))
    return errors


def parse_parameters(composite: Unstructured) -> CompositeParameters:
    """Validate the composite's spec into ``CompositeParameters``.

    Raises:
        FieldReadError: If ``spec.image`` or ``spec.tag`` is absent or not
            a string. ``field`` names the first failing field and
            ``fields`` lists all of them.
    """
    spec: Any = composite.object.get("spec")
    if not isinstance(spec, dict):
        spec = {}

    try:
        return CompositeParameters.model_validate(spec)
    except ValidationError as e:
        errors = _field_errors(e)
        fields: List[str] = list(errors)
        first = fields[0]
        logger.debug("Invalid %s spec: %s", composite.kind or "composite", errors)
        raise FieldReadError(
            first,
            kind=composite.kind,
            fields=fields,
            cause="; ".join(f"{path}: {msg}" for path, msg in errors.items()),
        ) from e
