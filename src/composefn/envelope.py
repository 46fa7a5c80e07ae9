"""
Request/response envelope of a composition function.

Pydantic models mirroring the JSON form of ``RunFunctionRequest`` and
``RunFunctionResponse``, plus helpers to pull typed state out of a
request and to populate a response.

Usage::

    from composefn.envelope import (
        RunFunctionRequest,
        get_observed_composite_resource,
        response_to,
    )

    req = RunFunctionRequest.model_validate(yaml.safe_load(text))
    xr = get_observed_composite_resource(req)
    rsp = response_to(req, ttl=60)
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from composefn.errors import RequestError
from composefn.resource import DesiredComposed, Ready, Unstructured

DEFAULT_TTL_SECONDS = 60.0


class Severity(str, Enum):
    """Severity of a result attached to a response."""
    UNSPECIFIED = "SEVERITY_UNSPECIFIED"
    FATAL = "SEVERITY_FATAL"
    WARNING = "SEVERITY_WARNING"
    NORMAL = "SEVERITY_NORMAL"


class _Envelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RequestMeta(_Envelope):
    tag: str = ""


class ResponseMeta(_Envelope):
    tag: str = ""
    ttl: Optional[str] = Field(None, description="Duration, e.g. '60s'")


class Resource(_Envelope):
    """A resource document together with its connection details and readiness."""
    resource: Dict[str, Any] = Field(default_factory=dict)
    connection_details: Dict[str, str] = Field(
        default_factory=dict, alias="connectionDetails"
    )
    ready: Ready = Ready.UNSPECIFIED


class State(_Envelope):
    """Composite plus composed resources, either observed or desired."""
    composite: Optional[Resource] = None
    resources: Dict[str, Resource] = Field(default_factory=dict)


class RunFunctionRequest(_Envelope):
    meta: RequestMeta = Field(default_factory=RequestMeta)
    observed: State = Field(default_factory=State)
    desired: State = Field(default_factory=State)
    input: Optional[Dict[str, Any]] = None
    context: Optional[Dict[str, Any]] = None


class Result(_Envelope):
    severity: Severity = Severity.NORMAL
    message: str = ""


class RunFunctionResponse(_Envelope):
    meta: ResponseMeta = Field(default_factory=ResponseMeta)
    desired: State = Field(default_factory=State)
    results: List[Result] = Field(default_factory=list)
    context: Optional[Dict[str, Any]] = None

    @property
    def has_fatal(self) -> bool:
        """True if any result is fatal."""
        return any(r.severity == Severity.FATAL for r in self.results)

    def to_document(self) -> Dict[str, Any]:
        """JSON-compatible form with camelCase keys."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def format_duration(seconds: float) -> str:
    """Format seconds as a protobuf JSON duration (``"60s"``, ``"0.5s"``, never exponent notation)."""
    return f"{seconds:.9f}".rstrip("0").rstrip(".") + "s"


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------


def get_observed_composite_resource(req: RunFunctionRequest) -> Unstructured:
    """Return a copy of the observed composite resource.

    Raises:
        RequestError: If the request has no observed composite resource.
    """
    composite = req.observed.composite
    if composite is None:
        raise RequestError(
            "observed composite resource",
            "request has no observed composite resource",
        )
    return Unstructured(copy.deepcopy(composite.resource))


def get_desired_composed_resources(req: RunFunctionRequest) -> Dict[str, DesiredComposed]:
    """Return copies of the desired composed resources, keyed by name."""
    desired: Dict[str, DesiredComposed] = {}
    for name, res in req.desired.resources.items():
        desired[name] = DesiredComposed(
            resource=Unstructured(copy.deepcopy(res.resource)),
            ready=res.ready,
        )
    return desired


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------


def response_to(req: RunFunctionRequest, ttl: float = DEFAULT_TTL_SECONDS) -> RunFunctionResponse:
    """Start a response that carries the request's tag, desired state and context."""
    return RunFunctionResponse(
        meta=ResponseMeta(tag=req.meta.tag, ttl=format_duration(ttl)),
        desired=req.desired.model_copy(deep=True),
        context=copy.deepcopy(req.context),
    )


def _add_result(rsp: RunFunctionResponse, severity: Severity, message: str) -> None:
    rsp.results.append(Result(severity=severity, message=message))


def fatal(rsp: RunFunctionResponse, message: str) -> None:
    """Attach a fatal result: the runtime must not act on this response."""
    _add_result(rsp, Severity.FATAL, message)


def warning(rsp: RunFunctionResponse, message: str) -> None:
    _add_result(rsp, Severity.WARNING, message)


def normal(rsp: RunFunctionResponse, message: str) -> None:
    _add_result(rsp, Severity.NORMAL, message)


def set_desired_composed_resources(
    rsp: RunFunctionResponse, desired: Mapping[str, DesiredComposed]
) -> None:
    """Write ``desired`` into the response, keeping its composite state."""
    for name, dc in desired.items():
        rsp.desired.resources[name] = Resource(
            resource=dc.resource.to_dict(),
            ready=dc.ready,
        )
