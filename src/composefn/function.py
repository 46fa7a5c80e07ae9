"""
Composition function runner.

``DeploymentFunction`` sits between the runtime's request envelope and
the transform engine: it extracts the observed composite and the desired
resources, runs ``synthesize`` and writes the result back. Every error
becomes a single fatal result on the response; the desired state on a
fatal response is exactly the request's desired state.

Usage::

    from composefn.function import DeploymentFunction

    fn = DeploymentFunction()
    rsp = fn.run_function(req)
    if rsp.has_fatal:
        ...
"""

from __future__ import annotations

import logging
from typing import Optional

from opentelemetry import trace as otel_trace

from composefn.codec import DocumentCodec
from composefn.config import FunctionConfig, get_config
from composefn.envelope import (
    RunFunctionRequest,
    RunFunctionResponse,
    fatal,
    get_desired_composed_resources,
    get_observed_composite_resource,
    response_to,
    set_desired_composed_resources,
)
from composefn.errors import ConversionError, FieldReadError, RequestError
from composefn.logger import FunctionLogger
from composefn.otel import emit_fatal
from composefn.transform import DEPLOYMENT_KEY, synthesize

logger = logging.getLogger(__name__)

_tracer = otel_trace.get_tracer("composefn.function")


class DeploymentFunction:
    """Adds a Deployment derived from the composite to the desired resources."""

    def __init__(
        self,
        config: Optional[FunctionConfig] = None,
        codec: Optional[DocumentCodec] = None,
        log: Optional[FunctionLogger] = None,
    ):
        self.config = config or get_config()
        self.codec = codec or DocumentCodec()
        self.log = log or FunctionLogger()

    def _fatal(self, rsp: RunFunctionResponse, message: str) -> RunFunctionResponse:
        self.log.warning("Function failed", error=message)
        emit_fatal(message)
        fatal(rsp, message)
        return rsp

    def run_function(self, req: RunFunctionRequest) -> RunFunctionResponse:
        """Run the function against one request."""
        with _tracer.start_as_current_span("composefn.run_function"):
            rsp = response_to(req, self.config.response_ttl_seconds)

            try:
                xr = get_observed_composite_resource(req)
            except RequestError as e:
                return self._fatal(rsp, str(e))

            log = self.log.with_values(
                xr_version=xr.api_version,
                xr_kind=xr.kind,
                xr_name=xr.name,
            )

            desired = get_desired_composed_resources(req)

            try:
                updated = synthesize(xr, desired, codec=self.codec)
            except (FieldReadError, ConversionError) as e:
                return self._fatal(rsp, str(e))

            set_desired_composed_resources(rsp, updated)

            container = updated[DEPLOYMENT_KEY].resource.get_string(
                "spec.template.spec.containers[0].image"
            )
            log.info("Added deploy", name=xr.name, container=container)
            return rsp
