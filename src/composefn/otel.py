"""
OTel span event helpers for the composition function.

Events are added to the current span only when it is recording, so the
helpers are no-ops unless a tracer provider has been configured.

Usage::

    from composefn.otel import emit_deployment_synthesized, emit_fatal

    emit_deployment_synthesized("web", "prod", "nginx:1.25")
    emit_fatal("cannot read spec.tag field of XApp")
"""

from __future__ import annotations

import logging

from opentelemetry import trace as otel_trace

logger = logging.getLogger(__name__)


def _add_span_event(name: str, attributes: dict[str, str | int | float | bool]) -> None:
    """Add an event to the current OTel span if it is recording."""
    span = otel_trace.get_current_span()
    if span and span.is_recording():
        span.add_event(name=name, attributes=attributes)


def emit_deployment_synthesized(name: str, namespace: str, image: str) -> None:
    """Emit ``composefn.deployment.synthesized``."""
    _add_span_event(
        "composefn.deployment.synthesized",
        {
            "deployment.name": name,
            "deployment.namespace": namespace,
            "deployment.image": image,
        },
    )


def emit_fatal(message: str) -> None:
    """Emit ``composefn.function.fatal``."""
    logger.debug("Fatal result: %s", message)
    _add_span_event("composefn.function.fatal", {"function.message": message})
