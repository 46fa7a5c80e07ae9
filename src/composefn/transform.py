"""
Transform engine: observed composite + desired resources -> desired resources.

``synthesize`` is a pure function. It reads ``spec.image`` and
``spec.tag`` from the observed composite, builds a two-replica Deployment
named after the composite, and returns a new desired-resource mapping
holding every entry of the input plus the Deployment under the
``"deployment"`` key. The caller's mapping is never mutated.

Usage::

    from composefn.resource import Unstructured
    from composefn.transform import synthesize

    xr = Unstructured({
        "apiVersion": "example.org/v1",
        "kind": "XApp",
        "metadata": {"name": "web", "namespace": "prod"},
        "spec": {"image": "nginx", "tag": "1.25"},
    })
    desired = synthesize(xr, {})
    desired["deployment"].resource.get_string("spec.template.spec.containers[0].image")
    # 'nginx:1.25'
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from composefn.codec import DocumentCodec
from composefn.deployment import build_deployment
from composefn.otel import emit_deployment_synthesized
from composefn.parameters import parse_parameters
from composefn.resource import DesiredComposed, Unstructured

logger = logging.getLogger(__name__)

DEPLOYMENT_KEY = "deployment"


def synthesize(
    observed: Unstructured,
    desired: Mapping[str, DesiredComposed],
    codec: Optional[DocumentCodec] = None,
) -> Dict[str, DesiredComposed]:
    """Derive the Deployment for ``observed`` and add it to ``desired``.

    Args:
        observed: Observed state of the composite resource.
        desired: Desired composed resources accumulated so far.
        codec: Converter from the typed Deployment to document form.

    Returns:
        A new mapping with all entries of ``desired`` and the Deployment
        under ``"deployment"`` (replacing any earlier entry for that key).

    Raises:
        FieldReadError: If ``spec.image`` or ``spec.tag`` is absent or not a string.
        ConversionError: If the Deployment cannot be converted to a document.
    """
    codec = codec or DocumentCodec()
    name = observed.name
    params = parse_parameters(observed)

    deployment = build_deployment(name, observed.namespace, params.image_ref)
    document = codec.encode(deployment)

    updated = dict(desired)
    updated[DEPLOYMENT_KEY] = DesiredComposed(resource=document)

    logger.debug("Synthesized deployment name=%s image=%s", name, params.image_ref)
    emit_deployment_synthesized(name, observed.namespace, params.image_ref)
    return updated
