"""
Typed construction of the child Deployment.
"""

from __future__ import annotations

from kubernetes import client

DEPLOYMENT_API_VERSION = "apps/v1"
DEPLOYMENT_KIND = "Deployment"

# Fixed replica count for every synthesized Deployment.
REPLICAS = 2


def app_labels(name: str) -> dict:
    """Labels shared by the selector and the pod template."""
    return {"app": name}


def build_deployment(name: str, namespace: str, image_ref: str) -> client.V1Deployment:
    """Build a single-container Deployment named after the composite.

    The selector's ``matchLabels`` and the pod template's labels are
    separate dicts with identical content.
    """
    return client.V1Deployment(
        api_version=DEPLOYMENT_API_VERSION,
        kind=DEPLOYMENT_KIND,
        metadata=client.V1ObjectMeta(
            name=name,
            namespace=namespace or None,
        ),
        spec=client.V1DeploymentSpec(
            replicas=REPLICAS,
            selector=client.V1LabelSelector(match_labels=app_labels(name)),
            template=client.V1PodTemplateSpec(
                metadata=client.V1ObjectMeta(labels=app_labels(name)),
                spec=client.V1PodSpec(
                    containers=[
                        client.V1Container(name=name, image=image_ref),
                    ],
                ),
            ),
        ),
    )
