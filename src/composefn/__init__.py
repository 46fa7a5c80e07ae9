"""
composefn - A composition function that derives a Deployment from a composite resource.

Given the observed state of a composite resource with ``spec.image`` and
``spec.tag``, the function adds a two-replica ``apps/v1`` Deployment named
after the composite to the desired composed resources, under the key
``"deployment"``.

Example usage:
    from composefn import Unstructured, synthesize

    xr = Unstructured({
        "apiVersion": "example.org/v1",
        "kind": "XApp",
        "metadata": {"name": "web", "namespace": "prod"},
        "spec": {"image": "nginx", "tag": "1.25"},
    })
    desired = synthesize(xr, {})
"""

__version__ = "0.1.0"
__all__ = [
    "DeploymentFunction",
    "DesiredComposed",
    "Unstructured",
    "synthesize",
    "__version__",
]


# Lazy imports to avoid loading the kubernetes client at import time
def __getattr__(name: str):
    if name == "DeploymentFunction":
        from composefn.function import DeploymentFunction
        return DeploymentFunction
    if name == "DesiredComposed":
        from composefn.resource import DesiredComposed
        return DesiredComposed
    if name == "Unstructured":
        from composefn.resource import Unstructured
        return Unstructured
    if name == "synthesize":
        from composefn.transform import synthesize
        return synthesize
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
