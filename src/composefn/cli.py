"""
composefn CLI - Run the Deployment composition function from the shell.

Commands:
    composefn run        Run the function against a RunFunctionRequest document
    composefn validate   Validate a composite resource's spec

Usage::

    composefn run request.yaml
    cat request.json | composefn run - --output json
    composefn validate xr.yaml
"""

from __future__ import annotations

import json
import sys
from typing import Any, Optional

import click
import yaml
from pydantic import ValidationError

from composefn import __version__
from composefn.config import get_config
from composefn.envelope import RunFunctionRequest
from composefn.errors import FieldReadError
from composefn.function import DeploymentFunction
from composefn.logger import configure_logging
from composefn.parameters import parse_parameters
from composefn.resource import Unstructured


def _load_document(stream) -> Any:
    """Parse a YAML or JSON document."""
    try:
        return yaml.safe_load(stream)
    except yaml.YAMLError as e:
        raise click.ClickException(f"cannot parse {stream.name}: {e}") from e


def _dump(document: Any, output: str) -> str:
    if output == "json":
        return json.dumps(document, indent=2, sort_keys=True)
    return yaml.safe_dump(document, sort_keys=True, default_flow_style=False)


@click.group()
@click.version_option(version=__version__)
def main():
    """composefn - Derive a Deployment from a composite resource."""
    pass


@main.command("run")
@click.argument("request", type=click.File("r"), default="-")
@click.option(
    "--output", "-o",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    help="Response output format",
)
@click.option("--ttl", type=click.FloatRange(min=0), default=None, help="Response TTL in seconds")
def run_cmd(request, output: str, ttl: Optional[float]):
    """Run the function against a RunFunctionRequest.

    REQUEST is a YAML or JSON file, or '-' for stdin. The response is
    printed to stdout; logs go to stderr. Exits 1 when the response
    carries a fatal result.

    Example:
        composefn run request.yaml --output json
    """
    overrides = {"response_ttl_seconds": ttl} if ttl is not None else {}
    try:
        config = get_config(**overrides)
    except ValidationError as e:
        raise click.ClickException(f"invalid configuration: {e}") from e
    configure_logging(config, stream=sys.stderr)

    raw = _load_document(request)
    if not isinstance(raw, dict):
        raise click.ClickException("request must be a mapping")
    try:
        req = RunFunctionRequest.model_validate(raw)
    except ValidationError as e:
        raise click.ClickException(f"invalid RunFunctionRequest: {e}") from e

    rsp = DeploymentFunction(config=config).run_function(req)
    click.echo(_dump(rsp.to_document(), output))

    if rsp.has_fatal:
        sys.exit(1)


@main.command("validate")
@click.argument("composite", type=click.File("r"), default="-")
def validate_cmd(composite):
    """Validate the spec of a composite resource.

    Prints every missing or mistyped field. Exits 1 on failure.

    Example:
        composefn validate xr.yaml
    """
    raw = _load_document(composite)
    if not isinstance(raw, dict):
        raise click.ClickException("composite resource must be a mapping")

    xr = Unstructured(raw)
    try:
        params = parse_parameters(xr)
    except FieldReadError as e:
        click.echo(f"✗ {xr.kind or 'composite'} {xr.name or '<unnamed>'} is invalid", err=True)
        for field in e.fields:
            click.echo(f"  - {field}", err=True)
        click.echo(str(e), err=True)
        sys.exit(1)

    click.echo(f"✓ {xr.kind or 'composite'} {xr.name or '<unnamed>'}: image {params.image_ref}")


if __name__ == "__main__":
    main()
