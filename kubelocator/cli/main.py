"""kubelocator command-line interface."""

from __future__ import annotations

import asyncio
import json
from typing import IO, Any

import click
from kubernetes_asyncio.client.exceptions import ApiException  # type: ignore[import-untyped]

from kubelocator.app import ComponentError, LocatorApp
from kubelocator.app import main as serve_main
from kubelocator.config import load_config
from kubelocator.errors import LocatorError
from kubelocator.models.locator import ObjectLocator


async def _locate(locator: ObjectLocator, namespace: str | None, kubeconfig: str | None) -> dict[str, Any]:
    config = load_config()
    if kubeconfig:
        config.kubernetes.kubeconfig = kubeconfig
    app = LocatorApp(config)
    try:
        await app.start(serve=False)
        assert app.locator is not None
        return await app.locator.locate(locator, namespace or config.kubernetes.default_namespace)
    finally:
        await app.stop()


@click.group()
@click.version_option(package_name="kubelocator")
def cli() -> None:
    """Resolve Kubernetes objects through declared relationship paths."""


@cli.command()
@click.argument("locator_file", type=click.File("r"))
@click.option("-n", "--namespace", default=None, help="Namespace of the start object (default: KUBELOCATOR_NAMESPACE).")
@click.option("--kubeconfig", default=None, help="Path to a kubeconfig file.")
def locate(locator_file: IO[str], namespace: str | None, kubeconfig: str | None) -> None:
    """Resolve LOCATOR_FILE (JSON) to exactly one object and print it."""
    try:
        document = json.load(locator_file)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="LOCATOR_FILE") from exc

    try:
        locator = ObjectLocator.from_dict(document)
        obj = asyncio.run(_locate(locator, namespace, kubeconfig))
    except (LocatorError, ComponentError, ApiException, ValueError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    click.echo(json.dumps(obj, indent=2, sort_keys=True, default=str))


@cli.command()
def serve() -> None:
    """Run the REST service (same as ``python -m kubelocator``)."""
    asyncio.run(serve_main())
