"""
CLI entry point for ocp-translate.
"""

import logging
from functools import wraps
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from ocp_translate.config import TranslatorConfig, load_config
from ocp_translate.exceptions import OcpTranslateError, format_error_for_cli
from ocp_translate.loaders import (
    dump_manifests,
    find_resource,
    load_documents,
    load_resource,
    write_manifests,
)
from ocp_translate.models.kubernetes import Ingress, Service
from ocp_translate.models.openshift import DeploymentConfig, Route, SecurityContextConstraints

app = typer.Typer(
    name="ocp-translate",
    help="Translate OpenShift resources into Kubernetes and Contour equivalents",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)


def handle_errors(func):
    """Decorator to handle exceptions in CLI commands with nice formatting."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except OcpTranslateError as e:
            console.print(format_error_for_cli(e))
            raise typer.Exit(1)
        except Exception as e:
            console.print(f"[red]Unexpected error:[/red] {str(e)}")
            logger.debug("Unexpected error", exc_info=True)
            raise typer.Exit(1)

    return wrapper


def setup_logging(verbose: bool, quiet: bool) -> None:
    """Send log records to stderr through rich."""
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, show_time=False)],
        force=True,
    )


def _config(ctx: typer.Context) -> TranslatorConfig:
    return ctx.obj


def _emit(resources: list[dict[str, Any]], out: Path | None) -> None:
    if out is None:
        typer.echo(dump_manifests(resources), nl=False)
        return
    for path in write_manifests(resources, out):
        console.print(f"[green]✓ Wrote {path}[/green]")


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None, "--config", help="Configuration file (default: ./ocp-translate.yaml if present)"
    ),
    name: str | None = typer.Option(
        None, "--name", help="Caller name used to prefix diagnostic annotations"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
):
    """Translate OpenShift resources into Kubernetes and Contour equivalents."""
    setup_logging(verbose, quiet)
    try:
        translator_config = load_config(config)
    except OcpTranslateError as e:
        console.print(format_error_for_cli(e))
        raise typer.Exit(1)
    if name:
        translator_config.name = name
    ctx.obj = translator_config


@app.command()
@handle_errors
def route(
    ctx: typer.Context,
    route_file: Path = typer.Argument(..., help="File containing the Route"),
    service_file: Path = typer.Option(
        ..., "--service", help="File containing the Service the route targets"
    ),
    route_name: str | None = typer.Option(
        None, "--route-name", help="Route to pick when the file holds several"
    ),
    domain: str | None = typer.Option(
        None, "--domain", help="Wildcard domain to rehost the route under, e.g. *.apps.example.com"
    ),
    out: Path | None = typer.Option(None, "--out", help="Write one file per resource here"),
):
    """Translate a Route (and its Service) into an HTTPProxy and optional TLS Secret."""
    config = _config(ctx)
    if domain is not None:
        config.domain = domain

    source = load_resource(route_file, Route.KIND, route_name)
    documents = load_documents(service_file)
    services = [d for d in documents if d.get("kind") == Service.KIND]
    # A lone Service is taken as is so a wrong one is reported as a mismatch
    service_name = None if len(services) == 1 else source.spec.to.name
    service = find_resource(documents, Service.KIND, service_name)

    result = config.route_translator().translate(source, service)
    _emit(result.resources(), out)


@app.command()
@handle_errors
def scc(
    ctx: typer.Context,
    scc_file: Path = typer.Argument(..., help="File containing the SecurityContextConstraints"),
    scc_name: str | None = typer.Option(None, "--scc-name", help="SCC to pick from the file"),
    out: Path | None = typer.Option(None, "--out", help="Write one file per resource here"),
):
    """Translate SecurityContextConstraints into a PodSecurityPolicy and RBAC."""
    source = load_resource(scc_file, SecurityContextConstraints.KIND, scc_name)
    result = _config(ctx).security_policy_translator().translate(source)
    if result.cluster_role_binding is None:
        logger.info(f"No ClusterRoleBinding generated for {source.name}: nobody to bind")
    _emit(result.resources(), out)


@app.command()
@handle_errors
def dc(
    ctx: typer.Context,
    dc_file: Path = typer.Argument(..., help="File containing the DeploymentConfig"),
    dc_name: str | None = typer.Option(None, "--dc-name", help="DeploymentConfig to pick"),
    out: Path | None = typer.Option(None, "--out", help="Write one file per resource here"),
):
    """Translate a DeploymentConfig into a Deployment."""
    source = load_resource(dc_file, DeploymentConfig.KIND, dc_name)
    result = _config(ctx).deployment_config_translator().translate(source)
    _emit(result.resources(), out)


@app.command()
@handle_errors
def ingress(
    ctx: typer.Context,
    ingress_file: Path = typer.Argument(..., help="File containing the Ingress"),
    ingress_name: str | None = typer.Option(None, "--ingress-name", help="Ingress to pick"),
    domain: str | None = typer.Option(
        None, "--domain", help="Wildcard domain to rehost the ingress under"
    ),
    out: Path | None = typer.Option(None, "--out", help="Write one file per resource here"),
):
    """Translate an Ingress into an HTTPProxy."""
    config = _config(ctx)
    if domain is not None:
        config.domain = domain
    source = load_resource(ingress_file, Ingress.KIND, ingress_name)
    result = config.ingress_translator().translate(source)
    _emit(result.resources(), out)


if __name__ == "__main__":
    app()
