"""Command line interface for inspecting and validating request objects."""

from __future__ import annotations

import json
from typing import Optional

import typer

from oidc_reqobj.apps import get_app_store
from oidc_reqobj.builders import get_builder_registry
from oidc_reqobj.config import load_config
from oidc_reqobj.constants import REQUEST, REQUEST_URI
from oidc_reqobj.errors import RequestObjectError
from oidc_reqobj.models import OAuth2Parameters
from oidc_reqobj.pipeline import get_pipeline

app = typer.Typer(help="CLI for OpenID Connect request objects")


@app.callback()
def main() -> None:
    """oidc-reqobj CLI entry point."""
    pass


@app.command("validate")
def validate(
    client_id: str = typer.Option(..., help="client_id of the authorization request"),
    request: Optional[str] = typer.Option(None, help="Request object passed by value"),
    request_uri: Optional[str] = typer.Option(None, help="Reference to a request object"),
    response_type: Optional[str] = typer.Option(None, help="Outer response_type"),
    redirect_uri: Optional[str] = typer.Option(None, help="Outer redirect_uri"),
    scope: Optional[str] = typer.Option(None, help="Space separated scopes"),
    config: Optional[str] = typer.Option(None, help="Path to the configuration file"),
) -> None:
    """
    Build and validate the request object of an authorization request.

    The same precedence rules as the authorization endpoint apply: when both
    --request and --request-uri are given, --request wins.

    Returns:
        The validated claims as JSON, or the OAuth 2.0 error response.

    Example:
        oidc-reqobj validate --client-id app1 --request eyJhbGciOi...
        oidc-reqobj validate --client-id app1 --request-uri https://rp/ro.jwt
    """
    pipeline = get_pipeline(load_config(config))
    params = OAuth2Parameters(
        client_id=client_id,
        response_type=response_type,
        redirect_uri=redirect_uri,
        scopes=scope.split() if scope else [],
    )
    raw = {REQUEST: request, REQUEST_URI: request_uri}

    try:
        request_object = pipeline.build_request_object(raw, params)
    except RequestObjectError as e:
        typer.secho(e.to_response().model_dump_json(), fg=typer.colors.RED)
        raise typer.Exit(code=1)

    if request_object is None:
        typer.echo("No request object present.")
        return
    typer.echo(json.dumps(request_object.claims, indent=2, sort_keys=True))


@app.command("builders")
def builders(
    config: Optional[str] = typer.Option(None, help="Path to the configuration file"),
) -> None:
    """List the configured request object builders."""
    registry = get_builder_registry(load_config(config))
    for key, builder in registry.items():
        typer.echo(f"{key}\t{type(builder).__module__}.{type(builder).__name__}")


@app.command("clients")
def clients(
    config: Optional[str] = typer.Option(None, help="Path to the configuration file"),
) -> None:
    """List registered client applications and their signature policy."""
    store = get_app_store(config=load_config(config))
    apps = store.list_apps()
    if not apps:
        typer.echo("No clients found")
        return
    for client in apps:
        policy = "enforced" if client.request_object_signature_validation_enabled else "optional"
        typer.echo(f"{client.client_id}\t{policy}")
