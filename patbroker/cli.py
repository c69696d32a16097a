"""Command line interface for requesting project access tokens."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional

import typer

from patbroker.config import load_config
from patbroker.contracts import AccessLevel
from patbroker.errors import BrokerError, RequestRejected
from patbroker.schema import (
    ACCESS_TOKEN_SCHEMA,
    HELP_DESCRIPTION,
    HELP_SYNOPSIS,
    TOKEN_EXAMPLES,
)
from patbroker.service import TokenService

app = typer.Typer(help="CLI for issuing GitLab project access tokens")

token_app = typer.Typer(help="Commands for project access tokens")
app.add_typer(token_app, name="token")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """patbroker CLI entry point."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


def _build_fields(
    project_id: Optional[int],
    name: Optional[str],
    scopes: Optional[List[str]],
    access_level: Optional[int],
    expires_at: Optional[str],
) -> Dict[str, Any]:
    """Collect only the options the user actually supplied."""
    fields: Dict[str, Any] = {}
    if project_id is not None:
        fields["id"] = project_id
    if name is not None:
        fields["name"] = name
    if scopes:
        fields["scopes"] = ",".join(scopes)
    if access_level is not None:
        fields["access_level"] = access_level
    if expires_at is not None:
        fields["expires_at"] = expires_at
    return fields


def _service(config: Optional[Path]) -> TokenService:
    if config is None:
        return TokenService()
    return TokenService(config_loader=lambda: load_config(str(config)))


def _fail(error: BrokerError) -> NoReturn:
    if isinstance(error, RequestRejected):
        typer.secho("Request rejected:", fg=typer.colors.RED)
        for message in error.errors.messages:
            typer.echo(f"  - {message}")
    else:
        typer.secho(str(error), fg=typer.colors.RED)
    raise typer.Exit(code=1)


@token_app.command("create")
def token_create(
    project_id: Optional[int] = typer.Option(None, "--id", help="Project ID"),
    name: Optional[str] = typer.Option(None, "--name", help="Token name"),
    scopes: Optional[List[str]] = typer.Option(
        None, "--scope", help="Scope to grant; repeat or comma-separate"
    ),
    access_level: Optional[int] = typer.Option(
        None, "--access-level", help="Access level (0, 10, 20, 30, 40 or 50)"
    ),
    expires_at: Optional[str] = typer.Option(
        None, "--expires-at", help="Expiry date, e.g. 2025-01-31"
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Config file path"),
) -> None:
    """
    Create a project access token.

    The request is validated against the configured policy before GitLab is
    contacted. All violations are reported at once.

    Example:
        patbroker token create --id 1 --name ci --scope read_api --scope read_repository
    """
    fields = _build_fields(project_id, name, scopes, access_level, expires_at)
    try:
        details = _service(config).create_token(fields)
    except BrokerError as e:
        _fail(e)
    typer.echo(json.dumps(details, indent=2, default=str))


@token_app.command("validate")
def token_validate(
    project_id: Optional[int] = typer.Option(None, "--id", help="Project ID"),
    name: Optional[str] = typer.Option(None, "--name", help="Token name"),
    scopes: Optional[List[str]] = typer.Option(
        None, "--scope", help="Scope to grant; repeat or comma-separate"
    ),
    access_level: Optional[int] = typer.Option(
        None, "--access-level", help="Access level (0, 10, 20, 30, 40 or 50)"
    ),
    expires_at: Optional[str] = typer.Option(
        None, "--expires-at", help="Expiry date, e.g. 2025-01-31"
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Config file path"),
) -> None:
    """Check a token request against policy without issuing it."""
    fields = _build_fields(project_id, name, scopes, access_level, expires_at)
    try:
        _service(config).check_token(fields)
    except BrokerError as e:
        _fail(e)
    typer.echo("valid")


@app.command("schema")
def schema() -> None:
    """Describe the fields accepted by ``token create``."""
    typer.echo(HELP_SYNOPSIS)
    typer.echo(HELP_DESCRIPTION.strip())
    typer.echo("")
    typer.echo("Fields:")
    for key, field in ACCESS_TOKEN_SCHEMA.items():
        typer.echo(f"  {key} ({field.type}): {field.description}")
    typer.echo("")
    typer.echo("Access levels:")
    for level in AccessLevel:
        if level % 10:
            continue
        typer.echo(f"  {level.value}\t{level.name}")
    for example in TOKEN_EXAMPLES:
        typer.echo("")
        typer.echo(f"Example: {example.description}")
        typer.echo(json.dumps(example.data, indent=2))
