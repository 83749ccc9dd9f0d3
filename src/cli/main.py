"""CLI del cliente Atomx (Typer + Rich).

Comandos:
- `login`          obtiene un token y lo muestra
- `get`            login + GET de un recurso (o `--token` para reutilizar uno)
- `refresh-token`  reescribe el `:auth-token` de un fichero restclient
- `setup`          guarda credenciales/endpoint en el .env del usuario
- `doctor`         diagnóstico de configuración y conectividad
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.atomx_api import AtomxApi
from adapters.restclient_buffer import RestclientBuffer
from cli import doctor
from cli.ui_components import build_payload_table
from core.config import AppSettings, write_user_env_vars
from core.domain.result import Result
from core.errors import ConfigurationError
from core.services.token_refresh import update_token_from_buffer

app = typer.Typer(no_args_is_help=True, help="Command line client for the Atomx REST API.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # httpx loguea cada request a INFO; solo lo queremos en modo verbose.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _notify(message: str) -> None:
    _console.print(f"[green]{message}[/green]")


def _exit_on_error(result: Result[Any]) -> None:
    if not result.ok:
        _console.print(f"[red]{escape(str(result.error))}[/red]")
        raise typer.Exit(code=1)


def build_api(settings: AppSettings) -> AtomxApi:
    return AtomxApi(settings, notify=_notify)


def _run(coro: Any) -> Result[Any]:
    try:
        return asyncio.run(coro)
    except ConfigurationError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    configure_logging(verbose)


@app.command()
def login(
    domain: Optional[str] = typer.Option(None, "--domain", help="Override the API domain."),
) -> None:
    """Log in and print the bearer token."""

    api = build_api(AppSettings())
    result = _run(api.login(domain=domain))
    _exit_on_error(result)
    _console.print(result.value)


@app.command()
def get(
    model: str = typer.Argument(..., help="Resource name, e.g. 'publisher'."),
    slug: Optional[List[str]] = typer.Argument(None, help="Extra path segments."),
    token: Optional[str] = typer.Option(
        None,
        "--token",
        envvar="ATOMX_AUTH_TOKEN",
        help="Reuse an existing token instead of logging in.",
    ),
    table: bool = typer.Option(False, "--table", help="Render the payload as a table."),
) -> None:
    """Fetch a resource and print its payload."""

    api = build_api(AppSettings())

    def render(payload: Any) -> None:
        if table:
            _console.print(build_payload_table(model, payload))
        else:
            _console.print_json(data=payload)

    async def fetch() -> Result[Any]:
        if token:
            api.session.set_token(token)
        else:
            logged_in = await api.login()
            if not logged_in.ok:
                return logged_in
        return await api.get(model, *(slug or []), callback=render)

    result = _run(fetch())
    _exit_on_error(result)


@app.command(name="refresh-token")
def refresh_token(
    file: Path = typer.Argument(..., help="Restclient file (.http) declaring :api and :auth-token."),
) -> None:
    """Log in against the file's `:api` endpoint and rewrite its `:auth-token`."""

    try:
        buffer = RestclientBuffer.open(file)
    except ConfigurationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    api = build_api(AppSettings())
    result = _run(update_token_from_buffer(buffer, api))
    _exit_on_error(result)
    _console.print(f"[green]Updated:[/green] {file}")


@app.command()
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    defaults = AppSettings()
    email = typer.prompt("Email", default=defaults.email or "").strip()
    password = typer.prompt("Password", hide_input=True, confirmation_prompt=False).strip()
    domain = typer.prompt("API domain", default=defaults.api_domain, show_default=True).strip()
    port = typer.prompt("API port", default=defaults.api_port, type=int, show_default=True)
    version = typer.prompt("API version", default=defaults.api_version, show_default=True).strip()

    if not email or not password:
        raise typer.BadParameter("email and password are required")

    env_path = write_user_env_vars(
        {
            "ATOMX_EMAIL": email,
            "ATOMX_PASSWORD": password,
            "ATOMX_API_DOMAIN": domain or None,
            "ATOMX_API_PORT": str(port),
            "ATOMX_API_VERSION": version or None,
        }
    )
    _console.print(f"[green]Saved config to:[/green] {env_path}")


def run() -> None:
    app()
