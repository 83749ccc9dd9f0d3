"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.credential_store import NetrcCredentialStore
from adapters.http_client import build_async_client
from cli.ui_components import build_settings_table, print_banner
from core.config import AppSettings

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def _check_credentials(settings: AppSettings) -> tuple[bool, str]:
    if settings.email and settings.password:
        return True, "From configuration"

    store = NetrcCredentialStore.from_settings(settings)
    try:
        login, password = store.lookup(settings.api_domain)
    except OSError as exc:
        return False, str(exc)
    if (settings.email or login) and (settings.password or password):
        return True, "From credential store"
    return False, f"No credentials for {settings.api_domain}; run `atomx setup`"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    print_banner(_console)
    _console.print(build_settings_table(settings))

    table = Table(title="atomx-client Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    ok_creds, detail_creds = _check_credentials(settings)
    table.add_row("Credentials", "OK" if ok_creds else "FAIL", detail_creds)

    # Conectividad (best-effort): cualquier respuesta HTTP cuenta como alcanzable.
    login_url = f"{settings.endpoint().base_url}/login"
    ok_http, detail_http = asyncio.run(_check_http(login_url, settings))
    table.add_row("API reachable", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not ok_creds:
        _console.print(
            "\n[yellow]Note:[/yellow] `login` and `get` need credentials from ATOMX_EMAIL/ATOMX_PASSWORD "
            "or a `machine` entry in ~/.authinfo or ~/.netrc."
        )
