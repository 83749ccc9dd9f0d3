"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

import json
from typing import Any

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import AppSettings


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("atomx-client", style="bold cyan")
    subtitle = Text("Atomx REST API • login • resources", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _cell(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return "" if value is None else str(value)


def build_payload_table(resource: str, payload: Any) -> Table:
    """Tabla para un payload de recurso.

    - lista de objetos: una fila por objeto, columnas = unión de claves
    - objeto: pares clave/valor
    - cualquier otra cosa: una única celda
    """

    table = Table(title=resource)
    rows = payload if isinstance(payload, list) else [payload]

    if rows and all(isinstance(row, dict) for row in rows):
        columns: list[str] = []
        for row in rows:
            for key in row:
                if key not in columns:
                    columns.append(key)
        if len(rows) == 1:
            table.add_column("Field", style="cyan", no_wrap=True)
            table.add_column("Value", style="white")
            for key in columns:
                table.add_row(key, _cell(rows[0].get(key)))
            return table
        for key in columns:
            table.add_column(key, style="white")
        for row in rows:
            table.add_row(*(_cell(row.get(key)) for key in columns))
        return table

    table.add_column("Value", style="white")
    for row in rows:
        table.add_row(_cell(row))
    return table


def build_settings_table(settings: AppSettings) -> Table:
    """Configuración efectiva (sin mostrar el password)."""

    endpoint = settings.endpoint()
    table = Table(title="Effective configuration")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("Endpoint", endpoint.base_url)
    table.add_row("Email", settings.email or "(credential store)")
    table.add_row("Password", "set" if settings.password else "(credential store)")
    table.add_row("User-Agent", settings.user_agent)
    table.add_row(
        "Timeout",
        f"{settings.http_timeout_seconds}s" if settings.http_timeout_seconds else "httpx default",
    )
    return table
