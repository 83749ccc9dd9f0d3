"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/credenciales) lean config de forma consistente.
- Es un objeto inyectable: cada cliente recibe su propio `AppSettings`, nada
  de estado global mutable.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import EndpointDescriptor


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "atomx-client"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "atomx-client"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "atomx-client"
    return Path.home() / ".config" / "atomx-client"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    Valores `None` se ignoran (no borran lo que ya existe).
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# atomx-client user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central del cliente Atomx.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="ATOMX_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_domain: str = Field(
        default="api.atomx.com",
        min_length=1,
        description="Dominio del API (sin esquema ni puerto).",
    )
    api_version: str = Field(
        default="v3",
        min_length=1,
        description="Versión del API, primer segmento del path.",
    )
    api_port: int = Field(
        default=443,
        ge=1,
        le=65535,
        description="Puerto del API. 443 => https; cualquier otro => http.",
    )

    email: str | None = Field(
        default=None,
        description="Email de login. Si falta, se busca en el credential store.",
    )
    password: str | None = Field(
        default=None,
        description="Password de login. Si falta, se busca en el credential store.",
    )

    user_agent: str = Field(
        default="atomx-client/0.1",
        min_length=1,
        description="User-Agent para todas las peticiones al API.",
    )
    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout por request (segundos). None => default de httpx.",
    )
    netrc_path: Path | None = Field(
        default=None,
        description="Ruta a un fichero netrc/authinfo concreto para credenciales.",
    )

    def endpoint(self, *, domain: str | None = None) -> EndpointDescriptor:
        """Endpoint efectivo para una llamada (se recalcula siempre, sin caché)."""

        return EndpointDescriptor(
            domain=domain or self.api_domain,
            port=self.api_port,
            version=self.api_version,
        )

    def with_endpoint(self, endpoint: EndpointDescriptor) -> "AppSettings":
        """Copia de la configuración apuntando a otro endpoint.

        Se usa para overrides temporales (p.ej. el endpoint declarado en un
        buffer restclient) sin tocar la instancia original.
        """

        return self.model_copy(
            update={
                "api_domain": endpoint.domain,
                "api_port": endpoint.port,
                "api_version": endpoint.version,
            }
        )
