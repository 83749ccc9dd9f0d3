"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza headers JSON, User-Agent y timeout para login y fetch.
- Facilita testeo: se puede inyectar un transport (p.ej. `httpx.MockTransport`).
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


JSON_CONTENT_TYPE = "application/json;charset=utf-8"


def default_headers(settings: AppSettings) -> dict[str, str]:
    return {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
        "Content-Type": JSON_CONTENT_TYPE,
    }


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con los headers del API Atomx.

    Sin `http_timeout_seconds` configurado se respeta el timeout por defecto
    de httpx.
    """

    settings = settings or AppSettings()
    headers = default_headers(settings)
    if extra_headers:
        headers.update(extra_headers)

    kwargs: dict[str, object] = {}
    if settings.http_timeout_seconds is not None:
        kwargs["timeout"] = httpx.Timeout(settings.http_timeout_seconds)
    if transport is not None:
        kwargs["transport"] = transport

    return httpx.AsyncClient(headers=headers, **kwargs)  # type: ignore[arg-type]
