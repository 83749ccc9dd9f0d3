"""Sesión de autenticación en memoria.

Un único bearer token por sesión: sin expiración, sin refresh, nunca se
persiste a disco. Un login nuevo reemplaza el token anterior sin avisar.
"""

from __future__ import annotations


class AuthSession:
    """Contenedor del token actual.

    Se inyecta en el cliente (en vez de ser estado global) para que varias
    sesiones, o varios tests, no se pisen entre sí.
    """

    def __init__(self, token: str | None = None) -> None:
        self._token = token

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def set_token(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None

    def authorization_header(self) -> dict[str, str]:
        # Sin token se envía igualmente: el servidor decide si rechaza.
        return {"Authorization": f"Bearer {self._token or ''}"}

    def __repr__(self) -> str:
        state = "authenticated" if self.is_authenticated else "anonymous"
        return f"AuthSession({state})"
