"""Jerarquía de excepciones del cliente Atomx.

Todas heredan de `AtomxError`, así un único `except AtomxError` captura
cualquier fallo originado en el cliente.

- `ConfigurationError`: precondiciones que fallan antes de tocar la red.
- `TransportError`: fallos HTTP/red durante login o fetch.
- `PayloadShapeError`: la respuesta no tiene la forma esperada.
"""

from __future__ import annotations


class AtomxError(Exception):
    """Base de todos los errores del cliente."""


class ConfigurationError(AtomxError):
    """Faltan credenciales, el buffer no es del tipo esperado o falta una línea marcador.

    Se lanza de forma síncrona: es fatal para la operación en curso, no para
    el proceso.
    """


class TransportError(AtomxError):
    """Fallo de red o respuesta HTTP no exitosa.

    Attributes:
        url: URL de la petición fallida (si se conoce).
        status_code: código HTTP si hubo respuesta; None para fallos de red.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class PayloadShapeError(AtomxError):
    """La respuesta JSON no contiene los campos esperados (`auth_token`, `resource`...)."""
