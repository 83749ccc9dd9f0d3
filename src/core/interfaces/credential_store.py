"""Contrato del almacén de credenciales.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que el origen de las credenciales (netrc, authinfo, un dict en
  tests) sea intercambiable sin acoplar el cliente a uno concreto.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CredentialStore(Protocol):
    """Búsqueda de credenciales por dominio.

    Reglas de diseño:
    - `lookup` es síncrono: lee ficheros locales, no hace red.
    - Sin coincidencia devuelve `(None, None)`; nunca lanza por "no encontrado".
    """

    def lookup(self, domain: str) -> tuple[str | None, str | None]:
        """Devuelve `(login, password)` para `domain`."""

        ...
