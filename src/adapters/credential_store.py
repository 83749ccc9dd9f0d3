"""Credential store basado en ficheros authinfo/netrc.

Formato (`machine <dominio> login <email> password <pw> [port <p>]`), el de
`~/.authinfo` y `~/.netrc`. Se parsea con un tokenizer tolerante (shlex por
línea): claves desconocidas como `port` o `protocol` se aceptan y se
ignoran, y una línea ilegible se salta con un warning en vez de invalidar
el fichero entero.

Orden de búsqueda:
1) `netrc_path` explícito (si se configura)
2) ~/.authinfo
3) ~/.netrc
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Iterable

from core.config import AppSettings
from core.interfaces.credential_store import CredentialStore

logger = logging.getLogger(__name__)

_LOGIN_KEYS = ("login", "user")


def default_credential_files() -> list[Path]:
    home = Path.home()
    return [home / ".authinfo", home / ".netrc"]


def parse_authinfo(text: str, *, source: str = "<authinfo>") -> list[dict[str, str]]:
    """Entradas de un fichero authinfo/netrc, en orden.

    Cada entrada es un dict con `machine` (o `default`) y el resto de pares
    clave/valor. Una entrada puede ocupar varias líneas; empieza con
    `machine` o `default`. Los bloques `macdef` se saltan hasta la siguiente
    línea vacía.
    """

    entries: list[dict[str, str]] = []
    current: dict[str, str] | None = None
    in_macdef = False

    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        if in_macdef:
            in_macdef = bool(raw_line.strip())
            continue
        # Solo comentarios de línea completa: `#` puede ir dentro de un password.
        if raw_line.lstrip().startswith("#"):
            continue
        try:
            tokens = shlex.split(raw_line)
        except ValueError as exc:
            logger.warning("skipping unreadable line %d in %s: %s", lineno, source, exc)
            continue

        index = 0
        while index < len(tokens):
            token = tokens[index]
            if token == "machine" and index + 1 < len(tokens):
                current = {"machine": tokens[index + 1]}
                entries.append(current)
                index += 2
            elif token == "default":
                current = {"default": ""}
                entries.append(current)
                index += 1
            elif token == "macdef":
                in_macdef = True
                break
            elif current is not None and index + 1 < len(tokens):
                # `port`, `protocol` y claves desconocidas se guardan igual.
                current[token] = tokens[index + 1]
                index += 2
            else:
                logger.warning("ignoring stray token %r on line %d in %s", token, lineno, source)
                index += 1

    return entries


def _credentials(entry: dict[str, str]) -> tuple[str | None, str | None]:
    login = next((entry[key] for key in _LOGIN_KEYS if entry.get(key)), None)
    return login, entry.get("password") or None


class NetrcCredentialStore(CredentialStore):
    """Busca `(login, password)` por dominio en ficheros authinfo/netrc."""

    def __init__(self, paths: Iterable[Path] | None = None) -> None:
        self._paths = list(paths) if paths is not None else default_credential_files()

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "NetrcCredentialStore":
        if settings.netrc_path is not None:
            return cls([settings.netrc_path])
        return cls()

    def lookup(self, domain: str) -> tuple[str | None, str | None]:
        for path in self._paths:
            if not path.is_file():
                continue
            entries = parse_authinfo(path.read_text(encoding="utf-8"), source=str(path))

            match = next((e for e in entries if e.get("machine") == domain), None)
            if match is None:
                match = next((e for e in entries if "default" in e), None)
            if match is None:
                continue

            logger.debug("credentials for %s found in %s", domain, path)
            return _credentials(match)

        logger.debug("no credentials for %s in %s", domain, [str(p) for p in self._paths])
        return None, None


class StaticCredentialStore(CredentialStore):
    """Credenciales en memoria, por dominio (útil para integraciones y tests)."""

    def __init__(self, entries: dict[str, tuple[str, str]] | None = None) -> None:
        self._entries = dict(entries or {})

    def lookup(self, domain: str) -> tuple[str | None, str | None]:
        return self._entries.get(domain, (None, None))
