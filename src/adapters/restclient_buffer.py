"""Adaptador de buffers restclient (ficheros `.http`).

Gramática soportada (una declaración por línea):
- `:api = <url>`            -> `^:api\\s*=\\s*(.+)$`
- `:auth-token = <token>`   -> `^:auth-token\\s*=?\\s*(.*)$`

Lee el endpoint de la primera y reescribe la segunda con un token nuevo. El
resto del buffer no se toca.
"""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import urlsplit

from core.domain.models import EndpointDescriptor
from core.errors import ConfigurationError


API_LINE_RE = re.compile(r"^:api\s*=\s*(.+)$")
TOKEN_LINE_RE = re.compile(r"^:auth-token\s*=?\s*(.*)$")

RESTCLIENT_SUFFIXES = (".http", ".rest", ".restclient")


def parse_api_url(url: str) -> EndpointDescriptor:
    """`https://host[:port]/version` -> `EndpointDescriptor`.

    Puerto: el explícito si existe; si no, 443 para https y 80 para lo demás.
    """

    parts = urlsplit(url.strip())
    if not parts.hostname:
        raise ConfigurationError(f"':api' value is not a URL: {url!r}")
    try:
        explicit_port = parts.port
    except ValueError as exc:
        raise ConfigurationError(f"':api' URL has an invalid port: {url!r}") from exc

    segments = [s for s in parts.path.split("/") if s]
    if not segments:
        raise ConfigurationError(f"':api' URL has no API version segment: {url!r}")

    if explicit_port is not None:
        port = explicit_port
    else:
        port = 443 if parts.scheme == "https" else 80
    return EndpointDescriptor(domain=parts.hostname, port=port, version=segments[0])


class RestclientBuffer:
    """Buffer de texto como lista de líneas, con su path opcional."""

    def __init__(
        self,
        lines: list[str],
        *,
        path: Path | None = None,
        trailing_newline: bool = True,
        newline: str = "\n",
    ) -> None:
        self.lines = list(lines)
        self.path = path
        self.newline = newline
        self._trailing_newline = trailing_newline

    @classmethod
    def from_text(cls, text: str, *, path: Path | None = None) -> "RestclientBuffer":
        # Se conserva el fin de línea del fichero (CRLF o LF).
        newline = "\r\n" if "\r\n" in text else "\n"
        return cls(
            text.splitlines(),
            path=path,
            trailing_newline=text.endswith("\n"),
            newline=newline,
        )

    @classmethod
    def open(cls, path: Path) -> "RestclientBuffer":
        """Carga un fichero restclient; rechaza cualquier otro tipo de fichero."""

        if path.suffix.lower() not in RESTCLIENT_SUFFIXES:
            raise ConfigurationError(
                f"{path} is not a restclient buffer (expected one of {', '.join(RESTCLIENT_SUFFIXES)})"
            )
        if not path.is_file():
            raise ConfigurationError(f"{path} does not exist")
        with path.open(encoding="utf-8", newline="") as fh:
            return cls.from_text(fh.read(), path=path)

    @property
    def text(self) -> str:
        body = self.newline.join(self.lines)
        return body + self.newline if self._trailing_newline and self.lines else body

    def _find(self, pattern: re.Pattern[str], marker: str) -> tuple[int, re.Match[str]]:
        for index, line in enumerate(self.lines):
            match = pattern.match(line)
            if match:
                return index, match
        raise ConfigurationError(f"no '{marker}' line found in buffer")

    def token_line_index(self) -> int:
        return self._find(TOKEN_LINE_RE, ":auth-token")[0]

    def find_endpoint(self) -> EndpointDescriptor:
        _, match = self._find(API_LINE_RE, ":api")
        return parse_api_url(match.group(1))

    def current_token(self) -> str | None:
        _, match = self._find(TOKEN_LINE_RE, ":auth-token")
        return match.group(1).strip() or None

    def write_token(self, token: str) -> None:
        index = self.token_line_index()
        self.lines[index] = f":auth-token = {token}"

    def save(self, path: Path | None = None) -> Path:
        target = path or self.path
        if target is None:
            raise ConfigurationError("buffer has no path to save to")
        try:
            with target.open("w", encoding="utf-8", newline="") as fh:
                fh.write(self.text)
        except OSError as exc:
            raise ConfigurationError(f"cannot write buffer to {target}: {exc}") from exc
        return target
