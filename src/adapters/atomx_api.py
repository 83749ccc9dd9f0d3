"""Cliente del API REST de Atomx.

Responsabilidad:
- Login: intercambia credenciales por un bearer token y lo guarda en la
  `AuthSession` inyectada.
- Get: GET autenticado sobre `/{version}/{model}[/{slug...}]`, desenvuelve el
  envelope (`resource` -> payload) y lo entrega al callback.

Contrato de finalización:
- Cada corrutina termina exactamente una vez: o bien callback + `Ok`, o bien
  `on_error` + `Err`. Los fallos de red/HTTP/forma no se propagan como
  excepción; los de configuración sí (se detectan antes de tocar la red).
- No hay reintentos.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from adapters.credential_store import NetrcCredentialStore
from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import (
    ApiEnvelope,
    Credentials,
    EndpointDescriptor,
    LoginResponse,
    ResourceRequest,
)
from core.domain.result import Err, Ok, Result
from core.errors import AtomxError, ConfigurationError, PayloadShapeError, TransportError
from core.interfaces.credential_store import CredentialStore
from core.session import AuthSession
from core.url_builder import build_url

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]
ErrorCallback = Callable[[AtomxError], None]


def _log_notice(message: str) -> None:
    logger.info(message)


def _transport_error(exc: httpx.HTTPError, url: str) -> TransportError:
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return TransportError(f"HTTP {status} from {url}", url=url, status_code=status)
    return TransportError(f"{type(exc).__name__} requesting {url}: {exc}", url=url)


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise PayloadShapeError(f"response from {response.request.url} is not JSON") from exc


class AtomxApi:
    """Binding mínimo del API: login, logout y get.

    Todo el estado es inyectado: settings, sesión, credential store. Dos
    instancias con sesiones distintas no comparten token.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        session: AuthSession | None = None,
        credential_store: CredentialStore | None = None,
        notify: Notifier | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._session = session if session is not None else AuthSession()
        self._credential_store = credential_store or NetrcCredentialStore.from_settings(self._settings)
        self._notify = notify or _log_notice
        self._transport = transport

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def session(self) -> AuthSession:
        return self._session

    def with_endpoint(self, endpoint: EndpointDescriptor) -> "AtomxApi":
        """Cliente apuntando a otro endpoint; comparte sesión y credential store."""

        return AtomxApi(
            self._settings.with_endpoint(endpoint),
            session=self._session,
            credential_store=self._credential_store,
            notify=self._notify,
            transport=self._transport,
        )

    def resolve_credentials(self, domain: str) -> Credentials:
        """Config explícita primero (campo a campo); lo que falte sale del store."""

        email = self._settings.email
        password = self._settings.password
        if not email or not password:
            stored_login, stored_password = self._credential_store.lookup(domain)
            email = email or stored_login
            password = password or stored_password

        if not email or not password:
            raise ConfigurationError(
                f"no credentials for {domain}: set ATOMX_EMAIL/ATOMX_PASSWORD "
                "or add a 'machine' entry to your authinfo/netrc file"
            )
        return Credentials(email=email, password=password)

    def _client(self, *, extra_headers: dict[str, str] | None = None) -> httpx.AsyncClient:
        return build_async_client(
            self._settings,
            extra_headers=extra_headers,
            transport=self._transport,
        )

    def _fail(self, error: AtomxError, on_error: ErrorCallback | None) -> Err:
        logger.error("%s", error)
        if on_error is not None:
            on_error(error)
        return Err(error)

    async def login(
        self,
        callback: Callable[[str], Any] | None = None,
        *,
        domain: str | None = None,
        on_error: ErrorCallback | None = None,
    ) -> Result[str]:
        """Obtiene un token nuevo y lo guarda en la sesión.

        Lanza `ConfigurationError` si no hay credenciales (antes de la red).
        Un fallo de red deja intacto el token anterior.
        """

        endpoint = self._settings.endpoint(domain=domain)
        credentials = self.resolve_credentials(endpoint.domain)
        url = build_url(endpoint, "login")

        logger.debug("POST %s", url)
        try:
            async with self._client() as client:
                response = await client.post(url, json=credentials.as_payload())
            response.raise_for_status()
            login = LoginResponse.from_json(_decode_json(response))
        except httpx.HTTPError as exc:
            return self._fail(_transport_error(exc, url), on_error)
        except PayloadShapeError as exc:
            return self._fail(exc, on_error)

        self._session.set_token(login.auth_token)
        if login.message:
            self._notify(login.message)
        if callback is not None:
            callback(login.auth_token)
        return Ok(login.auth_token)

    def logout(self) -> None:
        self._session.clear()
        self._notify("Logged out")

    async def get(
        self,
        model: str,
        *slug: Any,
        callback: Callable[[Any], Any] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> Result[Any]:
        """GET autenticado de un recurso; entrega el payload desenvuelto.

        Compatibilidad: si no se pasa `callback=` y el primer segmento es
        callable, se toma como callback y el resto como slug.
        """

        if callback is None and slug and callable(slug[0]):
            callback, slug = slug[0], slug[1:]

        request = ResourceRequest(model=model, slug=list(slug))
        url = build_url(self._settings.endpoint(), request.model, *request.slug)

        logger.debug("GET %s", url)
        try:
            async with self._client(extra_headers=self._session.authorization_header()) as client:
                response = await client.get(url)
            response.raise_for_status()
            envelope = ApiEnvelope.from_json(_decode_json(response))
        except httpx.HTTPError as exc:
            return self._fail(_transport_error(exc, url), on_error)
        except PayloadShapeError as exc:
            return self._fail(exc, on_error)

        payload = envelope.payload
        if callback is not None:
            callback(payload)
        else:
            self._notify(f"{envelope.resource}: {payload}")
        return Ok(payload)
