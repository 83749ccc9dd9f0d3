"""Actualiza el `:auth-token` de un buffer restclient con un login nuevo.

Flujo:
1. Verifica que el buffer declara `:api` y `:auth-token` (antes de la red).
2. Extrae el endpoint de `:api`.
3. Hace login contra ese endpoint (override sobre una copia de la config).
4. En el callback del login reescribe la línea del token.
5. Tras un login correcto, si procede, guarda el fichero.
"""

from __future__ import annotations

import logging

from adapters.atomx_api import AtomxApi
from adapters.restclient_buffer import RestclientBuffer
from core.domain.result import Err, Result
from core.errors import ConfigurationError

logger = logging.getLogger(__name__)


async def update_token_from_buffer(
    buffer: RestclientBuffer,
    api: AtomxApi,
    *,
    save: bool = True,
) -> Result[str]:
    """Login con el endpoint del buffer y escritura del token resultante.

    Lanza `ConfigurationError` si falta alguna línea marcador, si el `:api`
    no es parseable o si no hay credenciales para el dominio.
    """

    buffer.token_line_index()
    endpoint = buffer.find_endpoint()
    logger.debug("buffer endpoint: %s", endpoint.base_url)

    scoped = api.with_endpoint(endpoint)
    result = await scoped.login(buffer.write_token, domain=endpoint.domain)
    if not result.ok or not save or buffer.path is None:
        return result

    # Si falla la escritura el token queda en la sesión pero no en disco.
    try:
        buffer.save()
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return Err(exc)
    logger.info("auth token written to %s", buffer.path)
    return result
