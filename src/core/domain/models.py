"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Las respuestas del API se validan en un único sitio: si la forma no es la
  esperada se traduce a `PayloadShapeError`.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.config import ConfigDict

from core.errors import PayloadShapeError


class Credentials(BaseModel):
    """Par email/password para un intento de login.

    Inmutable y de vida corta: se resuelve por llamada y nunca se guarda.
    """

    model_config = ConfigDict(frozen=True)

    email: str = Field(
        ...,
        min_length=1,
        description="Email de la cuenta Atomx.",
    )
    password: str = Field(
        ...,
        min_length=1,
        repr=False,
        description="Password de la cuenta Atomx.",
    )

    def as_payload(self) -> dict[str, str]:
        return {"email": self.email, "password": self.password}


class EndpointDescriptor(BaseModel):
    """Instancia del API a la que se habla: (dominio, puerto, versión).

    El esquema se infiere del puerto: solo 443 es https. Cualquier otro
    puerto (incluido uno con TLS) se trata como http.
    """

    model_config = ConfigDict(frozen=True)

    domain: str = Field(
        ...,
        min_length=1,
        description="Host del API (p.ej. 'api.atomx.com').",
    )
    port: int = Field(
        default=443,
        ge=1,
        le=65535,
        description="Puerto TCP.",
    )
    version: str = Field(
        default="v3",
        min_length=1,
        description="Versión del API (primer segmento del path).",
    )

    @property
    def scheme(self) -> str:
        return "https" if self.port == 443 else "http"

    @property
    def netloc(self) -> str:
        if self.port in (80, 443):
            return self.domain
        return f"{self.domain}:{self.port}"

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.netloc}/{self.version}"


class ResourceRequest(BaseModel):
    """Petición de un recurso: nombre del modelo + segmentos extra del path."""

    model: str = Field(
        ...,
        min_length=1,
        description="Nombre del recurso (p.ej. 'publisher').",
    )
    slug: list[str] = Field(
        default_factory=list,
        description="Segmentos adicionales, en orden, unidos con '/'.",
    )

    @field_validator("slug", mode="before")
    @classmethod
    def _stringify_segments(cls, value: Any) -> list[str]:
        if value is None:
            return []
        return [str(segment) for segment in value]


class LoginResponse(BaseModel):
    """Respuesta de `POST /{version}/login`."""

    model_config = ConfigDict(extra="ignore")

    user: Any = Field(
        default=None,
        description="Usuario autenticado, tal cual lo devuelve el servidor.",
    )
    message: str | None = Field(
        default=None,
        description="Mensaje del servidor para mostrar al usuario.",
    )
    auth_token: str = Field(
        ...,
        min_length=1,
        description="Bearer token para las siguientes peticiones.",
    )

    @classmethod
    def from_json(cls, data: object) -> "LoginResponse":
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise PayloadShapeError(f"login response has no usable 'auth_token': {exc}") from exc


class ApiEnvelope(BaseModel):
    """Envoltorio de respuesta: `{"resource": <nombre>, <nombre>: <payload>}`.

    El campo `resource` es un discriminante: su valor es la clave, dentro del
    mismo objeto, donde vive el payload real.
    """

    model_config = ConfigDict(extra="allow")

    resource: str = Field(
        ...,
        min_length=1,
        description="Nombre del campo hermano que contiene el payload.",
    )

    @classmethod
    def from_json(cls, data: object) -> "ApiEnvelope":
        try:
            envelope = cls.model_validate(data)
        except ValidationError as exc:
            raise PayloadShapeError(f"response is not a resource envelope: {exc}") from exc
        # El lookup se valida aquí, antes de tocar callbacks. Se mira el dict
        # crudo: con `{"resource": "resource"}` el campo nombrado es el propio
        # discriminante y no aparece en `model_extra`.
        if not isinstance(data, dict) or envelope.resource not in data:
            raise PayloadShapeError(
                f"envelope names resource '{envelope.resource}' but carries no such field"
            )
        return envelope

    @property
    def payload(self) -> Any:
        if self.resource == "resource":
            return self.resource
        extra = self.model_extra or {}
        if self.resource not in extra:
            raise PayloadShapeError(f"envelope has no '{self.resource}' field")
        return extra[self.resource]
