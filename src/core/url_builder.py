"""Construcción de URLs del API.

Forma: `scheme://domain[:port]/version/model[/seg1/seg2/...]`.
Composición pura de strings, sin fallos posibles.
"""

from __future__ import annotations

from core.domain.models import EndpointDescriptor


def build_url(endpoint: EndpointDescriptor, model: str, *slug: object) -> str:
    """URL de un recurso; los segmentos se convierten a str y se unen con '/'."""

    segments = [str(model), *(str(s) for s in slug)]
    return f"{endpoint.base_url}/" + "/".join(segments)
