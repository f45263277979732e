"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts y headers del transporte por defecto.
- Facilita testeo: se puede sustituir por un `httpx.AsyncClient` con
  `httpx.MockTransport`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from urllib.parse import quote, urlencode

import httpx

from checkpoint.core.config import DEFAULT_USER_AGENT, CheckpointSettings

API_BASE_PATH = "/api/checkpoint/v1"

QueryParams = Mapping[str, str | Sequence[str]]

# Caracteres que se dejan sin escapar en el path (RFC 3986 pchar + "/").
_PATH_SAFE = "/:@!$&'()*+,;=-._~"


def build_async_client(
    settings: CheckpointSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults para Checkpoint.

    Por qué un builder:
    - Centraliza timeouts/headers para CLI y librería.
    - Sin reintentos: un fallo del transporte es un fallo final.
    """

    settings = settings or CheckpointSettings()
    return build_transport(
        user_agent=settings.user_agent,
        timeout=settings.http_timeout_seconds,
        extra_headers=extra_headers,
    )


def build_transport(
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float | None = None,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Transporte sin leer settings; `timeout=None` deja los plazos a quien llama."""

    headers: dict[str, str] = {
        "User-Agent": user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout), headers=headers)


def encode_query(params: QueryParams | None) -> str:
    """Codifica `params` con las claves ordenadas (salida determinista)."""

    if not params:
        return ""
    items: list[tuple[str, str]] = []
    for key in sorted(params):
        value = params[key]
        if isinstance(value, str):
            items.append((key, value))
        else:
            items.extend((key, v) for v in value)
    return urlencode(items)


def build_url(
    scheme: str,
    host: str,
    base_path: str,
    relative_path: str,
    params: QueryParams | None = None,
) -> str:
    """Construye la URL absoluta `scheme://host/base_path+relative_path?query`.

    No valida `scheme` ni `host`: una URL mal formada la reporta el transporte.
    """

    url = f"{scheme}://{host}{quote(base_path + relative_path, safe=_PATH_SAFE)}"
    query = encode_query(params)
    if query:
        url = f"{url}?{query}"
    return url
