"""Sesión de Checkpoint en peticiones entrantes y respuestas salientes.

Fuentes aceptadas, por orden de precedencia (la primera que encaje gana):
1. query param `session` (exactamente un valor, no vacío);
2. header `x-checkpoint-session`;
3. cookie `checkpoint.session`.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from typing import Any, Protocol

from checkpoint.adapters.checkpoint_client import SESSION_COOKIE

SESSION_QUERY_PARAM = "session"
SESSION_HEADER = "x-checkpoint-session"

DEFAULT_EXPIRY = timedelta(days=365)


class InboundRequest(Protocol):
    """Lo mínimo que se lee de una petición (encaja con `starlette.requests.Request`)."""

    @property
    def query_params(self) -> Any: ...

    @property
    def headers(self) -> Any: ...

    @property
    def cookies(self) -> dict[str, str]: ...


def session_from_request(request: InboundRequest) -> tuple[str, bool]:
    """Busca la sesión de Checkpoint en una petición entrante.

    Devuelve `(token, True)` con la primera fuente que encaje, o `("", False)`.
    """

    values = request.query_params.getlist(SESSION_QUERY_PARAM)
    if len(values) == 1 and values[0]:
        return values[0], True

    header = request.headers.get(SESSION_HEADER)
    if header:
        return header, True

    cookie = request.cookies.get(SESSION_COOKIE)
    if cookie:
        return cookie, True

    return "", False


def format_set_cookie(
    session: str,
    expiry: timedelta = DEFAULT_EXPIRY,
    *,
    now: datetime | None = None,
) -> str:
    """Valor del header `Set-Cookie` para `session`, HttpOnly y con caducidad absoluta en UTC."""

    now = now or datetime.now(timezone.utc)
    expires = (now + expiry).astimezone(timezone.utc)
    return f"{SESSION_COOKIE}={session}; expires={format_datetime(expires, usegmt=True)}; HttpOnly"


def add_response_header(headers: Any, session: str, expiry: timedelta | None = None) -> None:
    """Añade el `Set-Cookie` de sesión a `headers` (p.ej. `Response.headers` de Starlette).

    Usa `append` para no pisar otros `Set-Cookie` ya presentes.
    """

    headers.append("set-cookie", format_set_cookie(session, expiry if expiry is not None else DEFAULT_EXPIRY))
