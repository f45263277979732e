"""Middleware Starlette que propaga la sesión de Checkpoint.

Por qué explícito:
- La sesión resuelta viaja en un `RequestContext` guardado en
  `request.state`, no en variables globales; los handlers lo leen con
  `get_request_context()` / `get_checkpoint_client()` (sirven como
  dependencias de FastAPI).
- Si el middleware tiene un `IdentityProvider` (p.ej. `CheckpointClient`),
  expone un clon con la sesión de la petición para que el handler consulte Checkpoint en nombre del usuario.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from checkpoint.adapters.session import session_from_request
from checkpoint.core.interfaces.identity import IdentityProvider

CONTEXT_STATE_KEY = "checkpoint"
CLIENT_STATE_KEY = "checkpoint_client"


class RequestContext(BaseModel):
    """Valores por petición que dependen de Checkpoint."""

    model_config = ConfigDict(frozen=True)

    session: str | None = Field(
        default=None,
        description="Token de sesión resuelto (None si no hay o está vacío).",
    )


def context_with_session(ctx: RequestContext, session: str) -> RequestContext:
    """Devuelve una copia de `ctx` con la sesión; una sesión vacía se guarda como `None`."""

    return ctx.model_copy(update={"session": session or None})


def session_from_context(ctx: RequestContext) -> tuple[str, bool]:
    if ctx.session:
        return ctx.session, True
    return "", False


def get_request_context(request: Request) -> RequestContext:
    return getattr(request.state, CONTEXT_STATE_KEY, None) or RequestContext()


def get_checkpoint_client(request: Request) -> IdentityProvider | None:
    return getattr(request.state, CLIENT_STATE_KEY, None)


class CheckpointSessionMiddleware(BaseHTTPMiddleware):
    """Resuelve la sesión de cada petición y la deja en `request.state`.

    Peticiones sin sesión pasan sin tocar.
    """

    def __init__(self, app: ASGIApp, client: IdentityProvider | None = None) -> None:
        super().__init__(app)
        self.client = client

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        session, found = session_from_request(request)
        if found:
            setattr(request.state, CONTEXT_STATE_KEY, context_with_session(get_request_context(request), session))
            if self.client is not None:
                setattr(request.state, CLIENT_STATE_KEY, self.client.with_session(session))
        return await call_next(request)
