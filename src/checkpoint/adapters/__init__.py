"""Adaptadores concretos: HTTP (httpx), middleware (Starlette) y cookies.

Por qué un paquete:
- Agrupa todo lo que sabe de I/O; el Core solo define modelos y contratos.
"""

from checkpoint.adapters.checkpoint_client import CheckpointClient, ClientConfig
from checkpoint.adapters.middleware import (
	CheckpointSessionMiddleware,
	RequestContext,
	context_with_session,
	get_checkpoint_client,
	get_request_context,
	session_from_context,
)
from checkpoint.adapters.session import (
	DEFAULT_EXPIRY,
	add_response_header,
	format_set_cookie,
	session_from_request,
)

__all__ = [
	"CheckpointClient",
	"CheckpointSessionMiddleware",
	"ClientConfig",
	"DEFAULT_EXPIRY",
	"RequestContext",
	"add_response_header",
	"context_with_session",
	"format_set_cookie",
	"get_checkpoint_client",
	"get_request_context",
	"session_from_context",
	"session_from_request",
]
