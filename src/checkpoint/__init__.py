"""Cliente Python de Checkpoint (identidades y sesiones)."""

from checkpoint.adapters import (
    DEFAULT_EXPIRY,
    CheckpointClient,
    CheckpointSessionMiddleware,
    ClientConfig,
    RequestContext,
    add_response_header,
    context_with_session,
    format_set_cookie,
    get_checkpoint_client,
    get_request_context,
    session_from_context,
    session_from_request,
)
from checkpoint.core.config import CheckpointSettings
from checkpoint.core.domain.errors import (
    BodyReadError,
    CheckpointError,
    ConfigError,
    ContentTypeInvalidError,
    ContentTypeMismatchError,
    ContentTypeMissingError,
    DecodeError,
    RequestError,
    ResponseDecodeError,
)
from checkpoint.core.domain.models import Identity, IdentityEnvelope, Profile

__version__ = "0.1.0"

__all__ = [
    "BodyReadError",
    "CheckpointClient",
    "CheckpointError",
    "CheckpointSessionMiddleware",
    "CheckpointSettings",
    "ClientConfig",
    "ConfigError",
    "ContentTypeInvalidError",
    "ContentTypeMismatchError",
    "ContentTypeMissingError",
    "DEFAULT_EXPIRY",
    "DecodeError",
    "Identity",
    "IdentityEnvelope",
    "Profile",
    "RequestContext",
    "RequestError",
    "ResponseDecodeError",
    "add_response_header",
    "context_with_session",
    "format_set_cookie",
    "get_checkpoint_client",
    "get_request_context",
    "session_from_context",
    "session_from_request",
]
