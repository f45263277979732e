"""Cliente HTTP de Checkpoint.

Compone URL builder -> transporte (httpx) -> clasificador -> decoder JSON en
las operaciones de identidad. Sin reintentos ni timeouts propios: la
cancelación y los plazos los pone quien llama (`asyncio.timeout`, cancelar la
tarea) y los fija el transporte configurado.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from http import HTTPStatus
from typing import Any, MutableMapping, TypeVar

import httpx
from pydantic import BaseModel

from checkpoint.adapters.http_client import API_BASE_PATH, QueryParams, build_async_client, build_transport, build_url
from checkpoint.adapters.responses import decode_response_as_json, error_from_response
from checkpoint.core.config import CheckpointSettings
from checkpoint.core.domain.errors import ConfigError, RequestError
from checkpoint.core.domain.models import Identity, IdentityEnvelope, Profile

M = TypeVar("M", bound=BaseModel)

SERVICE_NAME = "Checkpoint"
SESSION_COOKIE = "checkpoint.session"
IDENTITIES_ME_PATH = "/identities/me"

_SCHEMES = ("http", "https")


def _default_logger() -> logging.Logger:
    return logging.getLogger("checkpoint")


@dataclass(frozen=True)
class ClientConfig:
    """Configuración inmutable de un `CheckpointClient`.

    Campos:
    - transport: `httpx.AsyncClient` a usar; `None` crea uno con
      `build_transport()` (sin leer settings ni imponer timeout) que el
      cliente cierra en `aclose()`.
    - scheme/host: destino de Checkpoint (`http` o `https`).
    - session: token enviado como cookie `checkpoint.session` (opcional).
    - logger: sink de logs estructurados (access log). Si es un
      `LoggerAdapter`, su `extra` se conserva en cada registro.
    """

    host: str
    scheme: str = "http"
    session: str | None = None
    transport: httpx.AsyncClient | None = None
    logger: logging.Logger | logging.LoggerAdapter = field(default_factory=_default_logger)

    def __post_init__(self) -> None:
        if self.scheme not in _SCHEMES:
            raise ConfigError(f"scheme must be one of {_SCHEMES}, got {self.scheme!r}")
        if not self.host:
            raise ConfigError("host is required")


class ServiceLoggerAdapter(logging.LoggerAdapter):
    """Añade el `extra` del adapter (p.ej. `service`) a cada registro sin pisar el del llamador."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {})}
        return msg, kwargs


def _service_logger(logger: logging.Logger | logging.LoggerAdapter, service: str) -> ServiceLoggerAdapter:
    # Un LoggerAdapter estándar pisa `extra` en process(); se desenvuelve y se fusiona su extra.
    extra: dict[str, Any] = {}
    while isinstance(logger, logging.LoggerAdapter):
        extra = {**(logger.extra or {}), **extra}
        logger = logger.logger
    return ServiceLoggerAdapter(logger, {**extra, "service": service})


class CheckpointClient:
    """Cliente de la API de identidades de Checkpoint.

    Es inmutable: `with_session()` devuelve otro cliente que comparte
    transporte y logger, así que se puede usar desde varias tareas a la vez.
    """

    def __init__(self, config: ClientConfig, *, _owns_transport: bool | None = None) -> None:
        owns = config.transport is None if _owns_transport is None else _owns_transport
        if config.transport is None:
            config = replace(config, transport=build_transport())
        self._config = config
        self._transport: httpx.AsyncClient = config.transport  # type: ignore[assignment]
        self._owns_transport = owns
        self._logger = _service_logger(config.logger, self.base_url)

    @classmethod
    def from_settings(
        cls,
        settings: CheckpointSettings | None = None,
        *,
        transport: httpx.AsyncClient | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> "CheckpointClient":
        settings = settings or CheckpointSettings()
        owns = transport is None
        config = ClientConfig(
            host=settings.host,
            scheme=settings.scheme,
            session=settings.session,
            transport=transport or build_async_client(settings),
            logger=logger or _default_logger(),
        )
        return cls(config, _owns_transport=owns)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def session(self) -> str | None:
        return self._config.session

    @property
    def base_url(self) -> str:
        return f"{self._config.scheme}://{self._config.host}"

    def with_session(self, session: str | None) -> "CheckpointClient":
        """Clona el cliente con otra sesión; el clon nunca cierra el transporte."""

        return CheckpointClient(replace(self._config, session=session), _owns_transport=False)

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self) -> "CheckpointClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ── identidades ────────────────────────────────────────────────

    async def get_current_identity(self) -> Identity | None:
        """Identidad asociada a la sesión, o `None` si Checkpoint responde 412."""

        identity, _ = await self.get_current_user()
        return identity

    async def get_current_user(self) -> tuple[Identity | None, Profile | None]:
        """Identidad y perfil de la sesión; `(None, None)` si Checkpoint responde 412."""

        try:
            envelope = await self._do_get(IDENTITIES_ME_PATH, None, IdentityEnvelope)
        except RequestError as exc:
            if exc.status_code == HTTPStatus.PRECONDITION_FAILED:
                return None, None
            raise
        if envelope is None:
            return None, None
        return envelope.identity, envelope.profile

    # ── pipeline HTTP ──────────────────────────────────────────────

    async def _do_get(self, path: str, params: QueryParams | None, model: type[M]) -> M | None:
        request = self._new_request("GET", path, params)
        started = time.monotonic()
        response = await self._transport.send(request, stream=True)
        try:
            self._log_access(request, response, started)
            error = await error_from_response(request, response, "%s", SERVICE_NAME)
            if error is not None:
                raise error
            return await decode_response_as_json(response, model)
        finally:
            await response.aclose()

    def _new_request(self, method: str, path: str, params: QueryParams | None) -> httpx.Request:
        url = build_url(self._config.scheme, self._config.host, API_BASE_PATH, path, params)
        headers = {"Accept": "application/json"}
        if self._config.session:
            headers["Cookie"] = f"{SESSION_COOKIE}={self._config.session}"
        return self._transport.build_request(method, url, headers=headers)

    def _log_access(self, request: httpx.Request, response: httpx.Response, started: float) -> None:
        self._logger.info(
            request.method,
            extra={
                "event_type": "checkpoint.access",
                "url": str(request.url),
                "time": time.monotonic() - started,
                "status": response.status_code,
            },
        )
