"""Taxonomía de errores del cliente.

Por qué tipados:
- El llamador distingue "Checkpoint respondió con error" (`RequestError`) de
  "la respuesta no se pudo interpretar" (`ResponseDecodeError`) sin parsear
  mensajes.
- Los errores de transporte (`httpx.TransportError`) y la cancelación
  (`asyncio.CancelledError`) no se envuelven: llegan tal cual.
"""

from __future__ import annotations

from typing import Any

BODY_EXCERPT_LIMIT = 500


def _rebuild(cls: type, kwargs: dict[str, Any]) -> Exception:
    return cls(**kwargs)


class CheckpointError(Exception):
    """Base de todos los errores propios del cliente."""


class ConfigError(CheckpointError, ValueError):
    """Configuración de cliente inválida."""


class RequestError(CheckpointError):
    """Checkpoint devolvió un status fuera de [200, 299].

    Conserva la petición y la respuesta originales para diagnosticar sin
    repetir la llamada.
    """

    def __init__(
        self,
        *,
        method: str,
        url: str,
        status_code: int,
        reason_phrase: str,
        body: str,
        message: str,
        request: Any = None,
        response: Any = None,
    ) -> None:
        self._method = method
        self._url = url
        self._status_code = status_code
        self._reason_phrase = reason_phrase
        self._body = body
        self._message = message
        self._request = request
        self._response = response
        super().__init__(self._format())

    def __reduce__(self) -> tuple[Any, ...]:
        # `args` solo guarda el mensaje formateado; pickle y copy reconstruyen desde los campos.
        return _rebuild, (
            self.__class__,
            {
                "method": self._method,
                "url": self._url,
                "status_code": self._status_code,
                "reason_phrase": self._reason_phrase,
                "body": self._body,
                "message": self._message,
                "request": self._request,
                "response": self._response,
            },
        )

    @property
    def method(self) -> str:
        return self._method

    @property
    def url(self) -> str:
        return self._url

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def reason_phrase(self) -> str:
        return self._reason_phrase

    @property
    def body(self) -> str:
        return self._body

    @property
    def message(self) -> str:
        return self._message

    @property
    def request(self) -> Any:
        return self._request

    @property
    def response(self) -> Any:
        return self._response

    def body_excerpt(self, limit: int = BODY_EXCERPT_LIMIT) -> str:
        """Primeros `limit` caracteres del body más la cuenta de bytes omitidos."""

        if len(self._body) <= limit:
            return self._body
        head = self._body[:limit]
        omitted = len(self._body.encode("utf-8")) - len(head.encode("utf-8"))
        return f"{head}... [{omitted} more bytes]"

    def _format(self) -> str:
        return (
            f"{self._message}: Request [{self._method} {self._url}] failed with status "
            f"{self._status_code} ({self._reason_phrase}): {self.body_excerpt()}"
        )


class ResponseDecodeError(CheckpointError):
    """Respuesta 2xx que no se pudo convertir al modelo esperado."""


class ContentTypeMissingError(ResponseDecodeError):
    def __init__(self) -> None:
        super().__init__("expected response to be JSON, received bytes without a Content-Type")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, ()


class ContentTypeInvalidError(ResponseDecodeError):
    def __init__(self, content_type: str) -> None:
        self.content_type = content_type
        super().__init__(f"invalid content type {content_type!r}")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.content_type,)


class ContentTypeMismatchError(ResponseDecodeError):
    def __init__(self, media_type: str) -> None:
        self.media_type = media_type
        super().__init__(f"expected response to be JSON, got {media_type!r}")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.media_type,)


class BodyReadError(ResponseDecodeError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"could not read entire response: {reason}")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.reason,)


class DecodeError(ResponseDecodeError):
    """JSON malformado o que no encaja con el modelo destino."""

    def __init__(self, reason: str, *, size: int) -> None:
        self.size = size
        self.reason = reason
        super().__init__(f"could not decode response JSON ({size} bytes): {reason}")

    def __reduce__(self) -> tuple[Any, ...]:
        return _rebuild, (self.__class__, {"reason": self.reason, "size": self.size})
