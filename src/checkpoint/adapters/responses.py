"""Clasificación y decodificación de respuestas de Checkpoint.

Por qué separado del cliente:
- Son pasos síncronos sobre una respuesta ya recibida; se testean con
  `httpx.Response` construidas a mano, sin transporte.
- El cliente solo compone: transporte -> clasificador -> decoder.
"""

from __future__ import annotations

import re
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from pydantic_core import from_json

from checkpoint.core.domain.errors import (
    BodyReadError,
    ContentTypeInvalidError,
    ContentTypeMismatchError,
    ContentTypeMissingError,
    DecodeError,
    RequestError,
)

M = TypeVar("M", bound=BaseModel)

NO_DATA_MARKER = "[no data in response]"

_TOKEN = r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+"
_MEDIA_TYPE_RE = re.compile(rf"^{_TOKEN}(?:/{_TOKEN})?$")
_PARAM_NAME_RE = re.compile(rf"^{_TOKEN}$")

# Errores posibles al leer el body de una respuesta en streaming.
_READ_ERRORS = (httpx.TransportError, httpx.StreamError)


def is_success(status_code: int) -> bool:
    return 200 <= status_code <= 299


def parse_media_type(value: str) -> str:
    """Devuelve el media type en minúsculas, sin parámetros.

    Raises:
        ValueError: si el valor no es un media type válido o algún parámetro
            no tiene la forma `nombre=valor`.
    """

    main, _, params = value.partition(";")
    media_type = main.strip()
    if not _MEDIA_TYPE_RE.match(media_type):
        raise ValueError(f"no media type in {value!r}")
    for param in params.split(";") if params else ():
        param = param.strip()
        if not param:
            continue
        name, sep, _ = param.partition("=")
        if not sep or not _PARAM_NAME_RE.match(name.strip()):
            raise ValueError(f"invalid media type parameter {param!r}")
    return media_type.lower()


async def error_from_response(
    request: httpx.Request,
    response: httpx.Response,
    message: str,
    *args: object,
) -> RequestError | None:
    """Clasifica la respuesta por status.

    2xx devuelve `None` y deja el body intacto para el decoder. Cualquier otro
    status lee el body completo, cierra la respuesta y devuelve un
    `RequestError`; la lectura nunca lanza, su fallo queda en el body.
    """

    if is_success(response.status_code):
        return None

    try:
        try:
            raw = await response.aread()
        except _READ_ERRORS as exc:
            body = f"[error reading response body: {exc}]"
        else:
            body = response.text if raw else NO_DATA_MARKER
    finally:
        await response.aclose()

    return RequestError(
        method=request.method,
        url=str(request.url),
        status_code=response.status_code,
        reason_phrase=response.reason_phrase,
        body=body,
        message=message % args if args else message,
        request=request,
        response=response,
    )


async def decode_response_as_json(response: httpx.Response, model: type[M]) -> M | None:
    """Decodifica una respuesta 2xx como JSON en una instancia de `model`.

    Un `Content-Length: 0` no es un error: devuelve `None` sin construir nada,
    aunque falte el `Content-Type`. Un body JSON `null` también devuelve `None`.
    """

    if response.headers.get("content-length", "").strip() == "0":
        return None

    content_type = response.headers.get("content-type")
    if not content_type:
        raise ContentTypeMissingError()

    try:
        media_type = parse_media_type(content_type)
    except ValueError as exc:
        raise ContentTypeInvalidError(content_type) from exc
    if media_type != "application/json":
        raise ContentTypeMismatchError(media_type)

    try:
        body = await response.aread()
    except _READ_ERRORS as exc:
        raise BodyReadError(str(exc)) from exc

    try:
        data = from_json(body)
        # JSON `null` es un "sin datos" válido, igual que un body vacío.
        if data is None:
            return None
        return model.model_validate(data)
    except (ValueError, ValidationError) as exc:
        raise DecodeError(str(exc), size=len(body)) from exc
