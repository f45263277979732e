"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación y documentación autocontenida (Field) sin acoplar el Core a
  librerías de I/O.
- `extra="allow"` deja pasar los campos que Checkpoint añada sin tener que
  modelarlos aquí.

Nota:
- Estos modelos describen *qué* devuelve Checkpoint, no *cómo* se obtiene.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Identity(BaseModel):
    """Principal autenticado devuelto por Checkpoint.

    Es un registro opaco: todos los campos del JSON se conservan tal cual y
    se pueden leer como atributos (`identity.id`) o vía `model_extra`.
    """

    model_config = ConfigDict(extra="allow")


class Profile(BaseModel):
    """Atributos complementarios del principal (nombre, email, etc.)."""

    model_config = ConfigDict(extra="allow")


class IdentityEnvelope(BaseModel):
    """Sobre `{identity, profile}` de `GET /identities/me`."""

    model_config = ConfigDict(extra="ignore")

    identity: Identity | None = Field(
        default=None,
        description="Identidad actual (ausente si la sesión no está asociada a nadie).",
    )
    profile: Profile | None = Field(
        default=None,
        description="Perfil que acompaña a la identidad.",
    )
