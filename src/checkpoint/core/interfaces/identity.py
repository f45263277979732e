"""Contrato del proveedor de identidad.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- El middleware y sus dependencias (`get_checkpoint_client`) trabajan contra
  esta abstracción; `CheckpointClient` la implementa y en tests se sustituye
  por un fake sin levantar HTTP.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from checkpoint.core.domain.models import Identity, Profile


@runtime_checkable
class IdentityProvider(Protocol):
    """Contrato mínimo para resolver la identidad de una sesión.

    Reglas de diseño:
    - Los métodos son asíncronos porque hacen I/O (HTTP).
    - "Sin identidad" se expresa con `None`, nunca con una excepción.
    """

    async def get_current_identity(self) -> Identity | None:
        ...

    async def get_current_user(self) -> tuple[Identity | None, Profile | None]:
        ...

    def with_session(self, session: str | None) -> "IdentityProvider":
        """Devuelve un proveedor equivalente que usa otra sesión."""

        ...
