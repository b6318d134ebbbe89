"""Contrato del dispatcher de requests.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- El accessor de esquemas y los steps dependen de esta abstracción, así que
  se pueden probar con un dispatcher falso sin red.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence, runtime_checkable

import httpx

from core.domain.http_method import HttpMethod

QueryParams = dict[str, str] | Sequence[tuple[str, str]]


@dataclass(frozen=True)
class DispatchOptions:
    """Opciones de un request.

    - `params`: dict o secuencia de pares; la secuencia permite claves repetidas
      (`name[]`) y conserva el orden.
    - `json`: body JSON (solo tiene sentido con POST).
    - `headers`: headers del caller; el header de API key se aplica encima.
    """

    params: QueryParams | None = None
    json: Any = None
    headers: dict[str, str] = field(default_factory=dict)


@runtime_checkable
class RequestDispatcher(Protocol):
    """Contrato mínimo del "world" que ven los steps."""

    def initialize(self) -> None:
        ...

    def dispatch(
        self,
        method: str | HttpMethod,
        path: str,
        options: DispatchOptions | None = None,
    ) -> httpx.Response:
        """Emite un request respetando el intervalo mínimo y devuelve la respuesta cruda."""

        ...

    def teardown(self) -> None:
        ...
