"""Métodos HTTP aceptados por el dispatcher.

Por qué un Enum en el dominio:
- Solo existen GET (todas las consultas) y POST (el escenario negativo que
  comprueba que la API rechaza lo que no es GET).
- Dispatcher, steps y CLI comparten la misma lista; un método fuera de ella
  falla antes de tocar la red.
"""

from __future__ import annotations

from enum import Enum

from core.errors import UnsupportedMethodError


class HttpMethod(str, Enum):
    """Métodos soportados."""

    GET = "GET"
    POST = "POST"

    @classmethod
    def parse(cls, value: "str | HttpMethod") -> "HttpMethod":
        """Normaliza el nombre (mayúsculas, sin espacios); rechaza todo lo que no sea GET/POST."""

        if isinstance(value, HttpMethod):
            return value
        normalized = str(value).strip().upper()
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedMethodError(f"Unsupported HTTP method: {value}") from None
