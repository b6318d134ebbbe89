"""Taxonomía de errores del cliente de pruebas.

Por qué tipos propios:
- Un escenario fallido debe reportar *qué clase* de fallo ocurrió (sesión,
  transporte, decodificación) además del status/body observado.
- Los steps y el harness deciden qué hacer; el dispatcher solo propaga.
"""

from __future__ import annotations

_BODY_EXCERPT_CHARS = 200


class AgifyClientError(Exception):
    """Base de todos los errores del cliente; adjunta status/body si existen."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        if self.body:
            excerpt = self.body[:_BODY_EXCERPT_CHARS]
            if len(self.body) > _BODY_EXCERPT_CHARS:
                excerpt += "…"
            parts.append(f"body={excerpt!r}")
        return " | ".join(parts)


class SessionError(AgifyClientError):
    """La sesión HTTP no se pudo crear o no está inicializada."""


class UnsupportedMethodError(AgifyClientError, ValueError):
    """Método HTTP fuera del contrato (solo GET/POST)."""


class TransportError(AgifyClientError):
    """Fallo de red o timeout; la causa original queda en `__cause__`."""

    def __init__(self, message: str, *, method: str, url: str) -> None:
        super().__init__(message)
        self.method = method
        self.url = url


class DecodeError(AgifyClientError):
    """El body no es JSON o no tiene la forma esperada."""


class UnexpectedResponseError(AgifyClientError, AssertionError):
    """Precondición de respuesta incumplida (status/content-type).

    Hereda de `AssertionError` para que pytest lo reporte como fallo del escenario.
    """
