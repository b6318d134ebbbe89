"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta del contrato de la API sin acoplar el Core a HTTP.
- Un body con forma inesperada falla en bloque: nunca hay registros a medias.

Nota:
- Estos modelos describen *qué* devuelve la API, no *cómo* se pide.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class AgeEstimate(BaseModel):
    """Estimación de edad para un nombre.

    `age` es `None` cuando la API no tiene muestras suficientes para el nombre.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(
        ...,
        description="Nombre consultado, tal como lo devuelve la API.",
    )
    age: int | None = Field(
        default=None,
        ge=0,
        description="Edad estimada; null si no hay datos.",
    )
    count: int = Field(
        ...,
        ge=0,
        description="Número de muestras usadas en la estimación.",
    )


class LocalizedAgeEstimate(AgeEstimate):
    """Estimación restringida a un país (ISO 3166-1 alpha-2)."""

    country_id: str = Field(
        ...,
        min_length=2,
        max_length=2,
        description="Código de país aplicado a la estimación.",
    )


class ApiErrorBody(BaseModel):
    """Cuerpo de error 4xx de la API."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    error: str = Field(
        ...,
        description="Mensaje de error (p.ej. \"Missing 'name' parameter\").",
    )
