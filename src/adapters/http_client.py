"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza base URL, timeout y headers para que todos los requests de la
  suite se comporten igual.
- Facilita testeo: se puede inyectar un `httpx.MockTransport` en lugar de red.
"""

from __future__ import annotations

from typing import Mapping

import httpx

from core.config import AppSettings, load_settings

API_KEY_HEADER = "x-api-key"


def merge_headers(caller_headers: Mapping[str, str] | None, api_key: str) -> dict[str, str]:
    """Combina headers del caller con el header de API key.

    Orden explícito: primero los del caller, después la API key (si no está
    vacía), que siempre gana aunque el caller envíe su propio `x-api-key`.
    """

    merged: dict[str, str] = {}
    for key, value in (caller_headers or {}).items():
        if key.lower() == API_KEY_HEADER and api_key:
            continue
        merged[key] = value
    if api_key:
        merged[API_KEY_HEADER] = api_key
    return merged


def build_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` ligado a la base URL configurada.

    Por qué un builder:
    - Centraliza timeouts/headers para dispatcher, CLI y tests.
    - `transport` permite stubs en memoria sin tocar el resto del flujo.
    """

    settings = settings or load_settings()
    headers: dict[str, str] = {
        "User-Agent": "agify-bdd/0.1",
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        base_url=settings.base_url,
        timeout=httpx.Timeout(settings.timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
