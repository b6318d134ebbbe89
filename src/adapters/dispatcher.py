"""Dispatcher de requests con rate limiting (el "world" de cada escenario).

Responsabilidad:
- Poseer una única sesión `httpx.Client` por escenario.
- Garantizar un intervalo mínimo entre requests consecutivos del mismo world.
- Ofrecer una superficie uniforme `dispatch(method, path, options)`.

Reglas de diseño:
- El estado de throttling es un campo de la instancia: nunca hay reloj global,
  así los escenarios son independientes (y paralelizables con un world cada uno).
- Sin reintentos: los errores suben al step tal cual.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

import httpx

from adapters.http_client import build_client, merge_headers
from core.config import AppSettings, load_settings
from core.domain.http_method import HttpMethod
from core.errors import SessionError, TransportError
from core.interfaces.dispatcher import DispatchOptions, RequestDispatcher

logger = logging.getLogger(__name__)


class RateLimitedDispatcher(RequestDispatcher):
    """World por escenario: sesión HTTP + espaciado mínimo entre requests."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings or load_settings()
        self._transport = transport
        self._clock = clock
        self._sleep = sleep
        self._client: httpx.Client | None = None
        self._closed = False
        self._last_dispatch_at: float | None = None
        self.dispatch_count = 0

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    @property
    def last_dispatch_at(self) -> float | None:
        return self._last_dispatch_at

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def initialize(self) -> None:
        if self._client is not None or self._closed:
            raise SessionError("Dispatcher session already initialized")
        try:
            self._client = build_client(self._settings, transport=self._transport)
        except Exception as exc:
            raise SessionError(f"Could not start HTTP session for {self.base_url}: {exc}") from exc
        logger.debug("HTTP session opened for %s", self.base_url)

    def dispatch(
        self,
        method: str | HttpMethod,
        path: str,
        options: DispatchOptions | None = None,
    ) -> httpx.Response:
        verb = HttpMethod.parse(method)
        if self._client is None:
            raise SessionError("Dispatcher is not initialized; call initialize() first")
        options = options or DispatchOptions()

        self._wait_for_slot()

        headers = merge_headers(options.headers, self._settings.api_key)
        try:
            response = self._client.request(
                verb.value,
                path,
                params=options.params,
                json=options.json,
                headers=headers,
            )
        except httpx.TransportError as exc:
            logger.error("%s %s failed: %s", verb.value, path, exc)
            raise TransportError(
                f"{verb.value} {path} failed: {type(exc).__name__}: {exc}",
                method=verb.value,
                url=f"{self.base_url}{path}",
            ) from exc
        finally:
            # Se marca tras volver (o fallar) el request: el servidor pudo verlo.
            self._last_dispatch_at = self._clock()
            self.dispatch_count += 1

        logger.debug("%s %s -> %d", verb.value, response.request.url, response.status_code)
        return response

    def teardown(self) -> None:
        client, self._client = self._client, None
        if client is None:
            return
        self._closed = True
        client.close()
        logger.debug("HTTP session closed for %s", self.base_url)

    def _wait_for_slot(self) -> None:
        if self._last_dispatch_at is None:
            return
        interval = self._settings.min_request_interval_seconds
        elapsed = self._clock() - self._last_dispatch_at
        if elapsed < interval:
            delay = interval - elapsed
            logger.debug("Rate limit: waiting %.3f s before next request", delay)
            self._sleep(delay)

    def __enter__(self) -> "RateLimitedDispatcher":
        self.initialize()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.teardown()
