"""Accessor tipado de la API de estimación de edad.

Responsabilidad:
- Exponer operaciones con nombre (single, localizada, batch) en vez de que los
  steps construyan query strings a mano.
- Decodificar bodies JSON a modelos del dominio; un body inválido es siempre
  `DecodeError`, nunca un registro a medias.

Todas las operaciones pasan por el dispatcher, así que respetan el rate limit.
"""

from __future__ import annotations

import json
from typing import Any, Sequence, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from core.domain.http_method import HttpMethod
from core.domain.models import AgeEstimate, ApiErrorBody, LocalizedAgeEstimate
from core.errors import DecodeError, UnexpectedResponseError
from core.interfaces.dispatcher import DispatchOptions, RequestDispatcher

T = TypeVar("T")

ROOT_PATH = "/"
BATCH_NAME_PARAM = "name[]"

_SINGLE = TypeAdapter(AgeEstimate)
_LOCALIZED = TypeAdapter(LocalizedAgeEstimate)
_BATCH = TypeAdapter(list[AgeEstimate])
_BATCH_LOCALIZED = TypeAdapter(list[LocalizedAgeEstimate])
_ERROR = TypeAdapter(ApiErrorBody)


def decode_json(response: httpx.Response) -> Any:
    """Parsea el body como JSON o lanza `DecodeError` con status/body adjuntos."""

    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(
            f"Response body is not valid JSON: {exc}",
            status_code=response.status_code,
            body=response.text,
        ) from exc


def _validate(adapter: TypeAdapter[T], response: httpx.Response, payload: Any, *, shape: str) -> T:
    try:
        return adapter.validate_python(payload)
    except ValidationError as exc:
        raise DecodeError(
            f"Response body is not a valid {shape}: {exc.error_count()} validation error(s)",
            status_code=response.status_code,
            body=response.text,
        ) from exc


def decode_error(response: httpx.Response) -> ApiErrorBody:
    """Decodifica un body de error 4xx (`{"error": ...}`)."""

    return _validate(_ERROR, response, decode_json(response), shape="error body")


def expect_json_ok(response: httpx.Response) -> None:
    """Precondición de los batch: 200 + content-type JSON."""

    if response.status_code != httpx.codes.OK:
        raise UnexpectedResponseError(
            f"Expected HTTP 200, got {response.status_code}",
            status_code=response.status_code,
            body=response.text,
        )
    content_type = response.headers.get("content-type", "")
    if "application/json" not in content_type:
        raise UnexpectedResponseError(
            f"Expected a JSON content-type, got {content_type!r}",
            status_code=response.status_code,
            body=response.text,
        )


def batch_params(names: Sequence[str], country_id: str | None = None) -> list[tuple[str, str]]:
    """Un `name[]` por nombre, en orden de entrada, y un único `country_id` final."""

    params = [(BATCH_NAME_PARAM, name) for name in names]
    if country_id is not None:
        params.append(("country_id", country_id))
    return params


class AgifyResponseSchema:
    """Fachada tipada sobre un `RequestDispatcher`."""

    def __init__(self, dispatcher: RequestDispatcher) -> None:
        self._dispatcher = dispatcher
        self.last_response: httpx.Response | None = None

    def lookup_single(self, name: str, headers: dict[str, str] | None = None) -> AgeEstimate:
        response = self._get({"name": name}, headers)
        return _validate(_SINGLE, response, decode_json(response), shape="age estimate")

    def lookup_localized(
        self,
        name: str,
        country_id: str,
        headers: dict[str, str] | None = None,
    ) -> LocalizedAgeEstimate:
        response = self._get({"name": name, "country_id": country_id}, headers)
        return _validate(_LOCALIZED, response, decode_json(response), shape="localized age estimate")

    def lookup_batch(self, names: Sequence[str], headers: dict[str, str] | None = None) -> list[AgeEstimate]:
        response = self._get(batch_params(names), headers)
        return _validate(_BATCH, response, self._decode_batch(response), shape="age estimate list")

    def lookup_batch_localized(
        self,
        names: Sequence[str],
        country_id: str,
        headers: dict[str, str] | None = None,
    ) -> list[LocalizedAgeEstimate]:
        response = self._get(batch_params(names, country_id), headers)
        return _validate(_BATCH_LOCALIZED, response, self._decode_batch(response), shape="localized age estimate list")

    def _get(self, params: Any, headers: dict[str, str] | None) -> httpx.Response:
        response = self._dispatcher.dispatch(
            HttpMethod.GET,
            ROOT_PATH,
            DispatchOptions(params=params, headers=dict(headers or {})),
        )
        self.last_response = response
        return response

    @staticmethod
    def _decode_batch(response: httpx.Response) -> list[Any]:
        expect_json_ok(response)
        payload = decode_json(response)
        if not isinstance(payload, list):
            raise DecodeError(
                f"Expected a JSON array, got {type(payload).__name__}",
                status_code=response.status_code,
                body=response.text,
            )
        return payload
