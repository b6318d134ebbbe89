from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from adapters.agify_schema import AgifyResponseSchema, batch_params, decode_error, decode_json
from core.domain.models import AgeEstimate, LocalizedAgeEstimate
from core.errors import DecodeError, UnexpectedResponseError
from tests.stubs import FakeAgifyApi


def _fixed(status: int = 200, **kwargs: Any) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, **kwargs)

    return handler


def test_lookup_single_decodes_record(make_world) -> None:
    world = make_world(_fixed(json={"name": "Michael", "age": 62, "count": 12345}))
    schema = AgifyResponseSchema(world)

    estimate = schema.lookup_single("Michael")

    assert estimate == AgeEstimate(name="Michael", age=62, count=12345)
    assert schema.last_response is not None
    assert schema.last_response.status_code == 200


def test_lookup_single_accepts_null_age(make_world) -> None:
    world = make_world(_fixed(json={"name": "zzzz", "age": None, "count": 0}))

    estimate = AgifyResponseSchema(world).lookup_single("zzzz")

    assert estimate.age is None


def test_lookup_single_sends_name_and_custom_headers(make_world) -> None:
    stub = FakeAgifyApi()
    world = make_world(stub)

    AgifyResponseSchema(world).lookup_single("Michael", headers={"User-Agent": "Test-Agent/1.0"})

    assert stub.last_request.url.params.multi_items() == [("name", "Michael")]
    assert stub.last_request.headers["user-agent"] == "Test-Agent/1.0"


def test_lookup_localized_adds_country(make_world) -> None:
    stub = FakeAgifyApi()
    world = make_world(stub)

    estimate = AgifyResponseSchema(world).lookup_localized("Michael", "US")

    assert isinstance(estimate, LocalizedAgeEstimate)
    assert estimate.country_id == "US"
    assert stub.last_request.url.params.multi_items() == [("name", "Michael"), ("country_id", "US")]


def test_lookup_batch_preserves_input_order(make_world) -> None:
    stub = FakeAgifyApi()
    world = make_world(stub)

    estimates = AgifyResponseSchema(world).lookup_batch(["A", "B", "C"])

    assert [e.name for e in estimates] == ["A", "B", "C"]
    assert stub.last_request.url.params.multi_items() == [("name[]", "A"), ("name[]", "B"), ("name[]", "C")]


def test_lookup_batch_localized_appends_single_country(make_world) -> None:
    stub = FakeAgifyApi()
    world = make_world(stub)

    estimates = AgifyResponseSchema(world).lookup_batch_localized(["Michael", "Emma"], "US")

    assert [e.country_id for e in estimates] == ["US", "US"]
    assert stub.last_request.url.params.multi_items() == [
        ("name[]", "Michael"),
        ("name[]", "Emma"),
        ("country_id", "US"),
    ]


def test_malformed_json_is_a_decode_error(make_world) -> None:
    world = make_world(_fixed(content=b'{"name": "Michael", "age": 6', headers={"content-type": "application/json"}))

    with pytest.raises(DecodeError) as excinfo:
        AgifyResponseSchema(world).lookup_single("Michael")

    assert excinfo.value.status_code == 200
    assert "not valid JSON" in str(excinfo.value)


def test_unexpected_shape_is_a_decode_error(make_world) -> None:
    world = make_world(_fixed(json={"name": "Michael", "age": "sixty"}))

    with pytest.raises(DecodeError, match="age estimate"):
        AgifyResponseSchema(world).lookup_single("Michael")


def test_error_body_on_single_lookup_is_a_decode_error(make_world) -> None:
    world = make_world(_fixed(422, json={"error": "Invalid 'name' parameter"}))

    with pytest.raises(DecodeError) as excinfo:
        AgifyResponseSchema(world).lookup_single("")

    assert excinfo.value.status_code == 422


def test_batch_requires_ok_status(make_world) -> None:
    world = make_world(_fixed(422, json={"error": "Invalid 'name' parameter"}))

    with pytest.raises(UnexpectedResponseError) as excinfo:
        AgifyResponseSchema(world).lookup_batch(["Michael", ""])

    assert isinstance(excinfo.value, AssertionError)
    assert excinfo.value.status_code == 422
    assert "Invalid 'name' parameter" in excinfo.value.body
    assert "status=422" in str(excinfo.value)


def test_batch_requires_json_content_type(make_world) -> None:
    world = make_world(_fixed(text="[]"))

    with pytest.raises(UnexpectedResponseError, match="content-type"):
        AgifyResponseSchema(world).lookup_batch(["Michael"])


def test_batch_requires_array_body(make_world) -> None:
    world = make_world(_fixed(json={"name": "Michael", "age": 62, "count": 1}))

    with pytest.raises(DecodeError, match="JSON array"):
        AgifyResponseSchema(world).lookup_batch(["Michael"])


def test_batch_with_bad_item_fails_whole_decode(make_world) -> None:
    world = make_world(_fixed(json=[{"name": "A", "age": 1, "count": 1}, {"name": "B"}]))

    with pytest.raises(DecodeError, match="age estimate list"):
        AgifyResponseSchema(world).lookup_batch(["A", "B"])


def test_decode_helpers() -> None:
    response = httpx.Response(422, json={"error": "Missing 'name' parameter"})

    assert decode_json(response) == {"error": "Missing 'name' parameter"}
    assert decode_error(response).error == "Missing 'name' parameter"


def test_batch_params_without_country() -> None:
    assert batch_params(["x", "y"]) == [("name[]", "x"), ("name[]", "y")]
