# pytest configuration hooks and shared fixtures.
#
# By default every world talks to the in-process FakeAgifyApi. Set AGIFY_LIVE=1
# to run the feature scenarios against the real AGIFY_BASE_URL instead.

from __future__ import annotations

import os
from typing import Callable, Iterator

import httpx
import pytest

from adapters.dispatcher import RateLimitedDispatcher
from core.config import AppSettings, load_settings
from tests.stubs import FakeAgifyApi

# Register pytest-bdd step definitions as a pytest plugin so fixtures are discoverable.
pytest_plugins = ["tests.bdd.steps"]


def live_mode() -> bool:
    return os.environ.get("AGIFY_LIVE") == "1"


class FakeClock:
    """Monotonic clock driven by the test; `sleep` just advances it."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings() -> AppSettings:
    if live_mode():
        load_settings.cache_clear()
        return load_settings()
    return AppSettings(_env_file=None, base_url="https://api.agify.io", timeout_ms=8000, api_key="")


@pytest.fixture
def agify_stub() -> FakeAgifyApi:
    return FakeAgifyApi()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_world(fake_clock: FakeClock) -> Iterator[Callable[..., RateLimitedDispatcher]]:
    """Factory for initialized worlds over a mock handler with a fake clock."""

    created: list[RateLimitedDispatcher] = []

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        settings: AppSettings | None = None,
    ) -> RateLimitedDispatcher:
        world = RateLimitedDispatcher(
            settings or AppSettings(_env_file=None, api_key=""),
            transport=httpx.MockTransport(handler),
            clock=fake_clock,
            sleep=fake_clock.sleep,
        )
        world.initialize()
        created.append(world)
        return world

    yield factory
    for world in created:
        world.teardown()


@pytest.fixture
def world(settings: AppSettings, agify_stub: FakeAgifyApi) -> Iterator[RateLimitedDispatcher]:
    """Scenario world: initialized before the steps, torn down after, pass or fail."""

    transport = None if live_mode() else httpx.MockTransport(agify_stub)
    dispatcher = RateLimitedDispatcher(settings, transport=transport)
    dispatcher.initialize()
    yield dispatcher
    dispatcher.teardown()
