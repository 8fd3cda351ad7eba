"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from kn_ping.engine.errors import NotFoundError
from kn_ping.resources import Destination, KReference, PingSource

if TYPE_CHECKING:
    from collections.abc import Callable

_KN_ENV_VARS = (
    "KN_KUBECONFIG",
    "KN_CONTEXT",
    "KN_NAMESPACE",
    "KN_REQUEST_TIMEOUT",
    "KN_IN_CLUSTER",
    "KN_LOG",
    "POD_NAMESPACE",
    "NO_COLOR",
)


@pytest.fixture(autouse=True)
def _clean_kn_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove KN_* env vars so unit tests don't leak host config."""
    for var in _KN_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class FakeStore:
    """In-memory ``PingSourceStore`` recording every call."""

    def __init__(self, namespace: str = "default") -> None:
        self.namespace = namespace
        self.sources: dict[str, PingSource] = {}
        self.get_calls: list[tuple[str, float | None]] = []
        self.updated: list[PingSource] = []
        self.update_timeouts: list[float | None] = []
        self.update_error: Exception | None = None

    def add(self, source: PingSource) -> PingSource:
        self.sources[source.name] = source
        return source

    def get(self, name: str, *, timeout: float | None = None) -> PingSource:
        self.get_calls.append((name, timeout))
        if name not in self.sources:
            raise NotFoundError(name, self.namespace)
        return self.sources[name]

    def update(self, source: PingSource, *, timeout: float | None = None) -> PingSource:
        self.update_timeouts.append(timeout)
        if self.update_error is not None:
            raise self.update_error
        self.updated.append(source)
        self.sources[source.name] = source
        return source


class FakeResolver:
    """``SinkResolver`` returning canned destinations."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, float | None]] = []
        self.error: Exception | None = None

    def resolve(self, raw: str, namespace: str, *, timeout: float | None = None) -> Destination:
        self.calls.append((raw, namespace, timeout))
        if self.error is not None:
            raise self.error
        if raw.startswith("http"):
            return Destination(uri=raw)
        return Destination(
            ref=KReference(
                kind="Service",
                name=raw.split(":")[-1],
                api_version="serving.knative.dev/v1",
                namespace=namespace,
            )
        )


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def make_source() -> Callable[..., PingSource]:
    """Factory fixture: a fully populated PingSource with overridable fields."""

    def _make(**overrides: Any) -> PingSource:
        attrs: dict[str, Any] = {
            "name": "heartbeat",
            "namespace": "default",
            "schedule": "*/2 * * * *",
            "data": '{"message": "ping"}',
            "sink": Destination(
                ref=KReference(
                    kind="Service",
                    name="event-display",
                    api_version="serving.knative.dev/v1",
                    namespace="default",
                )
            ),
            "ce_overrides": {"team": "platform", "env": "dev"},
            "metadata": {"labels": {"app": "heartbeat"}, "uid": "1234"},
        }
        attrs.update(overrides)
        return PingSource(**attrs)

    return _make


@pytest.fixture
def source(make_source: Callable[..., PingSource], store: FakeStore) -> PingSource:
    """The default source, registered in ``store``."""
    return store.add(make_source())
