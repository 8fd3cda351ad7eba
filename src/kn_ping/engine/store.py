"""PingSource persistence against the Kubernetes API."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Protocol

from kubernetes.client.exceptions import ApiException
from pydantic import ValidationError

from kn_ping.engine.errors import NotFoundError, StoreError
from kn_ping.resources.ping_source import PingSource

if TYPE_CHECKING:
    from kn_ping.core.provider import KubeProvider

logger = logging.getLogger(__name__)


class PingSourceStore(Protocol):
    """Read/write access to PingSources in one namespace."""

    namespace: str

    def get(self, name: str, *, timeout: float | None = None) -> PingSource:
        """Fetch a source. Raise ``NotFoundError`` if it does not exist."""
        ...

    def update(self, source: PingSource, *, timeout: float | None = None) -> PingSource:
        """Replace a source with *source*. Raise ``StoreError`` on failure."""
        ...


def api_error_message(exc: ApiException) -> str:
    """Extract the server's message from an ``ApiException``."""
    if exc.body:
        try:
            body = json.loads(exc.body)
        except (TypeError, ValueError):
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
    return f"{exc.status} {exc.reason}".strip()


def _parse(raw: dict[str, Any], name: str, namespace: str) -> PingSource:
    try:
        return PingSource.from_manifest(raw)
    except ValidationError as exc:
        msg = f"ping source '{name}' in namespace '{namespace}' could not be read: {exc}"
        raise StoreError(msg) from exc


class KubePingSourceStore:
    """``PingSourceStore`` backed by the custom objects API."""

    def __init__(self, provider: KubeProvider, namespace: str) -> None:
        self._provider = provider
        self.namespace = namespace

    def get(self, name: str, *, timeout: float | None = None) -> PingSource:
        logger.debug("Fetching ping source %s/%s", self.namespace, name)
        try:
            raw = self._provider.custom_objects.get_namespaced_custom_object(
                PingSource.group,
                PingSource.version,
                self.namespace,
                PingSource.plural,
                name,
                _request_timeout=timeout,
            )
        except ApiException as exc:
            if exc.status == 404:
                raise NotFoundError(name, self.namespace) from exc
            raise StoreError(api_error_message(exc)) from exc
        return _parse(raw, name, self.namespace)

    def update(self, source: PingSource, *, timeout: float | None = None) -> PingSource:
        logger.debug(
            "Replacing ping source %s at resourceVersion %s",
            source.address,
            source.resource_version,
        )
        try:
            raw = self._provider.custom_objects.replace_namespaced_custom_object(
                PingSource.group,
                PingSource.version,
                source.namespace,
                PingSource.plural,
                source.name,
                source.to_manifest(),
                _request_timeout=timeout,
            )
        except ApiException as exc:
            if exc.status == 404:
                raise NotFoundError(source.name, source.namespace) from exc
            if exc.status == 409:
                msg = (
                    f"ping source '{source.name}' was modified since it was read "
                    f"(resourceVersion {source.resource_version}): {api_error_message(exc)}"
                )
                raise StoreError(msg) from exc
            raise StoreError(api_error_message(exc)) from exc
        return _parse(raw, source.name, source.namespace)
