"""Sink reference parsing and resolution.

Accepted forms:

- ``http://...`` / ``https://...``: used as a URI destination as-is
- ``name``: a Knative Service in the current namespace
- ``prefix:name`` / ``prefix:name:namespace`` with prefix one of
  ``ksvc``, ``broker``, ``channel`` or ``svc`` (a plain Kubernetes Service)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from kubernetes.client.exceptions import ApiException

from kn_ping.engine.errors import SinkResolutionError
from kn_ping.engine.store import api_error_message
from kn_ping.resources.destination import Destination, KReference

if TYPE_CHECKING:
    from kn_ping.core.provider import KubeProvider

logger = logging.getLogger(__name__)

DEFAULT_SINK_PREFIX = "ksvc"
_URI_SCHEMES = ("http://", "https://")


@dataclass(frozen=True, slots=True)
class SinkKind:
    """API coordinates of an addressable kind a sink prefix points at."""

    group: str
    version: str
    plural: str
    kind: str

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version


SINK_KINDS: dict[str, SinkKind] = {
    "ksvc": SinkKind("serving.knative.dev", "v1", "services", "Service"),
    "broker": SinkKind("eventing.knative.dev", "v1", "brokers", "Broker"),
    "channel": SinkKind("messaging.knative.dev", "v1", "channels", "Channel"),
    "svc": SinkKind("", "v1", "services", "Service"),
}


@dataclass(frozen=True, slots=True)
class SinkRef:
    """Parsed reference to a named object of a known addressable kind."""

    prefix: str
    name: str
    namespace: str

    @property
    def kind(self) -> SinkKind:
        return SINK_KINDS[self.prefix]


class SinkResolver(Protocol):
    """Turns a raw sink reference into a ``Destination``."""

    def resolve(self, raw: str, namespace: str, *, timeout: float | None = None) -> Destination:
        """Resolve *raw*. Raise ``SinkResolutionError`` on failure."""
        ...


def parse_sink(raw: str, namespace: str) -> Destination | SinkRef:
    """Parse a sink reference without contacting the cluster.

    URIs come back as a ready ``Destination``; anything else as a ``SinkRef``
    that still has to be looked up.

    Raises:
        SinkResolutionError: On an empty reference, an unknown prefix, or
            too many ``:``-separated parts.
    """
    if not raw:
        raise SinkResolutionError("sink reference is empty")
    if raw.startswith(_URI_SCHEMES):
        return Destination(uri=raw)

    parts = raw.split(":")
    if len(parts) == 1:
        parts = [DEFAULT_SINK_PREFIX, *parts]
    if len(parts) > 3:
        raise SinkResolutionError(
            f"invalid sink reference {raw!r}, expected [prefix:]name[:namespace]"
        )
    prefix, name = parts[0], parts[1]
    sink_namespace = parts[2] if len(parts) == 3 else namespace
    if prefix not in SINK_KINDS:
        known = ", ".join(sorted(SINK_KINDS))
        raise SinkResolutionError(f"unsupported sink prefix {prefix!r}, expected one of {known}")
    if not name or not sink_namespace:
        raise SinkResolutionError(f"invalid sink reference {raw!r}, name and namespace required")
    return SinkRef(prefix=prefix, name=name, namespace=sink_namespace)


class KubeSinkResolver:
    """``SinkResolver`` that checks the referenced object exists in the cluster."""

    def __init__(self, provider: KubeProvider) -> None:
        self._provider = provider

    def resolve(self, raw: str, namespace: str, *, timeout: float | None = None) -> Destination:
        ref = parse_sink(raw, namespace)
        if isinstance(ref, Destination):
            return ref

        kind = ref.kind
        logger.debug("Resolving sink %s:%s in %s", ref.prefix, ref.name, ref.namespace)
        try:
            obj = self._fetch(kind, ref.name, ref.namespace, timeout=timeout)
        except ApiException as exc:
            if exc.status == 404:
                raise SinkResolutionError(
                    f"{kind.kind} '{ref.name}' not found in namespace '{ref.namespace}'"
                ) from exc
            raise SinkResolutionError(api_error_message(exc)) from exc

        return Destination(
            ref=KReference(
                kind=obj.get("kind") or kind.kind,
                name=ref.name,
                api_version=obj.get("apiVersion") or kind.api_version,
                namespace=ref.namespace,
            )
        )

    def _fetch(
        self, kind: SinkKind, name: str, namespace: str, *, timeout: float | None
    ) -> dict[str, Any]:
        if not kind.group:
            self._provider.core.read_namespaced_service(name, namespace, _request_timeout=timeout)
            return {"kind": kind.kind, "apiVersion": kind.api_version}
        return self._provider.custom_objects.get_namespaced_custom_object(
            kind.group,
            kind.version,
            namespace,
            kind.plural,
            name,
            _request_timeout=timeout,
        )
