"""PingSource resource model."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 — Pydantic needs this at runtime
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from kn_ping.resources.destination import Destination

_DNS1123 = r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$"

# Metadata keys held in dedicated fields or owned by the API server.
# ``resourceVersion`` stays in ``metadata`` so a replace is conditional on it.
_STRIPPED_METADATA = ("name", "namespace", "deletionTimestamp", "managedFields")


class PingSource(BaseModel):
    """Desired state of a Knative PingSource.

    Instances are frozen: updates go through ``PingSourceBuilder`` which
    produces a new value.  ``metadata`` carries everything the API server
    returned apart from identity and server-managed fields, so labels,
    annotations, owner references and the ``resourceVersion`` read from the
    server survive a read/write cycle.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    group: ClassVar[str] = "sources.knative.dev"
    version: ClassVar[str] = "v1beta2"
    plural: ClassVar[str] = "pingsources"
    kind: ClassVar[str] = "PingSource"

    name: str = Field(pattern=_DNS1123)
    namespace: str = Field(default="default", pattern=_DNS1123)
    schedule: str | None = Field(default=None, min_length=1)
    timezone: str | None = None
    content_type: str | None = None
    data: str | None = None
    data_base64: str | None = None
    sink: Destination | None = None
    ce_overrides: dict[str, str] = Field(default_factory=dict)
    deletion_timestamp: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_payload(self) -> Self:
        if self.data is not None and self.data_base64 is not None:
            msg = "Cannot set both 'data' and 'data_base64'"
            raise ValueError(msg)
        return self

    @property
    def address(self) -> str:
        """``namespace/name`` of this source."""
        return f"{self.namespace}/{self.name}"

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}"

    @property
    def is_deleting(self) -> bool:
        return self.deletion_timestamp is not None

    @property
    def resource_version(self) -> str | None:
        return self.metadata.get("resourceVersion")

    @classmethod
    def from_manifest(cls, raw: dict[str, Any]) -> Self:
        """Build from a Kubernetes object as returned by the API server."""
        metadata = dict(raw.get("metadata") or {})
        spec = raw.get("spec") or {}
        ce_overrides = (spec.get("ceOverrides") or {}).get("extensions") or {}
        sink = spec.get("sink")
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", "default"),
            schedule=spec.get("schedule"),
            timezone=spec.get("timezone"),
            content_type=spec.get("contentType"),
            data=spec.get("data"),
            data_base64=spec.get("dataBase64"),
            sink=Destination.from_manifest(sink) if sink else None,
            ce_overrides=dict(ce_overrides),
            deletion_timestamp=metadata.get("deletionTimestamp"),
            metadata={k: v for k, v in metadata.items() if k not in _STRIPPED_METADATA},
        )

    def to_manifest(self) -> dict[str, Any]:
        """Render as a Kubernetes object suitable for a full replace."""
        spec: dict[str, Any] = {}
        for key, value in (
            ("schedule", self.schedule),
            ("timezone", self.timezone),
            ("contentType", self.content_type),
            ("data", self.data),
            ("dataBase64", self.data_base64),
        ):
            if value is not None:
                spec[key] = value
        if self.sink is not None:
            spec["sink"] = self.sink.to_manifest()
        if self.ce_overrides:
            spec["ceOverrides"] = {"extensions": dict(self.ce_overrides)}
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": {**self.metadata, "name": self.name, "namespace": self.namespace},
            "spec": spec,
        }
