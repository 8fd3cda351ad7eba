"""Sink destination models (Knative ``duckv1.Destination``)."""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class KReference(BaseModel):
    """Reference to an addressable Kubernetes object."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    kind: str = Field(min_length=1)
    name: str = Field(min_length=1)
    api_version: str | None = Field(default=None, alias="apiVersion", min_length=1)
    namespace: str | None = None
    group: str | None = None
    address: str | None = None

    @model_validator(mode="after")
    def _check_api_version_or_group(self) -> Self:
        if self.api_version is None and self.group is None:
            msg = "Reference requires 'apiVersion' or 'group'"
            raise ValueError(msg)
        return self


class Destination(BaseModel):
    """Where a source delivers its events: an object reference, a URI, or both.

    When both are set, ``uri`` is resolved relative to the referenced object.
    ``ca_certs`` and ``audience`` are carried as read; this tool never sets them.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    ref: KReference | None = None
    uri: str | None = None
    ca_certs: str | None = Field(default=None, alias="CACerts")
    audience: str | None = None

    @model_validator(mode="after")
    def _check_ref_or_uri(self) -> Self:
        if self.ref is None and not self.uri:
            msg = "Destination requires 'ref' or 'uri'"
            raise ValueError(msg)
        return self

    @classmethod
    def from_manifest(cls, raw: dict[str, Any]) -> Self:
        return cls.model_validate(raw)

    def to_manifest(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def describe(self) -> str:
        """Short human-readable form, e.g. ``Service:events/default``."""
        if self.ref is None:
            return str(self.uri)
        target = f"{self.ref.kind}:{self.ref.name}"
        if self.ref.namespace:
            target += f"/{self.ref.namespace}"
        if self.uri:
            target += f" ({self.uri})"
        return target
