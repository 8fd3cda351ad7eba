"""Engine types (update request, plan, result)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from kn_ping.resources.ping_source import (
    PingSource,  # noqa: TC001 — Pydantic needs this at runtime
)


class UpdateRequest(BaseModel):
    """Sparse set of field updates.

    ``None`` means the caller did not supply the field; the matching
    PingSource field is then left exactly as it was.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    schedule: str | None = None
    data: str | None = None
    data_base64: str | None = None
    sink: str | None = None
    ce_overrides: list[str] | None = None

    def supplied_fields(self) -> list[str]:
        """Names of the fields the caller explicitly set."""
        return [name for name in type(self).model_fields if getattr(self, name) is not None]


class FieldChange(BaseModel):
    field: str
    before: Any = None
    after: Any = None


class UpdatePlan(BaseModel):
    prior: PingSource
    planned: PingSource
    changes: list[FieldChange] = Field(default_factory=list)
    removed_overrides: list[str] = Field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)

    @property
    def changed_fields(self) -> list[str]:
        return [c.field for c in self.changes]


class UpdateResult(BaseModel):
    name: str
    namespace: str
    source: PingSource
    changes: list[FieldChange] = Field(default_factory=list)
    dry_run: bool = False


def diff_sources(before: PingSource, after: PingSource) -> list[FieldChange]:
    """Per-field differences between two sources, in model field order."""
    old = before.model_dump(mode="json")
    new = after.model_dump(mode="json")
    return [
        FieldChange(field=name, before=old[name], after=new[name])
        for name in type(before).model_fields
        if old[name] != new[name]
    ]
