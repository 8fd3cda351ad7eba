"""Builder that derives a new PingSource from an existing one."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Literal

from kn_ping.resources.ping_source import PingSource

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from kn_ping.resources.destination import Destination

PayloadEncoding = Literal["text", "base64"]

_PAYLOAD_FIELDS: dict[str, tuple[str, str]] = {
    # encoding -> (field to set, field to clear)
    "text": ("data", "data_base64"),
    "base64": ("data_base64", "data"),
}


class PingSourceBuilder:
    """Single-use accumulator for PingSource updates.

    The existing source is copied once at construction.  Each setter
    overwrites exactly one field on that copy and returns the builder, so
    calls chain.  Fields no setter touches keep their original values.
    """

    def __init__(self, existing: PingSource) -> None:
        self._attrs: dict[str, Any] = copy.deepcopy(existing.model_dump())
        self._removed: list[str] = []

    def schedule(self, value: str) -> PingSourceBuilder:
        self._attrs["schedule"] = value
        return self

    def data_payload(self, value: str, *, encoding: PayloadEncoding = "text") -> PingSourceBuilder:
        """Set the payload variant for *encoding* and clear the other one."""
        target, other = _PAYLOAD_FIELDS[encoding]
        self._attrs[target] = value
        self._attrs[other] = None
        return self

    def sink(self, destination: Destination) -> PingSourceBuilder:
        self._attrs["sink"] = destination.model_dump()
        return self

    def ce_overrides(
        self, merged: Mapping[str, str], removed: Sequence[str] = ()
    ) -> PingSourceBuilder:
        """Replace the override map with an already merged one.

        *removed* lists the keys the caller asked to drop; they are recorded
        for reporting and kept out of the stored map.
        """
        self._removed = sorted({*self._removed, *removed})
        self._attrs["ce_overrides"] = {k: v for k, v in merged.items() if k not in removed}
        return self

    @property
    def removed_overrides(self) -> list[str]:
        return list(self._removed)

    def build(self) -> PingSource:
        """Return a new frozen PingSource; the builder state is left intact."""
        return PingSource.model_validate(copy.deepcopy(self._attrs))
