"""Selective update engine for PingSources."""

from kn_ping.engine.builder import PingSourceBuilder
from kn_ping.engine.errors import (
    AlreadyDeletingError,
    MalformedInputError,
    NotFoundError,
    PingSourceError,
    SinkResolutionError,
    StoreError,
)
from kn_ping.engine.overrides import merge_overrides, parse_overrides, split_removals
from kn_ping.engine.sink import KubeSinkResolver, SinkResolver, parse_sink
from kn_ping.engine.store import KubePingSourceStore, PingSourceStore
from kn_ping.engine.types import FieldChange, UpdatePlan, UpdateRequest, UpdateResult
from kn_ping.engine.update import PingSourceUpdater, update_ping_source, validate_request

__all__ = [
    "AlreadyDeletingError",
    "FieldChange",
    "KubePingSourceStore",
    "KubeSinkResolver",
    "MalformedInputError",
    "NotFoundError",
    "PingSourceBuilder",
    "PingSourceError",
    "PingSourceStore",
    "PingSourceUpdater",
    "SinkResolutionError",
    "SinkResolver",
    "StoreError",
    "UpdatePlan",
    "UpdateRequest",
    "UpdateResult",
    "merge_overrides",
    "parse_overrides",
    "parse_sink",
    "split_removals",
    "update_ping_source",
    "validate_request",
]
