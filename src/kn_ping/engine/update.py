"""Selective update of an existing PingSource."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import TYPE_CHECKING

from kn_ping.engine.builder import PingSourceBuilder
from kn_ping.engine.errors import AlreadyDeletingError, MalformedInputError
from kn_ping.engine.overrides import merge_overrides, parse_overrides, split_removals
from kn_ping.engine.types import UpdatePlan, UpdateRequest, UpdateResult, diff_sources

if TYPE_CHECKING:
    from kn_ping.engine.sink import SinkResolver
    from kn_ping.engine.store import PingSourceStore
    from kn_ping.resources.ping_source import PingSource

logger = logging.getLogger(__name__)


def validate_request(request: UpdateRequest) -> None:
    """Check a request before anything touches the cluster.

    Raises:
        MalformedInputError: Listing every problem found.
    """
    errors: list[str] = []
    if request.data is not None and request.data_base64 is not None:
        errors.append("cannot set both 'data' and 'data_base64'")
    if request.data_base64 is not None:
        try:
            base64.b64decode(request.data_base64, validate=True)
        except (binascii.Error, ValueError):
            errors.append("'data_base64' is not valid base64")
    if request.schedule is not None and not request.schedule.strip():
        errors.append("schedule must not be empty")
    if request.sink is not None and not request.sink.strip():
        errors.append("sink must not be empty")
    if request.ce_overrides is not None:
        try:
            parse_overrides(request.ce_overrides)
        except MalformedInputError as exc:
            errors.extend(exc.errors)
    if errors:
        raise MalformedInputError(errors)


class PingSourceUpdater:
    """Applies an ``UpdateRequest`` to one PingSource.

    One read, an in-memory rebuild, one write.  Only fields the request
    supplies are dispatched to the builder; everything else is carried over
    from the stored source.  Store and resolver errors propagate unchanged
    and nothing is retried.  *timeout* (seconds) is forwarded to every
    store and resolver call.
    """

    def __init__(
        self,
        store: PingSourceStore,
        resolver: SinkResolver,
        *,
        timeout: float | None = None,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._timeout = timeout

    @property
    def namespace(self) -> str:
        return self._store.namespace

    def _fetch(self, name: str) -> PingSource:
        source = self._store.get(name, timeout=self._timeout)
        if source.is_deleting:
            raise AlreadyDeletingError(name)
        return source

    def _dispatch(
        self, builder: PingSourceBuilder, existing: PingSource, request: UpdateRequest
    ) -> None:
        if request.schedule is not None:
            logger.debug("Setting schedule to %r", request.schedule)
            builder.schedule(request.schedule)

        if request.data is not None:
            logger.debug("Setting text payload")
            builder.data_payload(request.data, encoding="text")
        elif request.data_base64 is not None:
            logger.debug("Setting base64 payload")
            builder.data_payload(request.data_base64, encoding="base64")

        if request.sink is not None:
            destination = self._resolver.resolve(
                request.sink, self.namespace, timeout=self._timeout
            )
            logger.debug("Resolved sink %r to %s", request.sink, destination.describe())
            builder.sink(destination)

        if request.ce_overrides is not None:
            requested = parse_overrides(request.ce_overrides)
            _, removed = split_removals(requested)
            merged = merge_overrides(existing.ce_overrides, requested)
            logger.debug("Merged %d override(s), removing %s", len(requested), removed)
            builder.ce_overrides(merged, removed)

    def plan(self, name: str, request: UpdateRequest) -> UpdatePlan:
        """Validate, fetch and rebuild without writing anything."""
        validate_request(request)
        logger.debug("Updating %s/%s with %s", self.namespace, name, request.supplied_fields())

        existing = self._fetch(name)
        builder = PingSourceBuilder(existing)
        self._dispatch(builder, existing, request)
        planned = builder.build()

        return UpdatePlan(
            prior=existing,
            planned=planned,
            changes=diff_sources(existing, planned),
            removed_overrides=builder.removed_overrides,
        )

    def update(self, name: str, request: UpdateRequest, *, dry_run: bool = False) -> UpdateResult:
        """Apply *request* to the source called *name*.

        With *dry_run* the rebuilt source is returned but not written.
        """
        plan = self.plan(name, request)
        changed = ", ".join(plan.changed_fields) or "none"

        if dry_run:
            logger.info("Dry run for %s, changed fields: %s", plan.planned.address, changed)
            return UpdateResult(
                name=name,
                namespace=self.namespace,
                source=plan.planned,
                changes=plan.changes,
                dry_run=True,
            )

        stored = self._store.update(plan.planned, timeout=self._timeout)
        logger.info("Updated ping source %s, changed fields: %s", plan.planned.address, changed)
        return UpdateResult(
            name=name,
            namespace=self.namespace,
            source=stored,
            changes=plan.changes,
        )


def update_ping_source(
    store: PingSourceStore,
    resolver: SinkResolver,
    name: str,
    request: UpdateRequest,
    *,
    timeout: float | None = None,
    dry_run: bool = False,
) -> UpdateResult:
    """Convenience wrapper around ``PingSourceUpdater.update``."""
    updater = PingSourceUpdater(store, resolver, timeout=timeout)
    return updater.update(name, request, dry_run=dry_run)
