"""Update output rendering."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import typer

if TYPE_CHECKING:
    from collections.abc import Callable

    from kn_ping.engine.types import FieldChange, UpdateResult


def styler(color: bool) -> Callable[..., str]:
    """Return ``typer.style`` when *color* is True, otherwise a passthrough."""
    if color:
        return typer.style
    return lambda text, **_kw: text


def _align_values(items: dict[str, str]) -> list[tuple[str, str]]:
    """Right-pad keys so ``=`` signs align."""
    if not items:
        return []
    max_key = max(len(k) for k in items)
    return [(k.ljust(max_key), v) for k, v in items.items()]


def _format_value(value: Any) -> str:
    """Format a value for display in a diff block."""
    if isinstance(value, str):
        return f'"{value}"'
    if value is None:
        return "null"
    if isinstance(value, dict | list):
        return json.dumps(value, sort_keys=True)
    return str(value)


def format_changes(address: str, changes: list[FieldChange], *, color: bool = True) -> str:
    """Render field changes of one ping source as a diff block."""
    if not changes:
        return f"No changes. Ping source {address} is up-to-date."
    style = styler(color)
    rows = {c.field: f"{_format_value(c.before)} -> {_format_value(c.after)}" for c in changes}
    lines = [
        style(f"  # ping source {address} will be updated in-place", fg="yellow", bold=True),
        *[style(f"      ~ {k} = {v}", fg="yellow") for k, v in _align_values(rows)],
    ]
    return "\n".join(lines)


def format_update_summary(result: UpdateResult, *, color: bool = True) -> str:
    """Render the confirmation line for a finished (or dry-run) update."""
    style = styler(color)
    if result.dry_run:
        count = len(result.changes)
        return (
            f"Dry run: ping source '{result.name}' in namespace '{result.namespace}' "
            f"would change {count} field{'s' if count != 1 else ''}."
        )
    return style(
        f"Ping source '{result.name}' updated in namespace '{result.namespace}'.", fg="green"
    )
