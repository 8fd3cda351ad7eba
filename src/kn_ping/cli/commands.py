"""CLI command implementations."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from kn_ping.cli import app
from kn_ping.cli.errors import handle_error

if TYPE_CHECKING:
    from collections.abc import Callable

    from kn_ping.engine.types import UpdateRequest, UpdateResult

DEFAULT_CONFIG = Path("kn-ping.yaml")

ConfigPath = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help=f"Path to the configuration file (default: {DEFAULT_CONFIG}, if present).",
    ),
]

Namespace = Annotated[
    str | None,
    typer.Option("--namespace", "-n", help="Namespace of the ping source."),
]

NoColor = Annotated[
    bool,
    typer.Option("--no-color", help="Disable colored output."),
]


class Encoding(str, Enum):
    TEXT = "text"
    BASE64 = "base64"


def _use_color(no_color: bool) -> bool:
    """Determine whether to use color output."""
    return not (no_color or os.environ.get("NO_COLOR"))


def _build_request(
    *,
    schedule: str | None,
    data: str | None,
    encoding: Encoding | None,
    sink: str | None,
    ce_overrides: list[str] | None,
) -> UpdateRequest:
    """Turn CLI options into an ``UpdateRequest``; ``None`` means not given."""
    from kn_ping.engine.errors import MalformedInputError
    from kn_ping.engine.types import UpdateRequest

    if encoding is not None and data is None:
        raise MalformedInputError(["--encoding requires --data"])
    base64_payload = encoding == Encoding.BASE64
    return UpdateRequest(
        schedule=schedule,
        data=None if base64_payload else data,
        data_base64=data if base64_payload else None,
        sink=sink,
        ce_overrides=ce_overrides or None,
    )


def _with_status(message: str, fn: Callable[[], UpdateResult], *, color: bool) -> UpdateResult:
    """Run *fn* behind a Rich spinner on stderr."""
    from rich.console import Console

    console = Console(stderr=True, no_color=not color)
    with console.status(message):
        return fn()


@app.command()
def update(
    name: Annotated[str, typer.Argument(help="Name of the ping source.")],
    schedule: Annotated[
        str | None,
        typer.Option("--schedule", help='Cron schedule, e.g. "*/2 * * * *".'),
    ] = None,
    data: Annotated[
        str | None,
        typer.Option("--data", "-d", help="Payload sent with every event."),
    ] = None,
    encoding: Annotated[
        Encoding | None,
        typer.Option("--encoding", "-e", help="Encoding of --data (default: text)."),
    ] = None,
    sink: Annotated[
        str | None,
        typer.Option(
            "--sink",
            "-s",
            help="Addressable sink, e.g. ksvc:name, broker:name, svc:name or a URL.",
        ),
    ] = None,
    ce_overrides: Annotated[
        list[str] | None,
        typer.Option(
            "--ce-override",
            help="CloudEvent override KEY=VALUE; repeat for more. Use KEY- to remove.",
        ),
    ] = None,
    namespace: Namespace = None,
    config: ConfigPath = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", min=0.0, help="Per-request timeout in seconds."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would change without writing."),
    ] = False,
    no_color: NoColor = False,
) -> None:
    """Update a ping source.

    Only the options given are changed; everything else is left as is.
    """
    from kn_ping.cli.formatting import format_changes, format_update_summary
    from kn_ping.config import load
    from kn_ping.config import update as update_fn

    color = _use_color(no_color)
    try:
        request = _build_request(
            schedule=schedule,
            data=data,
            encoding=encoding,
            sink=sink,
            ce_overrides=ce_overrides,
        )
        cfg = load(config or DEFAULT_CONFIG, required=config is not None)
        result = _with_status(
            f"Updating ping source {name}...",
            lambda: update_fn(
                cfg,
                name,
                request,
                namespace=namespace,
                timeout=timeout,
                dry_run=dry_run,
            ),
            color=color,
        )
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    if dry_run:
        typer.echo(format_changes(f"{result.namespace}/{result.name}", result.changes, color=color))
        typer.echo()
    typer.echo(format_update_summary(result, color=color))
