"""kn-ping command line.

Log output goes to stderr so it never mixes with the change summary on
stdout.  Verbosity comes from ``KN_LOG`` when set, otherwise from the
number of ``-v`` flags: ``-v`` logs one line per write, ``-vv`` adds field
dispatch and sink resolution, and ``-vvv`` also turns on the kubernetes
client's HTTP log.
"""

from __future__ import annotations

import logging
import os
import sys

import typer

from kn_ping import __version__

app = typer.Typer(
    name="kn-ping",
    help="Selectively update Knative ping sources.",
    no_args_is_help=True,
    add_completion=False,
)

_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_LOG_ENV = "KN_LOG"
_VERBOSITY = {1: logging.INFO, 2: logging.DEBUG}
_WIRE_LOGGER = "kubernetes.client.rest"


def _version_callback(value: bool) -> None:
    if value:
        import kubernetes

        typer.echo(f"kn-ping {__version__} (kubernetes client {kubernetes.__version__})")
        raise typer.Exit


def _env_level() -> int | None:
    """Level named by ``KN_LOG``; unknown names fall back to INFO with a warning."""
    raw = os.environ.get(_LOG_ENV, "").strip()
    if not raw:
        return None
    level = logging.getLevelNamesMapping().get(raw.upper())
    if level is None:
        typer.echo(f"WARNING: ignoring {_LOG_ENV}={raw!r}, using INFO", err=True)
        return logging.INFO
    return level


def _configure_logging(verbose: int) -> None:
    level = _env_level()
    if level is None:
        if verbose <= 0:
            return
        level = _VERBOSITY[min(verbose, 2)]

    logging.basicConfig(level=logging.WARNING, format=_LOG_FORMAT, stream=sys.stderr, force=True)
    logging.getLogger("kn_ping").setLevel(level)
    if verbose >= 3:
        logging.getLogger(_WIRE_LOGGER).setLevel(logging.DEBUG)


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Print the kn-ping and kubernetes client versions.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help=f"Log to stderr (-v info, -vv debug, -vvv HTTP). {_LOG_ENV} takes precedence.",
    ),
) -> None:
    _ = version
    _configure_logging(verbose)


# Register commands after app is created to avoid circular imports.
from kn_ping.cli import commands as _commands  # noqa: E402, F401
