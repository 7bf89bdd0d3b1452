"""Cyclopts CLI entry point for safecalls diagnostics."""

from __future__ import annotations

import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING, Annotated

import structlog
from cyclopts import App, Parameter

from safecalls import __version__
from safecalls.cli.output import OutputFormat
from safecalls.cli.output import emit as emit_output
from safecalls.lib.diag import doctor, list_operations
from safecalls.lib.errors import ErrorKind

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = structlog.get_logger(__name__)

_OUTPUT_FORMAT: ContextVar[OutputFormat] = ContextVar("_OUTPUT_FORMAT", default="text")


def emit(payload: object) -> None:
    """Write command output using the current output format."""

    emit_output(payload, _OUTPUT_FORMAT.get())


def _extract_global_options(argv: Sequence[str]) -> tuple[list[str], bool, int]:
    json_mode = False
    verbosity = 0
    cleaned: list[str] = []
    for arg in argv:
        if arg == "--json":
            json_mode = True
            continue
        if arg == "--no-json":
            json_mode = False
            continue
        if arg in {"--verbose", "-v"}:
            verbosity += 1
            continue
        if arg.startswith("-v") and set(arg[1:]) == {"v"}:
            verbosity += len(arg) - 1
            continue
        cleaned.append(arg)
    return cleaned, json_mode, verbosity


def _parse_kind(kind: str | None) -> ErrorKind | None:
    if kind is None:
        return None
    normalized = kind.strip().lower()
    try:
        return ErrorKind(normalized)
    except ValueError:
        expected = ", ".join(member.value for member in ErrorKind)
        raise ValueError(f"Unknown call group '{kind}'. Expected one of: {expected}.") from None


app = App(
    name="safecalls",
    help="Inspect safecalls operations and platform support.\n\n"
    "Global flags: --json (JSON output), -v/--verbose (repeatable).",
    version=__version__,
)


@app.command(name="ops")
def ops(
    kind: Annotated[
        str | None,
        Parameter(name="--kind", help="Only list one call group (exec, pcntl, shmop, zip)."),
    ] = None,
) -> None:
    """List registered operations with their failure sentinels."""

    emit(list_operations(_parse_kind(kind)))


@app.command(name="doctor")
def doctor_cmd() -> None:
    """Check libc loading and which call groups work on this platform."""

    report = doctor()
    for warning in report.warnings:
        logger.warning("doctor check failed", detail=warning)
    emit(report)


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point used by `safecalls` and `python -m safecalls`."""

    from safecalls.lib.config.settings import get_config
    from safecalls.lib.logging import configure_from_config

    args = list(sys.argv[1:] if argv is None else argv)
    cleaned_args, json_mode, verbosity = _extract_global_options(args)

    try:
        config = get_config()
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from None
    configure_from_config(config, json_mode=json_mode or None, extra_verbosity=verbosity)

    token = _OUTPUT_FORMAT.set("json" if json_mode else "text")
    try:
        try:
            app(cleaned_args)
        except (ValueError, OSError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            raise SystemExit(1) from None
    finally:
        _OUTPUT_FORMAT.reset(token)
