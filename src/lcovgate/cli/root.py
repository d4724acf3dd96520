"""Definition of the command line interface."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated, NoReturn

import click.utils as click_utils
import typer
from typer.main import get_command

from lcovgate import __version__, logger
from lcovgate.cli._shared import resolve_use_color
from lcovgate.cli.exit_codes import (
    EXIT_CONFIG,
    EXIT_DATAERR,
    EXIT_GENERIC,
    EXIT_NOINPUT,
    EXIT_OK,
    EXIT_THRESHOLD,
)
from lcovgate.config import DEFAULT_REPORT, LOG_FORMAT, RESERVED_PREFIXES, load_ignore_list
from lcovgate.errors import (
    CoverageReportNotFoundError,
    CoverageThresholdViolation,
    IgnoreConfigError,
    InvalidCoverageReportError,
)
from lcovgate.run import check_coverage
from lcovgate.summary import render_summary

_BOOL_FALSE = False


def _configure_runtime(*, quiet: bool, verbose: bool, debug: bool) -> None:
    """Configure logging based on *quiet*/*verbose*."""
    level = logging.ERROR if quiet else (logging.DEBUG if verbose else logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if debug:
        logger.debug("debug mode active")


def _version_callback(value: bool) -> None:  # noqa: FBT001
    if value:
        typer.echo(f"lcovgate {__version__}")
        raise typer.Exit(code=EXIT_OK)


def _fail(message: str, code: int, exc: BaseException, *, debug: bool) -> NoReturn:
    typer.echo(f"ERROR: {message}", err=True)
    if debug:
        raise exc
    raise typer.Exit(code=code) from exc


def _color_allowed() -> bool:
    try:
        is_tty = bool(getattr(sys.stdout, "isatty", lambda: False)())
    except OSError:
        return False
    return is_tty and not click_utils.should_strip_ansi(sys.stdout)


def gate_cmd(
    report: Annotated[
        Path,
        typer.Argument(help="LCOV tracefile to check."),
    ] = Path(DEFAULT_REPORT),
    ignore_file: Annotated[
        Path | None,
        typer.Option(
            "--ignore-file",
            help="JSON array of path substrings exempt from checks [default: coverage.ignore.json if present].",
        ),
    ] = None,
    skip_prefix: Annotated[
        list[str] | None,
        typer.Option(
            "--skip-prefix",
            help="Path prefix that is never checked or reported (repeatable) [default: script, test].",
        ),
    ] = None,
    summary: Annotated[
        bool,
        typer.Option("--summary/--no-summary", help="Print a per-file coverage table after a passing run."),
    ] = _BOOL_FALSE,
    color: Annotated[
        bool,
        typer.Option("--color", help="Force color in the summary table"),
    ] = _BOOL_FALSE,
    no_color: Annotated[
        bool,
        typer.Option("--no-color", help="Disable color in the summary table"),
    ] = _BOOL_FALSE,
    quiet: Annotated[
        bool,
        typer.Option("-q", "--quiet", help="Suppress INFO logs, emit only errors"),
    ] = _BOOL_FALSE,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Emit diagnostic logging"),
    ] = _BOOL_FALSE,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Show full tracebacks for errors"),
    ] = _BOOL_FALSE,
    version: Annotated[  # noqa: ARG001
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version and exit"),
    ] = _BOOL_FALSE,
) -> None:
    """Fail unless every checked file in an LCOV report has full branch, function and line coverage."""
    _configure_runtime(quiet=quiet, verbose=verbose, debug=debug)
    prefixes = tuple(skip_prefix) if skip_prefix else RESERVED_PREFIXES

    try:
        ignore = load_ignore_list(ignore_file)
        records = check_coverage(report, ignore=ignore, prefixes=prefixes, emit=typer.echo)
    except CoverageThresholdViolation as exc:
        _fail(str(exc), EXIT_THRESHOLD, exc, debug=debug)
    except IgnoreConfigError as exc:
        _fail(str(exc), EXIT_CONFIG, exc, debug=debug)
    except CoverageReportNotFoundError as exc:
        _fail(str(exc), EXIT_NOINPUT, exc, debug=debug)
    except InvalidCoverageReportError as exc:
        _fail(f"failed to parse coverage report: {exc}", EXIT_DATAERR, exc, debug=debug)
    except UnicodeDecodeError as exc:
        _fail(f"failed to parse coverage report: {report}: {exc}", EXIT_DATAERR, exc, debug=debug)
    except OSError as exc:
        _fail(f"failed to read coverage report: {exc}", EXIT_NOINPUT, exc, debug=debug)
    except Exception as exc:
        logger.exception("unexpected failure")
        _fail(str(exc), EXIT_GENERIC, exc, debug=debug)

    if summary:
        use_color = resolve_use_color(color=color, no_color=no_color, color_allowed=_color_allowed())
        typer.echo(render_summary(records, ignore, prefixes=prefixes, color=use_color))
    raise typer.Exit(code=EXIT_OK)


def create_app() -> typer.Typer:
    app = typer.Typer(
        help="Full-coverage gate for LCOV tracefiles.",
        add_completion=False,
        pretty_exceptions_enable=False,
    )
    app.command()(gate_cmd)
    return app


def main() -> None:
    app = create_app()
    get_command(app)()


# Click-compatible object for tooling that imports it
cli = get_command(create_app())

__all__ = ["cli", "create_app", "main"]
