"""Central configuration and constants for ``lcovgate``."""

from __future__ import annotations

import json
from functools import cache
from importlib import resources
from pathlib import Path

from jsonschema import ValidationError, validate

from lcovgate import logger
from lcovgate.errors import IgnoreConfigError

# Tracefile read when no report path is given.
DEFAULT_REPORT = "lcov.info"

# Ignore list read when no --ignore-file is given.
DEFAULT_IGNORE_FILE = "coverage.ignore.json"

# Paths starting with these are build scripts and test sources; never checked.
RESERVED_PREFIXES: tuple[str, ...] = ("script", "test")

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

IgnoreList = tuple[str, ...]


@cache
def get_ignore_schema() -> dict[str, object]:
    """Load and cache the JSON schema for the ignore list."""
    text = resources.files("lcovgate.data").joinpath("ignore.schema.json").read_text(encoding="utf-8")
    return json.loads(text)


def load_ignore_list(path: Path | None = None) -> IgnoreList:
    """Return the ignore substrings stored in *path*.

    When *path* is ``None`` the default ``coverage.ignore.json`` in the
    working directory is used, and a missing default file yields an empty
    list. An explicitly requested file must exist.
    """
    explicit = path is not None
    target = path if path is not None else Path(DEFAULT_IGNORE_FILE)

    if not target.is_file():
        if explicit:
            msg = f"ignore file not found: {target}"
            raise IgnoreConfigError(msg)
        logger.debug("no ignore file at %s; checking every file", target)
        return ()

    try:
        text = target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"cannot read ignore file {target}: {exc}"
        raise IgnoreConfigError(msg) from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"ignore file {target} is not valid JSON: {exc}"
        raise IgnoreConfigError(msg) from exc

    try:
        validate(instance=data, schema=get_ignore_schema())
    except ValidationError as exc:
        msg = f"ignore file {target} must be a JSON array of non-empty strings: {exc.message}"
        raise IgnoreConfigError(msg) from exc

    logger.debug("loaded %d ignore pattern(s) from %s", len(data), target)
    return tuple(data)


__all__ = [
    "DEFAULT_IGNORE_FILE",
    "DEFAULT_REPORT",
    "LOG_FORMAT",
    "RESERVED_PREFIXES",
    "IgnoreList",
    "get_ignore_schema",
    "load_ignore_list",
]
