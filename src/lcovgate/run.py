from __future__ import annotations

from typing import TYPE_CHECKING

from lcovgate import logger
from lcovgate.config import DEFAULT_REPORT, RESERVED_PREFIXES, IgnoreList, load_ignore_list
from lcovgate.enforce import enforce
from lcovgate.lcov import load_report

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from lcovgate.model import CoverageReport


def check_coverage(
    report_path: Path | str = DEFAULT_REPORT,
    *,
    ignore_path: Path | None = None,
    ignore: IgnoreList | None = None,
    prefixes: Sequence[str] = RESERVED_PREFIXES,
    emit: Callable[[str], None] = logger.info,
) -> CoverageReport:
    """Load the ignore list and the LCOV report, then enforce full coverage.

    An explicit *ignore* tuple takes precedence over *ignore_path*. Returns the
    parsed report when every checked file is fully covered; every failure
    propagates as an :class:`~lcovgate.errors.LcovGateError` (or ``OSError``).
    """
    patterns = ignore if ignore is not None else load_ignore_list(ignore_path)
    report = load_report(report_path)
    enforce(report, patterns, prefixes=prefixes, emit=emit)
    return report


__all__ = ["check_coverage"]
