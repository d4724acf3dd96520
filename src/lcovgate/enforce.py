"""Full-coverage enforcement over parsed LCOV records.

Files are processed in report order and categories in the fixed order
Branch, Function, Line. The first category with ``hit < found`` stops
the scan; later files are never looked at.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING

from lcovgate import logger
from lcovgate.config import RESERVED_PREFIXES
from lcovgate.errors import CoverageThresholdViolation

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from lcovgate.config import IgnoreList
    from lcovgate.model import CategoryStat, DetailEntry, FileRecord

_FULL_PERCENT = 100.0
_EXPONENT_BELOW = 1e-6


class Category(StrEnum):
    BRANCH = "Branch"
    FUNCTION = "Function"
    LINE = "Line"


def _stat(record: FileRecord, category: Category) -> CategoryStat:
    if category is Category.BRANCH:
        return record.branches
    if category is Category.FUNCTION:
        return record.functions
    return record.lines


@dataclass(frozen=True, slots=True)
class Violation:
    """First incomplete category found by the scan."""

    file: str
    category: Category
    hit: int
    found: int
    missed: tuple[DetailEntry, ...]

    @property
    def percentage(self) -> float:
        # only built when hit < found, so found > 0
        return _FULL_PERCENT * self.hit / self.found

    def missed_json(self) -> str:
        return json.dumps([d.to_dict() for d in self.missed], separators=(",", ":"), ensure_ascii=False)

    def message(self) -> str:
        return (
            f"{self.category} coverage for {self.file} is at {format_percentage(self.percentage)}% \n"
            f" Missed hits:\n {self.missed_json()}"
        )


def format_percentage(value: float) -> str:
    """Render *value* the way JavaScript prints numbers.

    Integral values drop the fraction (``80``), values below ``1e-6`` use a short
    exponent (``1e-7``), everything else is positional with the shortest
    round-tripping digits (``0.00005``, ``66.66666666666667``).
    """
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if abs(value) < _EXPONENT_BELOW:
        mantissa, _, exponent = text.partition("e")
        return f"{mantissa}e{int(exponent)}"
    return format(Decimal(text), "f")


def check_category(record: FileRecord, category: Category) -> Violation | None:
    """Return a :class:`Violation` if *category* of *record* is not fully covered.

    A category with ``found == 0`` has nothing to cover and always passes.
    """
    stat = _stat(record, category)
    if stat.hit >= stat.found:
        return None
    return Violation(
        file=record.file,
        category=category,
        hit=stat.hit,
        found=stat.found,
        missed=tuple(stat.missed()),
    )


def is_reserved(path: str, prefixes: Sequence[str] = RESERVED_PREFIXES) -> bool:
    return any(path.startswith(p) for p in prefixes)


def matching_ignore(path: str, ignore: IgnoreList) -> str | None:
    """Return the first ignore substring contained in *path*, if any."""
    for pattern in ignore:
        if pattern in path:
            return pattern
    return None


def find_violation(
    report: Iterable[FileRecord],
    ignore: IgnoreList = (),
    *,
    prefixes: Sequence[str] = RESERVED_PREFIXES,
    emit: Callable[[str], None] = logger.info,
) -> Violation | None:
    """Scan *report* and return the first violation, or ``None`` if all pass.

    *emit* receives the ``Analyzing``/``Ignoring`` progress lines.
    """
    for record in report:
        if is_reserved(record.file, prefixes):
            logger.debug("skipping reserved path %s", record.file)
            continue

        emit(f"Analyzing coverage for {record.file}")

        pattern = matching_ignore(record.file, ignore)
        if pattern is not None:
            logger.debug("%s matches ignore pattern %r", record.file, pattern)
            emit(f"Ignoring coverage for {record.file}")
            continue

        for category in Category:
            violation = check_category(record, category)
            if violation is not None:
                return violation
    return None


def enforce(
    report: Iterable[FileRecord],
    ignore: IgnoreList = (),
    *,
    prefixes: Sequence[str] = RESERVED_PREFIXES,
    emit: Callable[[str], None] = logger.info,
) -> None:
    """Raise :class:`CoverageThresholdViolation` on the first incomplete category."""
    violation = find_violation(report, ignore, prefixes=prefixes, emit=emit)
    if violation is not None:
        raise CoverageThresholdViolation(violation)


__all__ = [
    "Category",
    "Violation",
    "check_category",
    "enforce",
    "find_violation",
    "format_percentage",
    "is_reserved",
    "matching_ignore",
]
