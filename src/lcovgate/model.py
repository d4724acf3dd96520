"""Typed records for parsed LCOV tracefiles."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class LineDetail:
    """One ``DA`` record: an instrumented line and its execution count."""

    line: int
    hit: int

    def is_missed(self) -> bool:
        return self.hit == 0

    def to_dict(self) -> dict[str, object]:
        return {"line": self.line, "hit": self.hit}


@dataclass(frozen=True, slots=True)
class FunctionDetail:
    """One ``FN`` record, with the count from its matching ``FNDA`` record.

    ``hit`` stays ``None`` when the tracefile has no ``FNDA`` for the function.
    """

    name: str
    line: int
    hit: int | None = None

    def is_missed(self) -> bool:
        return self.hit == 0

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {"name": self.name, "line": self.line}
        if self.hit is not None:
            out["hit"] = self.hit
        return out


@dataclass(frozen=True, slots=True)
class BranchDetail:
    """One ``BRDA`` record. A ``-`` taken count is stored as ``0``."""

    line: int
    block: int
    branch: int
    taken: int

    def is_missed(self) -> bool:
        return self.taken == 0

    def to_dict(self) -> dict[str, object]:
        return {"line": self.line, "block": self.block, "branch": self.branch, "taken": self.taken}


DetailEntry: TypeAlias = LineDetail | FunctionDetail | BranchDetail


@dataclass(frozen=True, slots=True)
class CategoryStat:
    """Hit/found totals for one coverage category plus its per-location details."""

    hit: int = 0
    found: int = 0
    details: tuple[DetailEntry, ...] = ()

    def missed(self) -> list[DetailEntry]:
        return [d for d in self.details if d.is_missed()]


@dataclass(frozen=True, slots=True)
class FileRecord:
    file: str
    branches: CategoryStat = field(default_factory=CategoryStat)
    functions: CategoryStat = field(default_factory=CategoryStat)
    lines: CategoryStat = field(default_factory=CategoryStat)
    title: str | None = None


CoverageReport: TypeAlias = list[FileRecord]


__all__ = [
    "BranchDetail",
    "CategoryStat",
    "CoverageReport",
    "DetailEntry",
    "FileRecord",
    "FunctionDetail",
    "LineDetail",
]
