"""Parse LCOV tracefiles into :class:`FileRecord` sequences."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import NoReturn

from lcovgate import logger
from lcovgate.errors import CoverageReportNotFoundError, InvalidCoverageReportError
from lcovgate.model import (
    BranchDetail,
    CategoryStat,
    CoverageReport,
    DetailEntry,
    FileRecord,
    FunctionDetail,
    LineDetail,
)

_END_OF_RECORD = "end_of_record"
_NOT_EVALUATED = "-"


@dataclass(slots=True)
class _Totals:
    hit: int = 0
    found: int = 0
    details: list[DetailEntry] = field(default_factory=list)

    def freeze(self) -> CategoryStat:
        return CategoryStat(hit=self.hit, found=self.found, details=tuple(self.details))


@dataclass(slots=True)
class _RecordBuilder:
    file: str
    title: str | None = None
    lines: _Totals = field(default_factory=_Totals)
    functions: _Totals = field(default_factory=_Totals)
    branches: _Totals = field(default_factory=_Totals)

    def set_function_hits(self, name: str, hits: int) -> None:
        # first function of that name still waiting for its count
        for idx, fn in enumerate(self.functions.details):
            if isinstance(fn, FunctionDetail) and fn.name == name and fn.hit is None:
                self.functions.details[idx] = FunctionDetail(name=fn.name, line=fn.line, hit=hits)
                return
        logger.debug("FNDA for unknown function %r in %s", name, self.file)

    def build(self) -> FileRecord:
        return FileRecord(
            file=self.file,
            title=self.title,
            branches=self.branches.freeze(),
            functions=self.functions.freeze(),
            lines=self.lines.freeze(),
        )


class _Parser:
    def __init__(self, source: str) -> None:
        self._source = source
        self._records: CoverageReport = []
        self._current: _RecordBuilder | None = None
        self._title: str | None = None
        self._lineno = 0

    def parse(self, text: str) -> CoverageReport:
        for self._lineno, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line:
                continue
            if line == _END_OF_RECORD:
                self._close()
                continue
            tag, sep, value = line.partition(":")
            if not sep:
                logger.debug("%s:%d: skipping unrecognised line %r", self._source, self._lineno, line)
                continue
            handler = getattr(self, f"_on_{tag.lower()}", None)
            if handler is None:
                logger.debug("%s:%d: skipping unknown tag %r", self._source, self._lineno, tag)
                continue
            handler(value.strip())

        if self._current is not None:
            logger.debug("%s: last record has no end_of_record", self._source)
            self._close()

        if not self._records:
            msg = f"{self._source}: no coverage records found"
            raise InvalidCoverageReportError(msg)
        return self._records

    # -- record boundaries ------------------------------------------------ #

    def _close(self) -> None:
        if self._current is not None:
            self._records.append(self._current.build())
        self._current = None
        self._title = None

    def _record(self, tag: str) -> _RecordBuilder:
        if self._current is None:
            self._fail(f"{tag} record outside of a source file section")
        return self._current

    def _fail(self, problem: str) -> NoReturn:
        msg = f"{self._source}:{self._lineno}: {problem}"
        raise InvalidCoverageReportError(msg)

    def _int(self, tag: str, raw: str) -> int:
        try:
            return int(raw)
        except ValueError:
            self._fail(f"invalid integer {raw!r} in {tag} record")

    def _fields(self, tag: str, value: str, count: int) -> list[str]:
        parts = value.split(",", count - 1)
        if len(parts) < count:
            self._fail(f"{tag} record needs {count} fields, got {value!r}")
        return parts

    # -- tag handlers ----------------------------------------------------- #

    def _on_tn(self, value: str) -> None:
        self._title = value or None

    def _on_sf(self, value: str) -> None:
        if self._current is not None:
            logger.debug("%s:%d: SF before end_of_record", self._source, self._lineno)
            self._records.append(self._current.build())
        self._current = _RecordBuilder(file=value, title=self._title)

    def _on_fn(self, value: str) -> None:
        start, rest = self._fields("FN", value, 2)
        # lcov 2.x writes FN:<start>,<end>,<name>
        end, sep, name = rest.partition(",")
        if not (sep and end.isdigit()):
            name = rest
        self._record("FN").functions.details.append(FunctionDetail(name=name, line=self._int("FN", start)))

    def _on_fnda(self, value: str) -> None:
        hits, name = self._fields("FNDA", value, 2)
        self._record("FNDA").set_function_hits(name, self._int("FNDA", hits))

    def _on_fnf(self, value: str) -> None:
        self._record("FNF").functions.found = self._int("FNF", value)

    def _on_fnh(self, value: str) -> None:
        self._record("FNH").functions.hit = self._int("FNH", value)

    def _on_da(self, value: str) -> None:
        # optional third field is a source checksum
        line, hits = self._fields("DA", value, 2)
        hits = hits.split(",", 1)[0]
        detail = LineDetail(line=self._int("DA", line), hit=self._int("DA", hits))
        self._record("DA").lines.details.append(detail)

    def _on_lf(self, value: str) -> None:
        self._record("LF").lines.found = self._int("LF", value)

    def _on_lh(self, value: str) -> None:
        self._record("LH").lines.hit = self._int("LH", value)

    def _on_brda(self, value: str) -> None:
        line, block, branch, taken = self._fields("BRDA", value, 4)
        detail = BranchDetail(
            line=self._int("BRDA", line),
            block=self._int("BRDA", block),
            branch=self._int("BRDA", branch),
            taken=0 if taken == _NOT_EVALUATED else self._int("BRDA", taken),
        )
        self._record("BRDA").branches.details.append(detail)

    def _on_brf(self, value: str) -> None:
        self._record("BRF").branches.found = self._int("BRF", value)

    def _on_brh(self, value: str) -> None:
        self._record("BRH").branches.hit = self._int("BRH", value)


def parse_lcov(text: str, *, source: str = "<string>") -> CoverageReport:
    """Parse LCOV tracefile *text* into one :class:`FileRecord` per ``SF`` section.

    Unknown tags are skipped. Raises :class:`InvalidCoverageReportError` for
    malformed numeric fields, data records outside an ``SF`` section, or a
    text containing no records at all.
    """
    return _Parser(source).parse(text)


def load_report(path: Path | str) -> CoverageReport:
    """Read and parse the LCOV tracefile at *path*."""
    p = Path(path)
    if not p.is_file():
        msg = f"coverage report not found: {p}"
        raise CoverageReportNotFoundError(msg)
    records = parse_lcov(p.read_text(encoding="utf-8"), source=str(p))
    logger.debug("parsed %d file record(s) from %s", len(records), p)
    return records


__all__ = ["load_report", "parse_lcov"]
