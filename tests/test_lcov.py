from __future__ import annotations

import textwrap
from typing import TYPE_CHECKING

import pytest

from lcovgate.errors import CoverageReportNotFoundError, InvalidCoverageReportError
from lcovgate.lcov import load_report, parse_lcov
from lcovgate.model import BranchDetail, CategoryStat, FunctionDetail, LineDetail
from tests.conftest import lcov_record

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


SAMPLE = textwrap.dedent(
    """\
    TN:unit
    SF:src/a.js
    FN:1,alpha
    FN:7,beta
    FNDA:3,alpha
    FNDA:0,beta
    FNF:2
    FNH:1
    DA:1,3
    DA:2,3
    DA:8,0
    LF:3
    LH:2
    BRDA:2,0,0,3
    BRDA:2,0,1,-
    BRF:2
    BRH:1
    end_of_record
    SF:src/b.js
    DA:1,1
    LF:1
    LH:1
    end_of_record
    """
)


def test_parse_lcov_reads_every_category() -> None:
    first, second = parse_lcov(SAMPLE)

    assert first.file == "src/a.js"
    assert first.title == "unit"
    assert first.functions == CategoryStat(
        hit=1,
        found=2,
        details=(
            FunctionDetail(name="alpha", line=1, hit=3),
            FunctionDetail(name="beta", line=7, hit=0),
        ),
    )
    assert first.lines == CategoryStat(
        hit=2,
        found=3,
        details=(LineDetail(line=1, hit=3), LineDetail(line=2, hit=3), LineDetail(line=8, hit=0)),
    )
    assert first.branches == CategoryStat(
        hit=1,
        found=2,
        details=(
            BranchDetail(line=2, block=0, branch=0, taken=3),
            BranchDetail(line=2, block=0, branch=1, taken=0),
        ),
    )

    assert second.file == "src/b.js"
    assert second.title is None
    assert second.branches == CategoryStat()
    assert second.functions == CategoryStat()


def test_parse_lcov_keeps_report_order() -> None:
    text = "".join(lcov_record(name, lines={1: 1}) for name in ("z.js", "a.js", "m.js"))
    assert [r.file for r in parse_lcov(text)] == ["z.js", "a.js", "m.js"]


def test_fnda_fills_first_unmatched_function_of_that_name() -> None:
    text = "SF:x.c\nFN:3,dup\nFN:9,dup\nFNDA:4,dup\nFNDA:0,dup\nFNDA:1,missing\nend_of_record\n"
    (record,) = parse_lcov(text)
    assert record.functions.details == (
        FunctionDetail(name="dup", line=3, hit=4),
        FunctionDetail(name="dup", line=9, hit=0),
    )


def test_function_without_fnda_has_no_hit_count() -> None:
    (record,) = parse_lcov("SF:x.c\nFN:3,lonely\nend_of_record\n")
    (detail,) = record.functions.details
    assert detail.hit is None
    assert detail.to_dict() == {"name": "lonely", "line": 3}
    assert record.functions.missed() == []


def test_lcov2_function_records_with_end_line() -> None:
    (record,) = parse_lcov("SF:x.c\nFN:3,12,main\nFNDA:1,main\nend_of_record\n")
    assert record.functions.details == (FunctionDetail(name="main", line=3, hit=1),)


def test_da_checksum_is_ignored() -> None:
    (record,) = parse_lcov("SF:x.c\nDA:5,0,abc123\nend_of_record\n")
    assert record.lines.details == (LineDetail(line=5, hit=0),)


def test_missing_end_of_record_and_crlf() -> None:
    (record,) = parse_lcov("SF:x.c\r\nDA:1,1\r\nLF:1\r\nLH:1\r\n")
    assert record.file == "x.c"
    assert record.lines.hit == record.lines.found == 1


def test_unknown_tags_are_skipped() -> None:
    (record,) = parse_lcov("VER:2.0\nSF:x.c\nXYZ:1\nnot a record\nLF:0\nend_of_record\n")
    assert record.file == "x.c"


@pytest.mark.parametrize(
    ("text", "pattern"),
    [
        ("", "no coverage records"),
        ("TN:only\n", "no coverage records"),
        ("DA:1,1\n", "outside of a source file"),
        ("SF:x.c\nLF:many\nend_of_record\n", "invalid integer 'many' in LF"),
        ("SF:x.c\nBRDA:1,0,0\nend_of_record\n", "BRDA record needs 4 fields"),
        ("SF:x.c\nDA:1,1\nDA:two,1\n", r":3: invalid integer"),
    ],
)
def test_parse_lcov_rejects_malformed_input(text: str, pattern: str) -> None:
    with pytest.raises(InvalidCoverageReportError, match=pattern):
        parse_lcov(text)


def test_load_report_from_disk(lcov_file: Callable[..., Path]) -> None:
    path = lcov_file(lcov_record("src/a.js", lines={1: 1, 2: 0}))
    (record,) = load_report(path)
    assert record.lines.hit == 1
    assert record.lines.found == 2


def test_load_report_missing_file(tmp_path: Path) -> None:
    with pytest.raises(CoverageReportNotFoundError, match="coverage report not found"):
        load_report(tmp_path / "lcov.info")


def test_load_report_names_source_in_errors(lcov_file: Callable[..., Path]) -> None:
    path = lcov_file("SF:a\nLH:x\n")
    with pytest.raises(InvalidCoverageReportError, match=r"lcov\.info:2:"):
        load_report(path)
