from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

# (line, block, branch, taken); taken may be "-"
BranchSpec = tuple[int, int, int, int | str]


def lcov_record(
    file: str,
    *,
    lines: Mapping[int, int] | None = None,
    functions: Mapping[str, tuple[int, int]] | None = None,
    branches: Iterable[BranchSpec] = (),
    totals: Mapping[str, int] | None = None,
    title: str | None = None,
) -> str:
    """Return one LCOV record; totals are derived from details unless overridden."""
    lines = dict(lines or {})
    functions = dict(functions or {})
    branches = list(branches)

    out: list[str] = []
    if title is not None:
        out.append(f"TN:{title}")
    out.append(f"SF:{file}")
    out.extend(f"FN:{line},{name}" for name, (line, _hits) in functions.items())
    out.extend(f"FNDA:{hits},{name}" for name, (_line, hits) in functions.items())
    counts: dict[str, int] = {
        "FNF": len(functions),
        "FNH": sum(1 for _line, hits in functions.values() if hits),
    }
    out.extend(f"DA:{line},{hits}" for line, hits in lines.items())
    counts |= {"LF": len(lines), "LH": sum(1 for hits in lines.values() if hits)}
    out.extend(f"BRDA:{line},{block},{branch},{taken}" for line, block, branch, taken in branches)
    counts |= {
        "BRF": len(branches),
        "BRH": sum(1 for *_rest, taken in branches if taken not in {0, "-"}),
    }
    counts |= dict(totals or {})
    out.extend(f"{tag}:{counts[tag]}" for tag in ("FNF", "FNH", "LF", "LH", "BRF", "BRH"))
    out.append("end_of_record")
    return "\n".join(out) + "\n"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Click CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def lcov_file(tmp_path: Path) -> Callable[..., Path]:
    def write(*records: str, filename: str = "lcov.info") -> Path:
        path = tmp_path / filename
        path.write_text("".join(records), encoding="utf-8")
        return path

    return write


@pytest.fixture
def ignore_file(tmp_path: Path) -> Callable[..., Path]:
    def write(data: Any, *, filename: str = "coverage.ignore.json") -> Path:
        import json

        path = tmp_path / filename
        path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
        return path

    return write
