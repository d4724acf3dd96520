from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.table import Table

from lcovgate.config import RESERVED_PREFIXES
from lcovgate.enforce import Category, is_reserved, matching_ignore

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from lcovgate.config import IgnoreList
    from lcovgate.model import CategoryStat, FileRecord


def _cell(stat: CategoryStat, *, color: bool) -> str:
    if not stat.found:
        return "n/a"
    pct = round(100.0 * stat.hit / stat.found)
    text = f"{stat.hit}/{stat.found} ({pct}%)"
    if not color:
        return text
    style = "green" if stat.hit >= stat.found else "red"
    return f"[{style}]{text}[/{style}]"


def render_summary(
    report: Iterable[FileRecord],
    ignore: IgnoreList = (),
    *,
    prefixes: Sequence[str] = RESERVED_PREFIXES,
    color: bool = False,
) -> str:
    """Render a Rich table of the files the gate actually checked.

    Reserved and ignored paths are left out.
    """
    table = Table(title="Coverage", box=box.SIMPLE_HEAVY, header_style="bold", expand=True)
    table.add_column("File", overflow="fold")
    for category in Category:
        table.add_column(category.value, justify="right")

    for record in report:
        if is_reserved(record.file, prefixes) or matching_ignore(record.file, ignore) is not None:
            continue
        table.add_row(
            record.file,
            _cell(record.branches, color=color),
            _cell(record.functions, color=color),
            _cell(record.lines, color=color),
        )

    buf = StringIO()
    console = Console(
        file=buf,
        force_terminal=color,
        no_color=not color,
        color_system="standard" if color else None,
        width=100,
    )
    console.print(table)
    return buf.getvalue().rstrip()


__all__ = ["render_summary"]
