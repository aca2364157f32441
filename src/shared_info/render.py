"""Report renderers for the by-process and by-object views.

Renderers only see the row lists produced by ScanSession.by_process() and
ScanSession.by_object(), never the raw indexes. Paths and names are passed to
rich as Text so brackets in them are never read as markup.
"""

import json
from collections.abc import Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from shared_info.formatting import display_name, process_label, wrap_text
from shared_info.session import ObjectRow, ProcessRow

HEADER_STYLE = "bold blue"


def process_table(rows: Sequence[ProcessRow]) -> Table:
    """Build the by-process table (PID, name, shared objects)."""
    table = Table(box=box.DOUBLE_EDGE, header_style=HEADER_STYLE, show_lines=True)
    table.add_column("PID", justify="right", no_wrap=True)
    table.add_column("Process Name", overflow="fold", ratio=1)
    table.add_column("Shared Objects", overflow="fold", ratio=4)
    for row in rows:
        table.add_row(
            str(row.pid), Text(display_name(row.name)), Text("\n".join(row.objects))
        )
    return table


def object_table(rows: Sequence[ObjectRow]) -> Table:
    """Build the by-object table (shared object, processes)."""
    table = Table(box=box.DOUBLE_EDGE, header_style=HEADER_STYLE, show_lines=True)
    table.add_column("Shared Object", overflow="fold", ratio=1)
    table.add_column("Processes", overflow="fold", ratio=2)
    for row in rows:
        table.add_row(
            Text(row.path),
            Text("\n".join(process_label(pid, name) for pid, name in row.processes)),
        )
    return table


def plain_processes(rows: Sequence[ProcessRow], wrap_width: int = 0) -> str:
    """Render the by-process view as indented plain text."""
    lines = []
    for row in rows:
        lines.append(wrap_text(f"{row.pid} {display_name(row.name)}", wrap_width))
        lines.extend(_indent(wrap_text(path, wrap_width)) for path in row.objects)
    return "\n".join(lines)


def plain_objects(rows: Sequence[ObjectRow], wrap_width: int = 0) -> str:
    """Render the by-object view as indented plain text."""
    lines = []
    for row in rows:
        lines.append(wrap_text(row.path, wrap_width))
        lines.extend(
            _indent(wrap_text(process_label(pid, name), wrap_width))
            for pid, name in row.processes
        )
    return "\n".join(lines)


def _indent(text: str) -> str:
    return "\n".join(f"  {line}" for line in text.splitlines())


def json_processes(rows: Sequence[ProcessRow]) -> str:
    """Render the by-process view as JSON."""
    data = {
        "processes": [
            {"pid": row.pid, "name": row.name, "objects": list(row.objects)} for row in rows
        ]
    }
    return json.dumps(data, indent=2)


def json_objects(rows: Sequence[ObjectRow]) -> str:
    """Render the by-object view as JSON."""
    data = {
        "objects": [
            {
                "path": row.path,
                "processes": [{"pid": pid, "name": name} for pid, name in row.processes],
            }
            for row in rows
        ]
    }
    return json.dumps(data, indent=2)


def render(
    rows: Sequence[ProcessRow] | Sequence[ObjectRow],
    *,
    by_object: bool,
    fmt: str = "table",
    wrap_width: int = 0,
    console: Console | None = None,
) -> None:
    """Write a report to stdout (or the given console) in the chosen format.

    Tables fold long paths to fit the console's detected width.
    """
    console = console or Console(highlight=False)

    if fmt == "table":
        table = object_table(rows) if by_object else process_table(rows)  # type: ignore[arg-type]
        console.print(table)
        return

    if fmt == "json":
        text = json_objects(rows) if by_object else json_processes(rows)  # type: ignore[arg-type]
    elif fmt == "plain":
        if by_object:
            text = plain_objects(rows, wrap_width)  # type: ignore[arg-type]
        else:
            text = plain_processes(rows, wrap_width)  # type: ignore[arg-type]
    else:
        raise ValueError(f"Unknown output format: {fmt!r}")

    if text:
        console.out(text, highlight=False)
