"""Tests for report renderers."""

import io
import json

import pytest
from rich.console import Console

from shared_info.render import (
    json_objects,
    json_processes,
    object_table,
    plain_objects,
    plain_processes,
    process_table,
    render,
)
from shared_info.session import ObjectRow, ProcessRow

PROCESS_ROWS = [
    ProcessRow(pid=4, name="/bin/a", objects=("/lib/libc.so.6", "/lib/libm.so.6")),
    ProcessRow(pid=12, name=None, objects=("/lib/libc.so.6",)),
]

OBJECT_ROWS = [
    ObjectRow(path="/lib/libc.so.6", processes=((4, "/bin/a"), (12, None))),
    ObjectRow(path="/lib/libm.so.6", processes=((4, "/bin/a"),)),
]


def make_console(width: int = 120) -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=width, color_system=None, highlight=False), buf


class TestTables:
    """Tests for the rich table builders."""

    def test_process_table_columns(self) -> None:
        table = process_table(PROCESS_ROWS)
        assert [c.header for c in table.columns] == ["PID", "Process Name", "Shared Objects"]
        assert table.row_count == 2

    def test_object_table_columns(self) -> None:
        table = object_table(OBJECT_ROWS)
        assert [c.header for c in table.columns] == ["Shared Object", "Processes"]
        assert table.row_count == 2

    def test_process_table_output(self) -> None:
        console, buf = make_console()
        console.print(process_table(PROCESS_ROWS))
        out = buf.getvalue()
        assert "/lib/libm.so.6" in out
        assert "/bin/a" in out
        assert "?" in out

    def test_object_table_labels_processes(self) -> None:
        console, buf = make_console()
        console.print(object_table(OBJECT_ROWS))
        out = buf.getvalue()
        assert "/bin/a (4)" in out
        assert "? (12)" in out

    @pytest.mark.parametrize("path", ["/opt/[/x]/libq.so", "/opt/[red]x/libq.so"])
    def test_brackets_in_paths_printed_literally(self, path: str) -> None:
        """Brackets in paths and names are not treated as rich markup."""
        console, buf = make_console()
        console.print(process_table([ProcessRow(pid=1, name="/bin/[b]x", objects=(path,))]))
        console.print(object_table([ObjectRow(path=path, processes=((1, "/bin/[b]x"),))]))
        out = buf.getvalue()
        assert out.count(path) == 2
        assert "/bin/[b]x (1)" in out

    def test_narrow_console_folds_long_paths(self) -> None:
        """Long paths wrap inside the table instead of overflowing."""
        long_path = "/opt/" + "x" * 150 + "/libwide.so"
        rows = [ProcessRow(pid=1, name="/bin/w", objects=(long_path,))]
        console, buf = make_console(width=60)
        console.print(process_table(rows))
        lines = buf.getvalue().splitlines()
        assert lines
        assert all(len(line) <= 60 for line in lines)


class TestPlain:
    """Tests for plain-text rendering."""

    def test_by_process(self) -> None:
        assert plain_processes(PROCESS_ROWS) == (
            "4 /bin/a\n  /lib/libc.so.6\n  /lib/libm.so.6\n12 ?\n  /lib/libc.so.6"
        )

    def test_by_object(self) -> None:
        assert plain_objects(OBJECT_ROWS) == (
            "/lib/libc.so.6\n  /bin/a (4)\n  ? (12)\n/lib/libm.so.6\n  /bin/a (4)"
        )

    def test_wrap_width_applies_to_entries(self) -> None:
        rows = [ProcessRow(pid=1, name="/b", objects=("/lib/libc.so.6",))]
        assert plain_processes(rows, wrap_width=8) == "1 /b\n  /lib/lib\n  c.so.6"

    def test_empty(self) -> None:
        assert plain_processes([]) == ""
        assert plain_objects([]) == ""


class TestJson:
    """Tests for JSON rendering."""

    def test_by_process(self) -> None:
        data = json.loads(json_processes(PROCESS_ROWS))
        assert data == {
            "processes": [
                {"pid": 4, "name": "/bin/a", "objects": ["/lib/libc.so.6", "/lib/libm.so.6"]},
                {"pid": 12, "name": None, "objects": ["/lib/libc.so.6"]},
            ]
        }

    def test_by_object(self) -> None:
        data = json.loads(json_objects(OBJECT_ROWS))
        assert data["objects"][0] == {
            "path": "/lib/libc.so.6",
            "processes": [{"pid": 4, "name": "/bin/a"}, {"pid": 12, "name": None}],
        }


class TestRender:
    """Tests for the render() dispatcher."""

    def test_json_to_console(self) -> None:
        console, buf = make_console()
        render(PROCESS_ROWS, by_object=False, fmt="json", console=console)
        assert json.loads(buf.getvalue())["processes"][1]["pid"] == 12

    def test_plain_to_console(self) -> None:
        console, buf = make_console()
        render(OBJECT_ROWS, by_object=True, fmt="plain", console=console)
        assert buf.getvalue().startswith("/lib/libc.so.6\n  /bin/a (4)\n")

    def test_plain_empty_prints_nothing(self) -> None:
        console, buf = make_console()
        render([], by_object=True, fmt="plain", console=console)
        assert buf.getvalue() == ""

    def test_table_to_console(self) -> None:
        console, buf = make_console()
        render(OBJECT_ROWS, by_object=True, console=console)
        assert "Shared Object" in buf.getvalue()

    def test_unknown_format(self) -> None:
        console, _ = make_console()
        with pytest.raises(ValueError, match="Unknown output format"):
            render(PROCESS_ROWS, by_object=False, fmt="xml", console=console)
