"""Shared test fixtures for shared-info."""

from pathlib import Path

import pytest

from shared_info.config import Config
from shared_info.logging import configure

APP_MAPS = """\
00400000-00452000 r-xp 00000000 08:01 123456 /usr/bin/app
7f0000000000-7f0000020000 r-xp 00000000 08:01 234567 /usr/lib/libc.so.6
7f0000020000-7f0000021000 rw-p 00000000 00:00 0 [heap]
"""


def write_maps(proc_root: Path, pid: int, content: str) -> Path:
    """Create <proc_root>/<pid>/maps with the given content."""
    pid_dir = proc_root / str(pid)
    pid_dir.mkdir(parents=True, exist_ok=True)
    maps = pid_dir / "maps"
    maps.write_text(content)
    return maps


def maps_line(path: str = "", start: int = 0x7F0000000000, perms: str = "r-xp") -> str:
    """Build one maps line mapping path (anonymous if empty)."""
    inode = "0" if not path or path.startswith("[") else "4242"
    dev = "00:00" if inode == "0" else "08:01"
    line = f"{start:x}-{start + 0x1000:x} {perms} 00000000 {dev} {inode}"
    return f"{line} {path}" if path else line


def identity(path: str) -> str:
    """Resolver that leaves paths alone."""
    return path


@pytest.fixture
def proc_root(tmp_path: Path) -> Path:
    """An empty fake procfs root."""
    root = tmp_path / "proc"
    root.mkdir()
    return root


@pytest.fixture
def libdir(tmp_path: Path) -> Path:
    """A directory holding real library files and symlinks to them.

    libfoo.so.1.2.3   real file
    libfoo.so.1    -> libfoo.so.1.2.3
    libfoo.so      -> libfoo.so.1
    libbar.so         real file
    """
    lib = tmp_path / "lib"
    lib.mkdir()
    (lib / "libfoo.so.1.2.3").write_bytes(b"\x7fELF")
    (lib / "libfoo.so.1").symlink_to("libfoo.so.1.2.3")
    (lib / "libfoo.so").symlink_to("libfoo.so.1")
    (lib / "libbar.so").write_bytes(b"\x7fELF")
    return lib


@pytest.fixture(autouse=True)
def quiet_structlog() -> None:
    """Route structlog through stdlib with no file handler, so events are dropped."""
    configure(Config())
