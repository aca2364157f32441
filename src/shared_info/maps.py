"""Parser and scanner for /proc/<pid>/maps.

Each line of a maps file describes one mapped address range:

    00400000-00452000 r-xp 00000000 08:01 123456     /usr/bin/app
    7f0000020000-7f0000021000 rw-p 00000000 00:00 0  [heap]
    7f0000021000-7f0000022000 rw-p 00000000 00:00 0

Only the trailing path is used. Paths containing ".so" are shared objects;
the first other real path (not a bracketed pseudo-path like "[heap]") is
taken as the process's display name, normally the executable itself.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import partial
from pathlib import Path

import structlog

from shared_info.procfs import DEFAULT_PROC_ROOT, maps_path
from shared_info.symlinks import MAX_SYMLINK_DEPTH, resolve_symlink

log = structlog.get_logger()

LIBRARY_MARKER = ".so"

_ADDR_RANGE_RE = re.compile(r"^[0-9a-fA-F]+-[0-9a-fA-F]+$")
_PERMS_RE = re.compile(r"^[r-][w-][x-][ps]$")
_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")
_DEV_RE = re.compile(r"^[0-9a-fA-F]+:[0-9a-fA-F]+$")
_INODE_RE = re.compile(r"^[0-9]+$")

# Number of structural fields preceding the optional path
_FIXED_FIELDS = 5


class MapsUnavailable(Exception):
    """Raised when a process's maps file cannot be opened or read."""

    def __init__(self, pid: int, reason: str) -> None:
        super().__init__(f"PID {pid}: {reason}")
        self.pid = pid
        self.reason = reason


@dataclass(frozen=True)
class MapsRecord:
    """The parts of a maps line the scanner cares about."""

    path: str

    @property
    def is_library(self) -> bool:
        return LIBRARY_MARKER in self.path

    @property
    def is_name_candidate(self) -> bool:
        """True for real paths that are not libraries and not "[heap]"-style."""
        return bool(self.path) and not self.is_library and not self.path.startswith("[")


@dataclass(frozen=True)
class ScanResult:
    """Everything learned from one process's maps file."""

    pid: int
    objects: frozenset[str]
    name: str | None = None


def parse_maps_line(line: str) -> MapsRecord | None:
    """Parse a single maps line, or return None if it is malformed.

    The path is everything after the inode field, so paths containing
    spaces are kept intact. Anonymous mappings yield an empty path.
    """
    fields = line.split(None, _FIXED_FIELDS)
    if len(fields) < _FIXED_FIELDS:
        return None

    addr, perms, offset, dev, inode = fields[:_FIXED_FIELDS]
    if not (
        _ADDR_RANGE_RE.match(addr)
        and _PERMS_RE.match(perms)
        and _HEX_RE.match(offset)
        and _DEV_RE.match(dev)
        and _INODE_RE.match(inode)
    ):
        return None

    path = fields[_FIXED_FIELDS].strip() if len(fields) > _FIXED_FIELDS else ""
    return MapsRecord(path=path)


def scan_maps_lines(
    pid: int,
    lines: Iterable[str],
    resolve: Callable[[str], str] = resolve_symlink,
) -> ScanResult:
    """Fold maps lines into a ScanResult.

    Library paths are canonicalized with resolve before being collected, so
    two symlinks to the same file count once. Only the first name candidate
    becomes the display name.
    """
    objects: set[str] = set()
    name: str | None = None
    malformed = 0

    for line in lines:
        record = parse_maps_line(line)
        if record is None:
            if line.strip():
                malformed += 1
            continue
        if record.is_library:
            objects.add(resolve(record.path))
        elif name is None and record.is_name_candidate:
            name = record.path

    if malformed:
        log.debug("maps_malformed_lines", pid=pid, count=malformed)

    return ScanResult(pid=pid, objects=frozenset(objects), name=name)


def scan_process(
    pid: int,
    proc_root: Path | str = DEFAULT_PROC_ROOT,
    max_depth: int = MAX_SYMLINK_DEPTH,
) -> ScanResult:
    """Scan one process's maps file.

    Raises:
        MapsUnavailable: If the file cannot be opened or read, e.g. the
            process exited or access was denied.
    """
    path = maps_path(pid, proc_root)
    resolve = partial(resolve_symlink, max_depth=max_depth)
    try:
        with open(path, encoding="utf-8", errors="surrogateescape") as f:
            result = scan_maps_lines(pid, f, resolve)
    except OSError as e:
        raise MapsUnavailable(pid, f"cannot read {path}: {e.strerror or e}") from e

    log.debug("maps_scanned", pid=pid, objects=len(result.objects), name=result.name)
    return result
