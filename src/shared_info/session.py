"""Aggregation of per-process scan results into lookup indexes."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from shared_info import logging as console
from shared_info.maps import MapsUnavailable, ScanResult, scan_process
from shared_info.procfs import DEFAULT_PROC_ROOT
from shared_info.symlinks import MAX_SYMLINK_DEPTH

log = structlog.get_logger()


@dataclass(frozen=True)
class ProcessRow:
    """One process and the shared objects it maps."""

    pid: int
    name: str | None
    objects: tuple[str, ...]


@dataclass(frozen=True)
class ObjectRow:
    """One shared object and the processes mapping it, as (pid, name) pairs."""

    path: str
    processes: tuple[tuple[int, str | None], ...]


@dataclass
class ScanSession:
    """All state for one scan: both indexes, the name table and skipped pids.

    processes and objects are kept as exact inverses of each other. Only
    ingest() writes to them.
    """

    processes: dict[int, set[str]] = field(default_factory=dict)
    objects: dict[str, set[int]] = field(default_factory=dict)
    names: dict[int, str] = field(default_factory=dict)
    skipped: dict[int, str] = field(default_factory=dict)

    def ingest(self, result: ScanResult) -> None:
        """Merge one scan result. Re-ingesting the same result is a no-op."""
        pid = result.pid
        for path in result.objects:
            self.processes.setdefault(pid, set()).add(path)
            self.objects.setdefault(path, set()).add(pid)
        if result.name is not None and pid not in self.names:
            self.names[pid] = result.name

    def skip(self, pid: int, reason: str) -> None:
        """Record a process that could not be scanned."""
        self.skipped[pid] = reason

    def by_process(self) -> list[ProcessRow]:
        """Processes in pid order, each with its sorted shared objects."""
        return [
            ProcessRow(pid=pid, name=self.names.get(pid), objects=tuple(sorted(paths)))
            for pid, paths in sorted(self.processes.items())
        ]

    def by_object(self) -> list[ObjectRow]:
        """Shared objects in path order, each with its processes in pid order."""
        return [
            ObjectRow(
                path=path,
                processes=tuple((pid, self.names.get(pid)) for pid in sorted(pids)),
            )
            for path, pids in sorted(self.objects.items())
        ]


def _scan_one(
    pid: int, proc_root: Path | str, max_depth: int
) -> ScanResult | MapsUnavailable:
    try:
        return scan_process(pid, proc_root, max_depth)
    except MapsUnavailable as e:
        return e


def _scan_results(
    pids: list[int], proc_root: Path | str, max_depth: int, jobs: int
) -> Iterator[ScanResult | MapsUnavailable]:
    if jobs <= 1:
        for pid in pids:
            yield _scan_one(pid, proc_root, max_depth)
        return

    with ThreadPoolExecutor(max_workers=jobs) as pool:
        # map() yields in submission order
        yield from pool.map(lambda pid: _scan_one(pid, proc_root, max_depth), pids)


def run_scan(
    session: ScanSession,
    pids: Iterable[int],
    *,
    proc_root: Path | str = DEFAULT_PROC_ROOT,
    max_depth: int = MAX_SYMLINK_DEPTH,
    jobs: int = 1,
) -> ScanSession:
    """Scan every pid and ingest the results into session.

    Unreadable processes are recorded as skipped with a console warning and
    do not stop the run. With jobs > 1 the maps files are read on a thread
    pool, but ingestion always happens here, one result at a time.
    """
    ordered = sorted(set(pids))
    console.scan_started(len(ordered), jobs)
    log.info("scan_started", pids=len(ordered), jobs=jobs, proc_root=str(proc_root))

    for outcome in _scan_results(ordered, proc_root, max_depth, jobs):
        if isinstance(outcome, MapsUnavailable):
            session.skip(outcome.pid, outcome.reason)
            console.maps_skipped(outcome.pid, outcome.reason)
            log.warning("maps_skipped", pid=outcome.pid, reason=outcome.reason)
            continue
        session.ingest(outcome)

    log.info(
        "scan_finished",
        processes=len(session.processes),
        objects=len(session.objects),
        skipped=len(session.skipped),
    )
    return session
