"""Process discovery under the procfs root."""

from pathlib import Path

DEFAULT_PROC_ROOT = Path("/proc")


class ProcRootUnavailable(Exception):
    """Raised when the procfs root cannot be listed. Nothing can be scanned."""

    pass


def list_process_ids(proc_root: Path | str = DEFAULT_PROC_ROOT) -> list[int]:
    """Return the pids of all processes visible under proc_root.

    Only directories whose names are entirely decimal digits count. Entries
    like "self" or "net" are skipped. Order is not guaranteed.

    Raises:
        ProcRootUnavailable: If proc_root cannot be listed.
    """
    root = Path(proc_root)
    try:
        entries = list(root.iterdir())
    except OSError as e:
        raise ProcRootUnavailable(f"Cannot list {root}: {e.strerror or e}") from e

    pids = []
    for entry in entries:
        name = entry.name
        if not (name.isascii() and name.isdigit()):
            continue
        try:
            if not entry.is_dir():
                continue
        except OSError:
            # Vanished between listing and stat
            continue
        pids.append(int(name))
    return pids


def maps_path(pid: int, proc_root: Path | str = DEFAULT_PROC_ROOT) -> Path:
    """Path to a process's memory map listing."""
    return Path(proc_root) / str(pid) / "maps"
