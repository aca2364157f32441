"""Symlink canonicalization for mapped library paths."""

import os

import structlog

log = structlog.get_logger()

# Same limit Linux applies to nested symlinks (MAXSYMLINKS)
MAX_SYMLINK_DEPTH = 40


def resolve_symlink(path: str, max_depth: int = MAX_SYMLINK_DEPTH) -> str:
    """Follow symlinks from path until reaching something that is not a symlink.

    Each hop replaces the path with the link's immediate target. Relative
    targets are taken relative to the directory holding the link. A missing
    or broken target ends resolution at the last path seen. Once any link
    has been followed, the result has its directories canonicalized too.

    If more than max_depth hops are needed (typically a cycle), the original
    path is returned unresolved.
    """
    current = path
    for hops in range(max_depth + 1):
        if not os.path.islink(current):
            # Joined targets may still contain ".." components
            return os.path.realpath(current) if hops else current
        try:
            target = os.readlink(current)
        except OSError:
            # Link disappeared or is unreadable; keep what we have
            return current
        current = os.path.join(os.path.dirname(current), target)

    log.warning("symlink_depth_exceeded", path=path, max_depth=max_depth)
    return path
