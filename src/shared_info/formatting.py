"""Formatting utilities shared by the report renderers."""

UNKNOWN_NAME = "?"


def display_name(name: str | None) -> str:
    """Name to show for a process, or "?" when none was found."""
    return name if name else UNKNOWN_NAME


def process_label(pid: int, name: str | None) -> str:
    """Label a process as "name (pid)"."""
    return f"{display_name(name)} ({pid})"


def wrap_text(text: str, width: int) -> str:
    """Break text into lines of at most width characters.

    Paths have no natural break points, so this splits on position alone.
    A width of 0 or less leaves the text unchanged.

    Examples:
        wrap_text("/usr/lib/libc.so.6", 8) -> "/usr/lib\\n/libc.so\\n.6"
    """
    if width <= 0 or len(text) <= width:
        return text
    return "\n".join(text[i : i + width] for i in range(0, len(text), width))
