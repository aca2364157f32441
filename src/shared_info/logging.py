"""Console diagnostics with Rich formatting, plus structlog setup.

This module provides:
1. Icon vocabulary (Icon class namespace)
2. Core log functions (log, info, warn, error)
3. Domain-specific helpers (maps_skipped, scan_summary, etc.)
4. Structlog configuration (configure)

Console output goes to stderr so it never mixes with report data on stdout.
Optional JSON file output via structlog stays separate (no colors).
"""

from __future__ import annotations

import logging
import logging.handlers
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from shared_info.config import Config

_console = Console(stderr=True, highlight=False)

# Set by configure(); info-level chatter is shown only when verbose
_verbose = False


# ─────────────────────────────────────────────────────────────────────────────
# Icons
# ─────────────────────────────────────────────────────────────────────────────


class Icon:
    """Icon vocabulary for console output."""

    OK = "[bold green]✓[/]"
    FAIL = "[bold red]✗[/]"
    SKIP = "[yellow]↷[/]"
    SCAN = "🔎"


_LEVEL_STYLES = {
    "info": "[bright_blue]\\[info][/]",
    "warn": "[yellow]\\[warn][/]",
    "error": "[bold red]\\[err][/] ",
}


# ─────────────────────────────────────────────────────────────────────────────
# Core Functions
# ─────────────────────────────────────────────────────────────────────────────


def log(level: str, msg: str, icon: str = "") -> None:
    """Print a log message with timestamp and level.

    Args:
        level: Log level (info, warn, error)
        msg: Message to print (can include Rich markup)
        icon: Optional icon to show after level (e.g., Icon.OK)
    """
    ts = datetime.now().strftime("%H:%M:%S")
    lvl = _LEVEL_STYLES.get(level, f"[{level}]")
    icon_part = f" {icon}" if icon else ""
    _console.print(f"[dim]{ts}[/] {lvl}{icon_part} {msg}")


def info(msg: str, icon: str = "") -> None:
    """Log an info message. Suppressed unless verbose."""
    if _verbose:
        log("info", msg, icon)


def warn(msg: str, icon: str = "") -> None:
    """Log a warning message."""
    log("warn", msg, icon)


def error(msg: str, icon: str = "") -> None:
    """Log an error message."""
    log("error", msg, icon)


# ─────────────────────────────────────────────────────────────────────────────
# Domain Helpers
# ─────────────────────────────────────────────────────────────────────────────


def maps_skipped(pid: int, reason: str) -> None:
    """Log a process skipped because its maps could not be read."""
    warn(f"Skipping PID [cyan]{pid}[/] [dim]— {escape(reason)}[/]", Icon.SKIP)


def proc_root_unavailable(reason: str) -> None:
    """Log the fatal failure to list the procfs root."""
    error(escape(reason), Icon.FAIL)


def scan_started(pid_count: int, jobs: int) -> None:
    """Log scan start."""
    suffix = "es" if pid_count != 1 else ""
    info(f"Scanning [cyan]{pid_count}[/] process{suffix} [dim]({jobs} jobs)[/]", Icon.SCAN)


def scan_summary(scanned: int, objects: int, skipped: int) -> None:
    """Log scan totals."""
    parts = f"[cyan]{scanned}[/] processes, [cyan]{objects}[/] shared objects"
    if skipped:
        parts += f", [yellow]{skipped}[/] skipped"
    info(parts, Icon.OK)


def config_created(path: str) -> None:
    """Log config file created."""
    _console.print(f"Created config at [cyan]{escape(path)}[/]")


def config_invalid(msg: str) -> None:
    """Log config file could not be loaded."""
    error(escape(msg), Icon.FAIL)


# ─────────────────────────────────────────────────────────────────────────────
# Structlog Configuration
# ─────────────────────────────────────────────────────────────────────────────


def configure(config: Config, verbose: bool = False) -> None:
    """Configure structlog, with JSON file output when a log file is set.

    Without a log file, structured events are dropped; the console helpers
    above are the only human-facing output.

    Args:
        config: Application config with logging settings
        verbose: Show info-level console messages
    """
    global _verbose
    _verbose = verbose

    stdlib_root = logging.getLogger()
    stdlib_root.handlers.clear()

    if config.logging.log_file:
        log_path = Path(config.logging.log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=config.logging.log_max_bytes,
            backupCount=config.logging.log_backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
                foreign_pre_chain=[
                    structlog.processors.TimeStamper(fmt="iso", utc=False, key="ts"),
                    structlog.processors.add_log_level,
                    structlog.processors.format_exc_info,
                ],
            )
        )
        stdlib_root.setLevel(logging.DEBUG if verbose else logging.INFO)
    else:
        handler = logging.NullHandler()
        stdlib_root.setLevel(logging.WARNING)
    stdlib_root.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso", utc=False, key="ts"),
            structlog.processors.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
