"""Configuration system for shared-info."""

from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path

import tomlkit

OUTPUT_FORMATS = ("table", "plain", "json")


@dataclass
class ScanConfig:
    """Where and how to scan."""

    proc_root: str = "/proc"  # procfs mount point
    symlink_max_depth: int = 40  # Give up resolving after this many hops
    jobs: int = 1  # Worker threads reading maps files


@dataclass
class OutputConfig:
    """Report rendering configuration."""

    format: str = "table"  # "table", "plain" or "json"
    wrap_width: int = 0  # Wrap long plain-text entries at N chars (0 = off)


@dataclass
class LoggingConfig:
    """Structured log file configuration."""

    log_file: str = ""  # JSON Lines log path; empty disables file logging
    log_max_bytes: int = 5 * 1024 * 1024  # Max log file size (5MB)
    log_backup_count: int = 3  # Number of backup log files to keep


def _dataclass_to_table(obj: object) -> tomlkit.items.Table:
    """Convert a dataclass instance to a tomlkit Table recursively."""
    table = tomlkit.table()
    for f in fields(obj):  # type: ignore[arg-type]
        value = getattr(obj, f.name)
        if is_dataclass(value) and not isinstance(value, type):
            table.add(f.name, _dataclass_to_table(value))
        else:
            table.add(f.name, value)
    return table


@dataclass
class Config:
    """Main configuration container."""

    scan: ScanConfig = field(default_factory=ScanConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def config_dir(self) -> Path:
        """Configuration directory."""
        return Path.home() / ".config" / "shared-info"

    @property
    def config_path(self) -> Path:
        """Path to config file."""
        return self.config_dir / "config.toml"

    def to_toml(self) -> str:
        """Render config as a TOML document."""
        doc = tomlkit.document()
        for name in ("scan", "output", "logging"):
            doc.add(name, _dataclass_to_table(getattr(self, name)))
            doc.add(tomlkit.nl())
        return tomlkit.dumps(doc)

    def save(self, path: Path | None = None) -> None:
        """Save config to TOML file."""
        path = path or self.config_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_toml())

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load config from TOML file, returning defaults for missing values.

        All defaults come from the dataclass definitions.

        Raises:
            ValueError: If the file cannot be parsed or holds invalid values.
        """
        defaults = cls()
        path = path or defaults.config_path
        if not path.exists():
            return defaults

        try:
            with open(path) as f:
                data = tomlkit.load(f)
        except tomlkit.exceptions.TOMLKitError as e:
            raise ValueError(f"Failed to parse config file {path}: {e}") from e

        return cls(
            scan=_load_scan_config(data.get("scan", {})),
            output=_load_output_config(data.get("output", {})),
            logging=_load_logging_config(data.get("logging", {})),
        )


def _get_int(data: dict, key: str, default: int, minimum: int) -> int:
    """Read an integer setting, rejecting other types and values below minimum."""
    value = data.get(key, default)
    # bool is an int subclass but never a valid count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    if value < minimum:
        raise ValueError(f"{key} must be >= {minimum}, got {value}")
    return int(value)


def _load_scan_config(data: dict) -> ScanConfig:
    """Load scan config from TOML data, using dataclass defaults for missing fields."""
    d = ScanConfig()
    return ScanConfig(
        proc_root=str(data.get("proc_root", d.proc_root)),
        symlink_max_depth=_get_int(data, "symlink_max_depth", d.symlink_max_depth, 1),
        jobs=_get_int(data, "jobs", d.jobs, 1),
    )


def _load_output_config(data: dict) -> OutputConfig:
    """Load output config from TOML data."""
    d = OutputConfig()
    fmt = data.get("format", d.format)

    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"Invalid format: {fmt!r}. Must be one of {list(OUTPUT_FORMATS)}")

    return OutputConfig(
        format=str(fmt),
        wrap_width=_get_int(data, "wrap_width", d.wrap_width, 0),
    )


def _load_logging_config(data: dict) -> LoggingConfig:
    """Load logging config from TOML data."""
    d = LoggingConfig()
    return LoggingConfig(
        log_file=str(data.get("log_file", d.log_file)),
        log_max_bytes=_get_int(data, "log_max_bytes", d.log_max_bytes, 0),
        log_backup_count=_get_int(data, "log_backup_count", d.log_backup_count, 0),
    )
