"""CLI commands for shared-info."""

from pathlib import Path

import click

from shared_info.config import OUTPUT_FORMATS


@click.group(invoke_without_command=True)
@click.version_option(package_name="shared-info")
@click.pass_context
def main(ctx) -> None:
    """List the shared libraries mapped by running processes."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help(), err=True)
        ctx.exit(1)


@main.command()
@click.option("--proc", "mode", flag_value="process", help="Group by process")
@click.option("--obj", "mode", flag_value="object", help="Group by shared object")
@click.option(
    "--pid", "-p", type=click.IntRange(min=1), default=None, help="Scan only this process"
)
@click.option(
    "--format", "-f", "fmt", type=click.Choice(OUTPUT_FORMATS), default=None, help="Output format"
)
@click.option("--jobs", "-j", type=click.IntRange(min=1), default=None, help="Worker threads")
@click.option(
    "--proc-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="procfs mount point",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to use",
)
@click.option("--verbose", "-v", is_flag=True, help="Show progress messages")
def scan(
    mode: str | None,
    pid: int | None,
    fmt: str | None,
    jobs: int | None,
    proc_root: Path | None,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Scan process memory maps and report shared objects.

    One of --proc or --obj is required. If both are given, the last wins.
    """
    from shared_info import logging as console
    from shared_info.config import Config
    from shared_info.procfs import ProcRootUnavailable, list_process_ids
    from shared_info.render import render
    from shared_info.session import ScanSession, run_scan

    if mode is None:
        raise click.UsageError("Choose a grouping: --proc or --obj")

    try:
        config = Config.load(config_path)
    except ValueError as e:
        console.config_invalid(str(e))
        raise SystemExit(1) from e

    console.configure(config, verbose=verbose)

    root = proc_root or Path(config.scan.proc_root)
    jobs = jobs or config.scan.jobs
    fmt = fmt or config.output.format

    if pid is not None:
        pids = [pid]
    else:
        try:
            pids = list_process_ids(root)
        except ProcRootUnavailable as e:
            console.proc_root_unavailable(str(e))
            raise SystemExit(1) from e

    session = run_scan(
        ScanSession(),
        pids,
        proc_root=root,
        max_depth=config.scan.symlink_max_depth,
        jobs=jobs,
    )
    console.scan_summary(len(session.processes), len(session.objects), len(session.skipped))

    by_object = mode == "object"
    rows = session.by_object() if by_object else session.by_process()
    render(rows, by_object=by_object, fmt=fmt, wrap_width=config.output.wrap_width)

    # A single requested process that could not be read is a failed run
    if pid is not None and pid in session.skipped:
        raise SystemExit(1)


@main.group()
def config() -> None:
    """Manage configuration."""
    pass


@config.command("show")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to read",
)
def config_show(config_path: Path | None) -> None:
    """Show the effective configuration."""
    from shared_info import logging as console
    from shared_info.config import Config

    try:
        cfg = Config.load(config_path)
    except ValueError as e:
        console.config_invalid(str(e))
        raise SystemExit(1) from e

    click.echo(f"# {config_path or cfg.config_path}")
    click.echo(cfg.to_toml())


@config.command("reset")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to write",
)
@click.confirmation_option(prompt="Reset config to defaults?")
def config_reset(config_path: Path | None) -> None:
    """Reset configuration to defaults."""
    from shared_info import logging as console
    from shared_info.config import Config

    cfg = Config()
    path = config_path or cfg.config_path
    cfg.save(path)
    console.config_created(str(path))
