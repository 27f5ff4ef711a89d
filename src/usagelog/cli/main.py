"""CLI entrypoint for the Kubernetes usage logger."""

import signal
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as package_version
from pathlib import Path
from types import FrameType

import typer
from rich.console import Console

from usagelog.application import PartitionedWriter, SnapshotScheduler
from usagelog.application.period_summary import summarize_partition
from usagelog.application.stdout_renderer import render_snapshot, render_summary
from usagelog.config import SnapshotConfig, load_config
from usagelog.infrastructure.cluster_reader import resolve_cluster_reader
from usagelog.logging_setup import configure_logging

app = typer.Typer(
    name="usage-log",
    help=(
        "Log Kubernetes usage snapshots to month-partitioned JSON files "
        "for accounting and billing."
    ),
    no_args_is_help=True,
    add_completion=False,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()

_JOIN_POLL_SECONDS = 0.5


def _resolve_version() -> str:
    """Return installed package version or local fallback."""
    try:
        return package_version("usage-log")
    except PackageNotFoundError:
        return "0.1.0"


@app.callback()
def callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
    ),
) -> None:
    """Handle global CLI options."""
    if version:
        console.print(f"usage-log {_resolve_version()}")
        raise typer.Exit(code=0)
    if ctx.invoked_subcommand is None:
        raise typer.Exit(code=0)


def _handle_error(exc: Exception) -> None:
    """Convert domain exceptions to CLI exit codes."""
    if isinstance(exc, ValueError):
        console.print(f"[red]ERROR:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    if isinstance(exc, RuntimeError):
        console.print(f"[red]ERROR:[/red] {exc}")
        raise typer.Exit(code=2) from exc
    raise exc


def _build_config(
    *,
    env_file: Path,
    cluster_id: str | None,
    usage_period: int | None,
    destination_path: str | None,
    internal: bool | None,
    kubeconfig: str | None,
    log_level: str | None,
) -> SnapshotConfig:
    config = load_config(
        env_file,
        cluster_id=cluster_id,
        period_seconds=usage_period,
        destination_path=destination_path,
        internal=internal,
        kubeconfig=kubeconfig,
        log_level=log_level,
    )
    configure_logging(config.log_level)
    return config


ID_OPTION = typer.Option(
    None, "--id", help="Unique ID to represent the cluster (required)."
)
PERIOD_OPTION = typer.Option(
    None,
    "--usage-period",
    help="Number of seconds per collection interval (default 60).",
)
DESTINATION_OPTION = typer.Option(
    None,
    "--destination-path",
    "-d",
    help="Destination path for usage logs (default logs/).",
)
INTERNAL_OPTION = typer.Option(
    None,
    "--internal/--external",
    help="Use in-cluster service account credentials or an external kubeconfig.",
)
KUBECONFIG_OPTION = typer.Option(
    None,
    "--kubeconfig",
    help="Absolute path to the kubeconfig file (external mode).",
)
LOG_LEVEL_OPTION = typer.Option(None, "--log-level", help="Logging level.")
ENV_FILE_OPTION = typer.Option(
    Path(".env"), "--env-file", help="Optional .env file with USAGE_LOG_* settings."
)


@app.command("run")
def run_command(
    cluster_id: str | None = ID_OPTION,
    usage_period: int | None = PERIOD_OPTION,
    destination_path: str | None = DESTINATION_OPTION,
    internal: bool | None = INTERNAL_OPTION,
    kubeconfig: str | None = KUBECONFIG_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
    env_file: Path = ENV_FILE_OPTION,
) -> None:
    """Snapshot the cluster every period until interrupted."""
    try:
        config = _build_config(
            env_file=env_file,
            cluster_id=cluster_id,
            usage_period=usage_period,
            destination_path=destination_path,
            internal=internal,
            kubeconfig=kubeconfig,
            log_level=log_level,
        )
        reader = resolve_cluster_reader(config)
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc)
        return

    scheduler = SnapshotScheduler(
        reader, PartitionedWriter(config.destination_path), config
    )

    def _stop(signum: int, _frame: FrameType | None) -> None:
        name = signal.Signals(signum).name
        console.print(f"[yellow]Received {name}, stopping.[/yellow]")
        scheduler.stop()

    signal.signal(signal.SIGINT, _stop)
    signal.signal(signal.SIGTERM, _stop)

    scheduler.start()
    while scheduler.is_alive():
        scheduler.join(_JOIN_POLL_SECONDS)


@app.command("snapshot")
def snapshot_command(
    cluster_id: str | None = ID_OPTION,
    destination_path: str | None = DESTINATION_OPTION,
    internal: bool | None = INTERNAL_OPTION,
    kubeconfig: str | None = KUBECONFIG_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
    env_file: Path = ENV_FILE_OPTION,
    write: bool = typer.Option(
        False,
        "--write",
        "-w",
        help="Persist the snapshot under the destination path.",
    ),
) -> None:
    """Take one snapshot.

    Prints rich preview by default; use `--write/-w` to persist it.
    """
    try:
        config = _build_config(
            env_file=env_file,
            cluster_id=cluster_id,
            usage_period=None,
            destination_path=destination_path,
            internal=internal,
            kubeconfig=kubeconfig,
            log_level=log_level,
        )
        reader = resolve_cluster_reader(config)
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc)
        return

    scheduler = SnapshotScheduler(
        reader, PartitionedWriter(config.destination_path), config
    )
    result = scheduler.run_once(write=write)
    if not write:
        render_snapshot(result.snapshot, console=console)
        return
    if result.path is None:
        _handle_error(RuntimeError("Snapshot could not be written."))
    console.print(f"[green]Snapshot:[/green] {result.path}")


@app.command("period-summary")
def period_summary_command(
    partition_dir: Path = typer.Argument(
        ...,
        help="Partition directory, e.g. logs/period=20240501-20240601.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the summary as CSV to this file.",
    ),
) -> None:
    """Sum per-namespace resource-seconds across one partition."""
    try:
        summary = summarize_partition(partition_dir, output_csv=output)
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc)
        return
    render_summary(summary, title=partition_dir.name, console=console)
    if output is not None:
        console.print(f"[green]Summary:[/green] {output}")


def main() -> None:
    """Project entrypoint for `usage-log` script."""
    app()


if __name__ == "__main__":
    main()
