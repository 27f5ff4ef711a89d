"""Render snapshots and period summaries to stdout using rich."""

from __future__ import annotations

import pandas as pd
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from usagelog.domain.catalog_models import Snapshot

_MAX_PREVIEW_ROWS = 20


def _preview_table(title: str, headers: tuple[str, ...]) -> Table:
    table = Table(title=title, show_lines=False, expand=True, box=box.SIMPLE_HEAVY)
    for idx, header in enumerate(headers):
        table.add_column(
            header,
            overflow="fold",
            no_wrap=False,
            justify="left" if idx == 0 else "right",
        )
    return table


def _truncation_note(console: Console, total: int) -> None:
    if total > _MAX_PREVIEW_ROWS:
        console.print(f"[dim]Showing first {_MAX_PREVIEW_ROWS} of {total} rows.[/dim]")


def render_snapshot(snapshot: Snapshot, *, console: Console | None = None) -> None:
    """Render snapshot header, namespace and node tables."""
    console = console or Console()
    status = "[green]success[/green]" if snapshot.success else "[red]failed[/red]"
    header = (
        f"cluster: {snapshot.cluster_id}\n"
        f"time: {snapshot.time}\n"
        f"status: {status}\n"
        f"namespaces: {len(snapshot.namespaces)}  pods: {snapshot.pod_count}  "
        f"quotas: {snapshot.quota_count}  nodes: {len(snapshot.nodes)}"
    )
    console.print(Panel(header, title="Usage Snapshot", border_style="blue"))
    if snapshot.error_message:
        console.print(f"[red]ERROR:[/red] {snapshot.error_message}")
    for message in snapshot.aggregation_errors[:_MAX_PREVIEW_ROWS]:
        console.print(f"[yellow]{message}[/yellow]")

    if snapshot.namespaces:
        table = _preview_table(
            "namespaces", ("namespace", "pods", "containers", "quotas")
        )
        for ns in snapshot.namespaces[:_MAX_PREVIEW_ROWS]:
            containers = sum(len(pod.containers) for pod in ns.pods)
            table.add_row(
                ns.name,
                str(len(ns.pods)),
                str(containers),
                str(len(ns.resource_quotas)),
            )
        console.print(table)
        _truncation_note(console, len(snapshot.namespaces))

    if snapshot.nodes:
        table = _preview_table(
            "nodes", ("node", "status", "internal_ip", "cpu", "memory")
        )
        for node in snapshot.nodes[:_MAX_PREVIEW_ROWS]:
            table.add_row(
                node.name,
                node.status,
                node.internal_ip,
                str(node.allocatable.cpu_limits),
                str(node.allocatable.memory_limits),
            )
        console.print(table)
        _truncation_note(console, len(snapshot.nodes))


def render_summary(
    summary: pd.DataFrame,
    *,
    title: str,
    console: Console | None = None,
) -> None:
    """Render a period summary DataFrame as a table."""
    console = console or Console()
    if summary.empty:
        console.print(f"[yellow]{title}: no container usage recorded.[/yellow]")
        return
    headers = tuple(str(col) for col in summary.columns)
    table = _preview_table(title, headers)
    for row in summary.head(_MAX_PREVIEW_ROWS).itertuples(index=False):
        table.add_row(
            *(f"{v:.0f}" if isinstance(v, float) else str(v) for v in row)
        )
    console.print(table)
    _truncation_note(console, len(summary))
