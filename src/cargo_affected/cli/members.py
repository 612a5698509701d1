from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from cargo_affected.cli.run import ManifestOption, WorkspaceOption, _get_manifest_provider
from cargo_affected.config import build_config
from cargo_affected.core.graph import WorkspaceGraph, build_workspace
from cargo_affected.errors import AffectedError

console = Console()
err_console = Console(stderr=True)


def _render_members(graph: WorkspaceGraph, binaries_only: bool = False) -> None:
    table = Table(show_lines=False)
    for header in ("name", "root", "binary", "dependencies", "dependents"):
        table.add_column(header)
    rows = [p for p in graph if p.has_binary_target or not binaries_only]
    for pkg in rows:
        table.add_row(
            pkg.name,
            pkg.root or ".",
            "yes" if pkg.has_binary_target else "",
            ", ".join(graph.dependencies(pkg.name)),
            ", ".join(graph.dependents(pkg.name)),
        )
    console.print(table)
    console.print(f"({len(rows)} members)")


def members(
    workspace: WorkspaceOption = Path("."),
    manifest_path: ManifestOption = None,
    binaries_only: Annotated[bool, typer.Option("--binaries", help="Only list members with a binary target.")] = False,
) -> None:
    """List workspace members with their dependency edges."""
    config = build_config(workspace_dir=workspace, manifest_path=manifest_path)
    try:
        graph, _ = build_workspace(_get_manifest_provider(config).load())
    except AffectedError as exc:
        err_console.print(f"[red]{type(exc).__name__}:[/red] {exc}")
        raise typer.Exit(1) from exc
    _render_members(graph, binaries_only)
