import logging
import os
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from cargo_affected.ci.github import event_context_from_env, write_outputs
from cargo_affected.config import AffectedConfig, build_config
from cargo_affected.core.output import render_json, render_outputs
from cargo_affected.core.ports.manifest import ManifestProvider
from cargo_affected.core.ports.vcs import VcsProvider
from cargo_affected.core.resolve import resolve_base
from cargo_affected.core.run import run_affected
from cargo_affected.errors import AffectedError
from cargo_affected.manifest.cargo import CargoMetadataProvider, FileManifestProvider
from cargo_affected.vcs.git import GitVcsProvider

logger = logging.getLogger(__name__)
err_console = Console(stderr=True)

BaseShaOption = Annotated[
    str | None, typer.Option("--base-sha", envvar="BASE_SHA", help="Explicit diff base; skips event resolution.")
]
MainBranchOption = Annotated[
    str | None,
    typer.Option("--main-branch", envvar="MAIN_BRANCH", help="Branch used for the first-push merge-base fallback."),
]
WorkspaceOption = Annotated[
    Path, typer.Option("--workspace", envvar="CARGO_AFFECTED_WORKSPACE", help="Cargo workspace directory.")
]
ManifestOption = Annotated[
    Path | None,
    typer.Option(
        "--manifest-path", envvar="CARGO_METADATA_PATH", help="Saved `cargo metadata` JSON to use instead of cargo."
    ),
]


def _get_manifest_provider(config: AffectedConfig) -> ManifestProvider:
    if config.manifest_path is not None:
        return FileManifestProvider(config.manifest_path)
    return CargoMetadataProvider(config.workspace_dir)


def _get_vcs_provider(config: AffectedConfig) -> VcsProvider:
    return GitVcsProvider(config.workspace_dir)


def run(
    base_sha: BaseShaOption = None,
    force_triggers: Annotated[
        str | None,
        typer.Option(envvar="FORCE_TRIGGERS", help="Space/newline separated globs that force a full rebuild."),
    ] = None,
    excluded_members: Annotated[
        str | None,
        typer.Option(envvar="EXCLUDED_MEMBERS", help="Space/newline separated package names or directory patterns."),
    ] = None,
    changed_files: Annotated[
        str | None,
        typer.Option(envvar="CHANGED_FILES", help="Changed paths to use instead of asking git."),
    ] = None,
    main_branch: MainBranchOption = None,
    workspace: WorkspaceOption = Path("."),
    manifest_path: ManifestOption = None,
) -> None:
    """Compute changed and affected workspace members and emit the step outputs."""
    config = build_config(
        base_sha=base_sha,
        force_triggers=force_triggers,
        excluded_members=excluded_members,
        changed_files=changed_files,
        main_branch=main_branch,
        workspace_dir=workspace,
        manifest_path=manifest_path,
    )
    try:
        result = run_affected(
            config,
            _get_manifest_provider(config),
            _get_vcs_provider(config),
            event_context_from_env(),
        )
    except AffectedError as exc:
        err_console.print(f"[red]{type(exc).__name__}:[/red] {exc}")
        raise typer.Exit(1) from exc

    output_path = os.getenv("GITHUB_OUTPUT")
    if output_path:
        write_outputs(render_outputs(result), output_path)
        logger.info("Wrote outputs to %s", output_path)
    else:
        typer.echo(render_json(result))


def resolve_base_command(
    base_sha: BaseShaOption = None,
    main_branch: MainBranchOption = None,
    workspace: WorkspaceOption = Path("."),
) -> None:
    """Show which diff base the current event resolves to."""
    config = build_config(base_sha=base_sha, main_branch=main_branch, workspace_dir=workspace)
    try:
        strategy, base_ref = resolve_base(
            event_context_from_env(),
            _get_vcs_provider(config),
            override=config.base_sha,
            main_branch=config.main_branch,
        )
    except AffectedError as exc:
        err_console.print(f"[red]{type(exc).__name__}:[/red] {exc}")
        raise typer.Exit(1) from exc
    typer.echo(f"{strategy.value} {base_ref}")
