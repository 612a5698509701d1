from pathlib import Path

from pydantic import BaseModel, ConfigDict

from cargo_affected.core.patterns import split_pattern_list
from cargo_affected.core.resolve import DEFAULT_MAIN_BRANCH


class AffectedConfig(BaseModel):
    """Immutable run configuration threaded through the pipeline."""

    model_config = ConfigDict(frozen=True)

    base_sha: str | None = None
    force_triggers: tuple[str, ...] = ()
    excluded_members: tuple[str, ...] = ()
    # None means "ask the VCS provider"; a tuple (even empty) is used verbatim.
    changed_files: tuple[str, ...] | None = None
    main_branch: str = DEFAULT_MAIN_BRANCH
    workspace_dir: Path = Path(".")
    manifest_path: Path | None = None


def build_config(
    base_sha: str | None = None,
    force_triggers: str | None = None,
    excluded_members: str | None = None,
    changed_files: str | None = None,
    main_branch: str | None = None,
    workspace_dir: str | Path | None = None,
    manifest_path: str | Path | None = None,
) -> AffectedConfig:
    """Build a config from raw option/environment strings.

    List-valued inputs are whitespace separated, newlines or spaces.
    """
    return AffectedConfig(
        base_sha=(base_sha.strip() or None) if base_sha else None,
        force_triggers=tuple(split_pattern_list(force_triggers)),
        excluded_members=tuple(split_pattern_list(excluded_members)),
        changed_files=None if changed_files is None else tuple(split_pattern_list(changed_files)),
        main_branch=main_branch or DEFAULT_MAIN_BRANCH,
        workspace_dir=Path(workspace_dir) if workspace_dir else Path("."),
        manifest_path=Path(manifest_path) if manifest_path else None,
    )
