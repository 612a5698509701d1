from cargo_affected.core.affected import compute_affected
from cargo_affected.core.graph import FileOwnershipIndex, WorkspaceGraph, build_workspace
from cargo_affected.core.run import run_affected
from cargo_affected.errors import AffectedError, ConfigError, DiffError, ManifestError
from cargo_affected.models import AffectedResult, ChangeSet, EventContext, Package, ResolutionStrategy

__all__ = [
    "AffectedError",
    "AffectedResult",
    "ChangeSet",
    "ConfigError",
    "DiffError",
    "EventContext",
    "FileOwnershipIndex",
    "ManifestError",
    "Package",
    "ResolutionStrategy",
    "WorkspaceGraph",
    "build_workspace",
    "compute_affected",
    "run_affected",
]
