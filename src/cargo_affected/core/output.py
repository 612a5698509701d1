"""Apply exclusions to a computed result and render the four output values."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence

from cargo_affected.core.graph import WorkspaceGraph
from cargo_affected.core.patterns import Pattern
from cargo_affected.models import AffectedResult, Package

OUTPUT_KEYS = (
    "changed_crates",
    "affected_library_members",
    "affected_binary_members",
    "force_all",
)


def is_excluded(package: Package, exclusions: Iterable[Pattern]) -> bool:
    for pattern in exclusions:
        candidate = package.name if pattern.on_identity else package.root
        if pattern.matches(candidate):
            return True
    return False


def apply_exclusions(
    result: AffectedResult, graph: WorkspaceGraph, exclusions: Sequence[Pattern]
) -> AffectedResult:
    """Drop excluded packages from every set.

    Exclusion is output-only: the closure was already computed through excluded
    packages, so their dependents stay affected.
    """
    if not exclusions:
        return result

    def _keep(names: Iterable[str]) -> tuple[str, ...]:
        return tuple(n for n in names if not is_excluded(graph.package(n), exclusions))

    return result.model_copy(
        update={
            "changed": _keep(result.changed),
            "affected": _keep(result.affected),
            "affected_binaries": _keep(result.affected_binaries),
        }
    )


def render_outputs(result: AffectedResult) -> dict[str, str]:
    return {
        "changed_crates": json.dumps(list(result.changed)),
        "affected_library_members": json.dumps(list(result.affected)),
        "affected_binary_members": json.dumps(list(result.affected_binaries)),
        "force_all": "true" if result.force_all else "false",
    }


def render_json(result: AffectedResult) -> str:
    return json.dumps(
        {
            "changed_crates": list(result.changed),
            "affected_library_members": list(result.affected),
            "affected_binary_members": list(result.affected_binaries),
            "force_all": result.force_all,
        }
    )
