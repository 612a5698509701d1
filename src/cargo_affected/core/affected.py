"""Map changed files to packages and expand them to every transitive dependent."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Sequence

from cargo_affected.core.graph import FileOwnershipIndex, WorkspaceGraph
from cargo_affected.core.patterns import Pattern
from cargo_affected.models import AffectedResult

logger = logging.getLogger(__name__)


def map_changed_packages(changed_files: Iterable[str], index: FileOwnershipIndex) -> tuple[str, ...]:
    """Owners of *changed_files* in first-seen order; unowned paths are skipped."""
    owners: dict[str, None] = {}
    for path in changed_files:
        owner = index.owner(path)
        if owner is not None:
            owners.setdefault(owner, None)
    return tuple(owners)


def affected_closure(graph: WorkspaceGraph, changed: Sequence[str]) -> tuple[str, ...]:
    """Breadth-first walk over reverse edges from every changed package at once.

    Each package is emitted the first time it is reached; the visited set makes
    diamonds and (invalid) cycles terminate with every package listed once.
    """
    visited: dict[str, None] = {}
    frontier: deque[str] = deque()
    for name in changed:
        if name in graph and name not in visited:
            visited[name] = None
            frontier.append(name)
    while frontier:
        current = frontier.popleft()
        for dependent in graph.dependents(current):
            if dependent not in visited:
                visited[dependent] = None
                frontier.append(dependent)
    return tuple(visited)


def detect_force_all(changed_files: Iterable[str], triggers: Sequence[Pattern]) -> bool:
    if not triggers:
        return False
    for path in changed_files:
        for trigger in triggers:
            if trigger.matches(path):
                logger.info("Changed file %s matches force trigger %r", path, trigger.raw)
                return True
    return False


def filter_binaries(graph: WorkspaceGraph, names: Iterable[str]) -> tuple[str, ...]:
    return tuple(name for name in names if graph.package(name).has_binary_target)


def compute_affected(
    graph: WorkspaceGraph,
    index: FileOwnershipIndex,
    changed_files: Sequence[str],
    force_triggers: Sequence[Pattern] = (),
) -> AffectedResult:
    """Changed, affected and binary package sets before exclusions are applied."""
    if not changed_files:
        return AffectedResult()

    force_all = detect_force_all(changed_files, force_triggers)
    changed = map_changed_packages(changed_files, index)
    if force_all:
        affected = graph.names()
    else:
        affected = affected_closure(graph, changed)
    return AffectedResult(
        changed=changed,
        affected=affected,
        affected_binaries=filter_binaries(graph, affected),
        force_all=force_all,
    )
