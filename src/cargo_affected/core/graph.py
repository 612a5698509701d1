"""Workspace dependency graph and file-ownership index built from ``cargo metadata``."""

from __future__ import annotations

import json
import logging
import posixpath
from collections.abc import Iterator, Mapping
from pathlib import PurePath, PurePosixPath
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cargo_affected.errors import ManifestError
from cargo_affected.models import Package

logger = logging.getLogger(__name__)


class CargoDependency(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    rename: str | None = None
    kind: str | None = None
    path: str | None = None


class CargoTarget(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    kind: list[str] = Field(default_factory=list)


class CargoPackage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    id: str | None = None
    manifest_path: str
    dependencies: list[CargoDependency] = Field(default_factory=list)
    targets: list[CargoTarget] = Field(default_factory=list)


class CargoMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore")

    packages: list[CargoPackage]
    workspace_root: str
    workspace_members: list[str] | None = None


class WorkspaceGraph:
    """Read-only arena of packages keyed by name, with forward and reverse adjacency.

    Iteration and adjacency tuples follow manifest order so that traversals are
    deterministic.
    """

    def __init__(self, packages: list[Package]) -> None:
        self._packages: dict[str, Package] = {p.name: p for p in packages}
        forward: dict[str, tuple[str, ...]] = {}
        reverse: dict[str, list[str]] = {name: [] for name in self._packages}
        for pkg in packages:
            deps = tuple(d for d in pkg.dependencies if d in self._packages and d != pkg.name)
            forward[pkg.name] = deps
            for dep in deps:
                if pkg.name not in reverse[dep]:
                    reverse[dep].append(pkg.name)
        self._forward = forward
        self._reverse = {name: tuple(dependents) for name, dependents in reverse.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    def __iter__(self) -> Iterator[Package]:
        return iter(self._packages.values())

    def __len__(self) -> int:
        return len(self._packages)

    def package(self, name: str) -> Package:
        return self._packages[name]

    def names(self) -> tuple[str, ...]:
        return tuple(self._packages)

    def dependencies(self, name: str) -> tuple[str, ...]:
        return self._forward.get(name, ())

    def dependents(self, name: str) -> tuple[str, ...]:
        return self._reverse.get(name, ())


class FileOwnershipIndex:
    """Resolve a workspace-relative path to the package whose root directory contains it.

    Matching is by whole path components, longest root first, so ``foo-bar/x``
    never resolves to a package rooted at ``foo``.
    """

    def __init__(self, packages: list[Package]) -> None:
        roots: dict[tuple[str, ...], str] = {}
        for pkg in packages:
            parts = _split(pkg.root)
            if parts in roots:
                raise ManifestError(
                    f"packages {roots[parts]!r} and {pkg.name!r} share root directory {pkg.root or '.'!r}"
                )
            roots[parts] = pkg.name
        self._roots = roots
        self._depths = sorted({len(parts) for parts in roots}, reverse=True)

    def owner(self, path: str) -> str | None:
        parts = _split(path)
        for depth in self._depths:
            if depth > len(parts):
                continue
            owner = self._roots.get(parts[:depth])
            if owner is not None:
                return owner
        return None


def _split(path: str) -> tuple[str, ...]:
    normalized = posixpath.normpath(path.replace("\\", "/")) if path else "."
    return tuple(part for part in PurePosixPath(normalized).parts if part not in (".", ""))


def parse_metadata(document: str | bytes | Mapping[str, Any]) -> CargoMetadata:
    try:
        data = json.loads(document) if isinstance(document, (str, bytes)) else document
    except json.JSONDecodeError as exc:
        raise ManifestError(f"manifest is not valid JSON: {exc}") from exc
    try:
        return CargoMetadata.model_validate(data)
    except ValidationError as exc:
        raise ManifestError(f"manifest does not match the cargo metadata format: {exc}") from exc


def _relative_root(manifest_path: str, workspace_root: str) -> str:
    package_dir = PurePath(manifest_path).parent
    try:
        relative = package_dir.relative_to(PurePath(workspace_root))
    except ValueError as exc:
        raise ManifestError(f"{manifest_path!r} lies outside workspace root {workspace_root!r}") from exc
    posix = relative.as_posix()
    return "" if posix == "." else posix


def build_packages(metadata: CargoMetadata) -> list[Package]:
    members = metadata.packages
    if metadata.workspace_members is not None:
        wanted = set(metadata.workspace_members)
        members = [p for p in members if p.id in wanted]

    names = [p.name for p in members]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ManifestError(f"duplicate package names in workspace: {', '.join(duplicates)}")
    workspace_names = set(names)

    packages: list[Package] = []
    for raw in members:
        deps: list[str] = []
        for dep in raw.dependencies:
            if dep.name not in workspace_names:
                logger.debug("Dropping non-workspace dependency %s -> %s", raw.name, dep.name)
                continue
            if dep.name != raw.name and dep.name not in deps:
                deps.append(dep.name)
        packages.append(
            Package(
                name=raw.name,
                root=_relative_root(raw.manifest_path, metadata.workspace_root),
                dependencies=tuple(deps),
                has_binary_target=any("bin" in t.kind for t in raw.targets),
            )
        )
    return packages


def build_workspace(
    document: str | bytes | Mapping[str, Any],
) -> tuple[WorkspaceGraph, FileOwnershipIndex]:
    """Parse a cargo metadata document into the package graph and its ownership index."""
    packages = build_packages(parse_metadata(document))
    index = FileOwnershipIndex(packages)
    return WorkspaceGraph(packages), index
