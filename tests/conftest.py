"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from cargo_affected.core.graph import FileOwnershipIndex, WorkspaceGraph, build_workspace

_REPO_ROOT = Path(__file__).parent.parent
_WORKSPACE_ROOT = "/work/repo"

# (name, root directory, workspace dependencies, has binary target)
MemberSpec = tuple[str, str, list[str], bool]

FIXTURE_MEMBERS: list[MemberSpec] = [
    ("lib-utils", "lib-utils", [], False),
    ("lib-core", "lib-core", ["lib-utils"], False),
    ("lib-core-ext", "lib-core-ext", ["lib-core"], False),
    ("lib-standalone", "lib-standalone", [], False),
    ("lib-with-tests", "lib-with-tests", [], False),
    ("app-alpha", "app-alpha", ["lib-core"], True),
    ("app-beta", "app-beta", ["lib-core", "lib-standalone"], True),
    ("tool-alpha", "tools/tool-alpha", ["lib-utils"], True),
]


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


def make_metadata(members: list[MemberSpec], external: list[str] | None = None) -> dict[str, Any]:
    """Build a document shaped like ``cargo metadata --format-version 1 --no-deps``."""
    packages = []
    for name, root, deps, has_bin in members:
        package_dir = f"{_WORKSPACE_ROOT}/{root}" if root else _WORKSPACE_ROOT
        targets = [{"name": name, "kind": ["lib"]}]
        if has_bin:
            targets.append({"name": name, "kind": ["bin"]})
        dependencies = [{"name": dep, "kind": None, "path": f"{_WORKSPACE_ROOT}/{dep}"} for dep in deps]
        dependencies += [{"name": ext, "kind": None} for ext in external or []]
        packages.append(
            {
                "name": name,
                "id": f"path+file://{package_dir}#{name}@0.1.0",
                "manifest_path": f"{package_dir}/Cargo.toml",
                "dependencies": dependencies,
                "targets": targets,
            }
        )
    return {
        "packages": packages,
        "workspace_members": [p["id"] for p in packages],
        "workspace_root": _WORKSPACE_ROOT,
        "version": 1,
    }


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def metadata_factory() -> Callable[..., dict[str, Any]]:
    return make_metadata


@pytest.fixture
def fixture_metadata() -> dict[str, Any]:
    """The eight-member sample workspace, with one external dependency per member."""
    return make_metadata(FIXTURE_MEMBERS, external=["serde"])


@pytest.fixture
def workspace(fixture_metadata: dict[str, Any]) -> tuple[WorkspaceGraph, FileOwnershipIndex]:
    return build_workspace(fixture_metadata)


@pytest.fixture
def graph(workspace: tuple[WorkspaceGraph, FileOwnershipIndex]) -> WorkspaceGraph:
    return workspace[0]


@pytest.fixture
def index(workspace: tuple[WorkspaceGraph, FileOwnershipIndex]) -> FileOwnershipIndex:
    return workspace[1]
