import shutil
import subprocess
from pathlib import Path

from cargo_affected.errors import ManifestError


def _cargo_available() -> bool:
    return shutil.which("cargo") is not None


class CargoMetadataProvider:
    """Produce the workspace manifest by running ``cargo metadata``.

    Implements the ``ManifestProvider`` protocol.
    """

    def __init__(self, workspace_dir: str | Path = ".") -> None:
        self._workspace_dir = Path(workspace_dir)

    def load(self) -> str:
        if not _cargo_available():
            raise ManifestError("cargo is not installed or not in PATH")
        result = subprocess.run(
            ["cargo", "metadata", "--format-version", "1", "--no-deps"],
            cwd=self._workspace_dir,
            check=False,
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            raise ManifestError(f"cargo metadata failed: {result.stderr.strip()}")
        return result.stdout


class FileManifestProvider:
    """Read a previously captured ``cargo metadata`` document from disk."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def load(self) -> str:
        try:
            return self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ManifestError(f"cannot read manifest {self._path}: {exc}") from exc
