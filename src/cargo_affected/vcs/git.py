import logging
import subprocess
from pathlib import Path

from cargo_affected.errors import DiffError

logger = logging.getLogger(__name__)


def _run_git(args: list[str], cwd: Path) -> str:
    try:
        result = subprocess.run(
            ["git", "-C", str(cwd), *args],
            check=False,
            capture_output=True,
        )
    except FileNotFoundError as exc:
        raise DiffError("git is not installed or not in PATH") from exc
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", "replace").strip()
        message = stderr or f"exit code {result.returncode}"
        raise DiffError(f"git {' '.join(args)} failed: {message}")
    # Paths need not be valid UTF-8; keep the raw bytes round-trippable.
    return result.stdout.decode("utf-8", "surrogateescape")


class GitVcsProvider:
    """Diff and merge-base lookups against a local git checkout.

    Implements the ``VcsProvider`` protocol. Paths are reported relative to
    the repository root, which is expected to be the workspace root.
    """

    def __init__(self, repo_dir: str | Path = ".") -> None:
        self._repo_dir = Path(repo_dir)

    def _verify(self, ref: str) -> None:
        _run_git(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"], self._repo_dir)

    def changed_files(self, base_ref: str, head_ref: str) -> list[str]:
        for ref in (base_ref, head_ref):
            try:
                self._verify(ref)
            except DiffError as exc:
                raise DiffError(f"cannot resolve reference {ref!r} (shallow clone or unknown SHA?)") from exc
        output = _run_git(
            ["-c", "core.quotepath=off", "diff", "--name-only", "--no-renames", "-z", base_ref, head_ref],
            self._repo_dir,
        )
        return [path for path in output.split("\0") if path]

    def merge_base(self, first_ref: str, second_ref: str) -> str:
        output = _run_git(["merge-base", first_ref, second_ref], self._repo_dir).strip()
        if not output:
            raise DiffError(f"no merge-base between {first_ref!r} and {second_ref!r}")
        logger.debug("merge-base(%s, %s) = %s", first_ref, second_ref, output)
        return output
