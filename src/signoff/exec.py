"""Subprocess runner for local git queries."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ExecResult:
    """Result envelope for subprocess execution."""

    argv: tuple[str, ...]
    cwd: Path
    returncode: int
    stdout: str
    stderr: str


class ExecError(RuntimeError):
    """Raised when a command returns non-zero in check mode."""

    def __init__(self, result: ExecResult):
        rendered = " ".join(result.argv)
        detail = (result.stderr or result.stdout).strip()
        super().__init__(f"command failed ({result.returncode}): {rendered}\n{detail}")
        self.result = result


def run_git(
    args: list[str],
    *,
    repo_root: Path,
    check: bool = True,
) -> ExecResult:
    """Run git rooted at ``repo_root`` and return a structured result."""
    argv = ["git", *args]
    try:
        completed = subprocess.run(argv, cwd=repo_root, capture_output=True, text=True, check=False)
    except FileNotFoundError as exc:
        raise ExecError(
            ExecResult(argv=tuple(argv), cwd=repo_root, returncode=127, stdout="", stderr=str(exc))
        ) from exc
    result = ExecResult(
        argv=tuple(argv),
        cwd=repo_root.resolve(),
        returncode=completed.returncode,
        stdout=completed.stdout,
        stderr=completed.stderr,
    )
    if check and result.returncode != 0:
        raise ExecError(result)
    return result


def remote_url(repo_root: Path, remote: str = "origin") -> str | None:
    """Return the configured URL for ``remote``, or None when unset."""
    try:
        result = run_git(["remote", "get-url", remote], repo_root=repo_root, check=False)
    except ExecError:
        # git itself is unavailable
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None
