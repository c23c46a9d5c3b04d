from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from .errors import GitError

logger = logging.getLogger(__name__)


def _run_git(repo_root: Path, args: Sequence[str]) -> str:
    logger.debug(f"git {' '.join(args)} (in {repo_root})")
    try:
        cp = subprocess.run(
            ["git", *args],
            cwd=str(repo_root),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=True,
        )
        return cp.stdout
    except FileNotFoundError as e:
        raise GitError("git not found on PATH") from e
    except subprocess.CalledProcessError as e:
        msg = e.stderr.strip() or e.stdout.strip() or str(e)
        raise GitError(f"git {' '.join(args)} failed: {msg}") from e


def find_repo_root(cwd: Path | None = None) -> Path:
    cwd = cwd or Path.cwd()
    out = _run_git(cwd, ["rev-parse", "--show-toplevel"]).strip()
    if not out:
        raise GitError("Not a git repository (or any of the parent directories)")
    return Path(out)


def git_changed_files(repo_root: Path, rev_range: str) -> list[str]:
    """Files touched by rev_range, the local stand-in for a PR's file list."""
    out = _run_git(repo_root, ["diff", "--name-only", rev_range])
    return [line.strip() for line in out.splitlines() if line.strip()]
