from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Iterable


def normalize_changed_path(path: str, repo_root: Path | None = None) -> str:
    """Bring a user-supplied path into the form PR file lists use.

    Review hosts report paths relative to the repository root with '/'
    separators and no leading './' or '/'. Patterns are matched against that
    exact form, so CLI input is rewritten to it.
    """
    p = path.strip().replace("\\", "/")

    if repo_root is not None and Path(p).is_absolute():
        try:
            p = Path(p).relative_to(repo_root).as_posix()
        except ValueError:
            pass

    while p.startswith("./"):
        p = p[2:]
    p = p.lstrip("/")

    return str(PurePosixPath(p)) if p else p


def normalize_changed_paths(paths: Iterable[str], repo_root: Path | None = None) -> list[str]:
    out = [normalize_changed_path(p, repo_root=repo_root) for p in paths if p and p.strip()]
    return list(dict.fromkeys(p for p in out if p))
