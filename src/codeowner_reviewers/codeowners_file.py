from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .errors import CodeownersNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_CODEOWNERS_PATH = ".github/CODEOWNERS"

# Searched in this order after the configured path.
STANDARD_LOCATIONS = (
    ".github/CODEOWNERS",
    "CODEOWNERS",
    "docs/CODEOWNERS",
    ".gitlab/CODEOWNERS",
)


@dataclass(frozen=True)
class Rule:
    pattern: str
    owners: tuple[str, ...]
    line: int = 0
    source: str = "CODEOWNERS"

    @property
    def depth(self) -> int:
        """Number of '/'-delimited segments; higher ranks earlier."""
        return self.pattern.count("/") + 1


def parse_codeowners_text(text: str, source: str = "CODEOWNERS") -> list[Rule]:
    """Parse CODEOWNERS text into rules, in file order.

    Blank lines and '#' comments are skipped. Owner tokens that do not start
    with '@' are ignored, and a line left without owners yields no rule.
    """
    rules: list[Rule] = []
    # A BOM survives str.strip(), drop it before the first line is read.
    text = text.removeprefix("\ufeff")
    for idx, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        pattern, *candidates = line.split()
        owners = tuple(dict.fromkeys(o for o in candidates if o.startswith("@")))
        if not owners:
            logger.debug(f"{source}:{idx}: no @owners for '{pattern}', line ignored")
            continue

        rules.append(Rule(pattern=pattern, owners=owners, line=idx, source=source))

    logger.info(f"Parsed {len(rules)} rules from {source}")
    return rules


def candidate_paths(preferred: str | None = None) -> list[str]:
    """Locations to try, configured path first, without duplicates."""
    paths: list[str] = []
    if preferred and preferred.strip():
        paths.append(preferred.strip())
    paths.extend(STANDARD_LOCATIONS)
    return list(dict.fromkeys(paths))


def find_codeowners(repo_root: Path, candidates: Iterable[str]) -> Path:
    searched: list[str] = []
    for rel in candidates:
        searched.append(rel)
        p = repo_root / rel
        logger.debug(f"Checking for CODEOWNERS at: {p}")
        if p.is_file():
            logger.info(f"Found CODEOWNERS at: {rel}")
            return p
    raise CodeownersNotFoundError(searched)


def read_codeowners(repo_root: Path, preferred: str | None = None) -> tuple[str, str]:
    """Return (text, relative location) of the first CODEOWNERS file on disk."""
    path = find_codeowners(repo_root, candidate_paths(preferred))
    text = path.read_text(encoding="utf-8-sig", errors="replace")
    logger.info(f"Read {len(text)} bytes from {path}")
    try:
        rel = str(path.relative_to(repo_root))
    except ValueError:
        rel = str(path)
    return text, rel
