from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence


@dataclass(frozen=True)
class Classification:
    regular: tuple[str, ...] = ()
    security_from_rules: tuple[str, ...] = ()
    security_additional: tuple[str, ...] = ()

    @property
    def has_security(self) -> bool:
        return bool(self.security_from_rules or self.security_additional)


def classify_reviewers(
    reviewers: Iterable[str],
    security_reviewers: Sequence[str] | None = None,
) -> Classification:
    """Split the reviewer set into regular and security reviewers.

    ``regular`` and ``security_from_rules`` are sorted. ``security_additional``
    keeps the order of ``security_reviewers`` and drops handles that already
    came from CODEOWNERS.
    """
    security = list(security_reviewers or ())
    security_set = set(security)
    found = set(reviewers)

    regular = sorted(found - security_set)
    from_rules = sorted(found & security_set)
    additional = [r for r in security if r not in found]

    return Classification(
        regular=tuple(regular),
        security_from_rules=tuple(from_rules),
        security_additional=tuple(additional),
    )
