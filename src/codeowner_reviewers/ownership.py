from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from .codeowners_file import Rule
from .patterns import CompiledPattern, PatternSyntaxError, compile_pattern

logger = logging.getLogger(__name__)


def rank_rules(rules: Iterable[Rule]) -> list[Rule]:
    """Most specific (deepest) patterns first; ties keep file order."""
    return sorted(rules, key=lambda r: r.depth, reverse=True)


@dataclass(frozen=True)
class Match:
    path: str
    chosen: Rule | None
    matches: list[Rule] = field(default_factory=list)

    @property
    def owners(self) -> tuple[str, ...]:
        return self.chosen.owners if self.chosen else ()


class OwnershipIndex:
    """Ranked, compiled CODEOWNERS rules (first match wins)."""

    def __init__(self, rules: Iterable[Rule]):
        self._rules = rank_rules(rules)
        self._compiled: list[tuple[Rule, CompiledPattern]] = []
        self._skipped: list[Rule] = []
        for r in self._rules:
            try:
                self._compiled.append((r, compile_pattern(r.pattern)))
            except PatternSyntaxError as e:
                logger.warning(f"{r.source}:{r.line}: skipping rule: {e}")
                self._skipped.append(r)

    @property
    def rules(self) -> list[Rule]:
        return list(self._rules)

    @property
    def skipped(self) -> list[Rule]:
        return list(self._skipped)

    def match(self, path: str) -> Match:
        for r, compiled in self._compiled:
            if compiled.matches(path):
                return Match(path=path, chosen=r, matches=[r])
        return Match(path=path, chosen=None)

    def explain(self, path: str) -> Match:
        """Like match(), but collects every matching rule in rank order."""
        matches = [r for r, compiled in self._compiled if compiled.matches(path)]
        return Match(path=path, chosen=matches[0] if matches else None, matches=matches)
