from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache


class PatternSyntaxError(ValueError):
    pass


@dataclass(frozen=True)
class CompiledPattern:
    raw: str
    regex: re.Pattern[str]

    def matches(self, path: str) -> bool:
        return bool(self.regex.fullmatch(path))


def _glob_to_regex(pat: str) -> str:
    """Translate a CODEOWNERS pattern to a regex body.

    Only the wildcards are rewritten:
      - *  any run of characters, '/' included
      - ?  exactly one character
      - [] left as-is, so they act as a regex character class

    Nothing else is escaped. A '.' or '+' in the pattern keeps its regex
    meaning, which existing CODEOWNERS files rely on.
    """
    out: list[str] = []
    for c in pat:
        if c == "*":
            out.append(".*")
        elif c == "?":
            out.append(".")
        else:
            out.append(c)
    return "".join(out)


@lru_cache(maxsize=4096)
def compile_pattern(pattern: str) -> CompiledPattern:
    if not pattern:
        raise PatternSyntaxError("empty pattern")

    # Always anchored at both ends; there is no basename or directory shorthand.
    rx = "^" + _glob_to_regex(pattern) + "$"

    try:
        compiled = re.compile(rx)
    except re.error as e:
        raise PatternSyntaxError(f"invalid pattern '{pattern}': {e}") from e

    return CompiledPattern(raw=pattern, regex=compiled)
