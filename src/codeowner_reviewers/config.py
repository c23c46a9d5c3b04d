from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from .codeowners_file import DEFAULT_CODEOWNERS_PATH
from .errors import ConfigError

DEFAULT_CONFIG_FILE = ".github/codeowner-reviewers.yml"

_KEYS = ("codeowners_path", "custom_message", "security_reviewers")


@dataclass(frozen=True)
class ReviewerConfig:
    codeowners_path: str = DEFAULT_CODEOWNERS_PATH
    custom_message: str = ""
    security_reviewers: tuple[str, ...] = ()

    def override(
        self,
        *,
        codeowners_path: str | None = None,
        custom_message: str | None = None,
        security_reviewers: str | list[str] | None = None,
    ) -> "ReviewerConfig":
        """Return a copy where every non-empty argument replaces the current value."""
        cfg = self
        if codeowners_path and codeowners_path.strip():
            cfg = replace(cfg, codeowners_path=codeowners_path.strip())
        if custom_message:
            cfg = replace(cfg, custom_message=custom_message)
        if security_reviewers:
            parsed = parse_security_reviewers(security_reviewers, source="input")
            if parsed:
                cfg = replace(cfg, security_reviewers=parsed)
        return cfg


def parse_security_reviewers(value: Any, *, source: str) -> tuple[str, ...]:
    """Accept "a, b" or ["a", "b"]; entries are trimmed, blanks dropped, order and repeats kept."""
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, list) and all(isinstance(x, str) for x in value):
        items = value
    else:
        raise ConfigError(f"{source}: 'security_reviewers' must be a string or a list of strings")
    return tuple(s.strip() for s in items if s.strip())


def parse_config_obj(data: Any, *, source: str) -> ReviewerConfig:
    if data is None:
        return ReviewerConfig()
    if not isinstance(data, Mapping):
        raise ConfigError(f"{source}: expected a mapping")

    unknown = sorted(str(k) for k in data if k not in _KEYS)
    if unknown:
        raise ConfigError(f"{source}: unknown keys: {', '.join(unknown)}")

    path = data.get("codeowners_path") or DEFAULT_CODEOWNERS_PATH
    if not isinstance(path, str):
        raise ConfigError(f"{source}: 'codeowners_path' must be a string")
    message = data.get("custom_message") or ""
    if not isinstance(message, str):
        raise ConfigError(f"{source}: 'custom_message' must be a string")

    return ReviewerConfig(
        codeowners_path=path,
        custom_message=message,
        security_reviewers=parse_security_reviewers(data.get("security_reviewers"), source=source),
    )


def load_config(path: Path) -> ReviewerConfig:
    if not path.exists():
        return ReviewerConfig()
    try:
        obj = yaml.safe_load(path.read_text(encoding="utf-8"))
    except Exception as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e
    return parse_config_obj(obj, source=str(path))
