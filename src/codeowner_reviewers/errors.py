from __future__ import annotations

from typing import Sequence


class CodeownerReviewersError(Exception):
    """Base exception for codeowner-reviewers."""


class ConfigError(CodeownerReviewersError):
    """Configuration is missing or invalid."""


class GitError(CodeownerReviewersError):
    """Git invocation failed."""


class GitHubError(CodeownerReviewersError):
    """GitHub API call failed."""

    def __init__(self, message: str, *, status: int | None = None):
        super().__init__(message)
        self.status = status


class UsageError(CodeownerReviewersError):
    """Invalid CLI usage (user error)."""


class CodeownersNotFoundError(CodeownerReviewersError):
    """No ownership-rules file exists at any searched location."""

    def __init__(self, searched: Sequence[str] = ()):
        super().__init__("CODEOWNERS file not found in any standard location")
        self.searched = tuple(searched)
