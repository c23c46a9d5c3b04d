from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .codeowners_file import candidate_paths, read_codeowners
from .config import DEFAULT_CONFIG_FILE, ReviewerConfig, load_config
from .errors import CodeownersNotFoundError, GitHubError, UsageError
from .github_api import fetch_codeowners, list_pr_files, upsert_pr_comment
from .markdown import COMMENT_MARKER, render_not_found_comment, render_reviewers_comment
from .resolve import NotFound, assign_reviewers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionInputs:
    codeowners_path: str = ""
    custom_message: str = ""
    security_reviewers: str = ""
    config_file: str = DEFAULT_CONFIG_FILE
    pr_number: int | None = None
    comment: bool = True
    remote_fallback: bool = True


class GitHubHost:
    """The three host collaborators, backed by the workspace and the REST API."""

    def __init__(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        *,
        token: str,
        workspace: Path,
        head_ref: str | None = None,
        remote_fallback: bool = True,
    ):
        self.owner = owner
        self.repo = repo
        self.pr_number = pr_number
        self.token = token
        self.workspace = workspace
        self.head_ref = head_ref
        self.remote_fallback = remote_fallback

    def list_changed_files(self) -> list[str]:
        return list_pr_files(self.owner, self.repo, self.pr_number, token=self.token)

    def read_codeowners(self, preferred: str | None) -> tuple[str, str]:
        try:
            return read_codeowners(self.workspace, preferred)
        except CodeownersNotFoundError:
            if not (self.remote_fallback and self.token):
                raise
            logger.info("CODEOWNERS not in workspace, trying the contents API")
        return fetch_codeowners(
            self.owner, self.repo, candidate_paths(preferred), token=self.token, ref=self.head_ref
        )

    def post_report(self, body: str) -> None:
        upsert_pr_comment(
            self.owner, self.repo, self.pr_number, token=self.token, body=body, marker=COMMENT_MARKER
        )


def _load_github_event() -> tuple[str | None, dict[str, Any] | None]:
    event_name = os.getenv("GITHUB_EVENT_NAME")
    event_path = os.getenv("GITHUB_EVENT_PATH")
    if not event_name or not event_path:
        return None, None
    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
        if isinstance(payload, dict):
            return event_name, payload
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read event payload {event_path}: {e}")
    return event_name, None


def _get_pr_number(payload: dict[str, Any] | None) -> int | None:
    """PR number from pull_request, issue_comment or issues payloads."""
    if not payload:
        return None
    for key in ("issue", "pull_request"):
        obj = payload.get(key)
        if isinstance(obj, dict) and isinstance(obj.get("number"), int):
            return obj["number"]
    num = payload.get("number")
    return num if isinstance(num, int) else None


def _get_head_ref(payload: dict[str, Any] | None) -> str | None:
    if not payload:
        return None
    pr = payload.get("pull_request") or {}
    return (pr.get("head") or {}).get("sha")


def _github_repo() -> tuple[str, str]:
    repo = os.getenv("GITHUB_REPOSITORY", "")
    if "/" not in repo:
        raise UsageError("GITHUB_REPOSITORY is not set (expected 'owner/repo')")
    owner, name = repo.split("/", 1)
    return owner, name


def _workspace() -> Path:
    return Path(os.getenv("GITHUB_WORKSPACE") or Path.cwd())


def _write_step_summary(markdown: str) -> None:
    p = os.getenv("GITHUB_STEP_SUMMARY")
    if not p:
        return
    try:
        with open(p, "a", encoding="utf-8") as f:
            f.write(markdown + "\n")
    except OSError as e:
        # Don't fail the action if the summary can't be written.
        logger.warning(f"Could not write step summary: {e}")


def _write_outputs(*, reviewers: str) -> None:
    out = os.getenv("GITHUB_OUTPUT")
    if not out:
        return
    with open(out, "a", encoding="utf-8") as f:
        f.write(f"reviewers={reviewers}\n")


def resolve_config(inputs: ActionInputs, workspace: Path) -> ReviewerConfig:
    base = load_config(workspace / inputs.config_file)
    return base.override(
        codeowners_path=inputs.codeowners_path,
        custom_message=inputs.custom_message,
        security_reviewers=inputs.security_reviewers,
    )


def build_host(inputs: ActionInputs) -> GitHubHost:
    _, payload = _load_github_event()
    pr_number = inputs.pr_number if inputs.pr_number is not None else _get_pr_number(payload)
    if pr_number is None:
        raise UsageError("No pull request number (run on pull_request or issue_comment events, or pass --pr-number)")

    token = os.getenv("GITHUB_TOKEN") or os.getenv("GH_TOKEN") or ""
    if not token:
        raise UsageError("GITHUB_TOKEN is not set")

    owner, repo = _github_repo()
    return GitHubHost(
        owner,
        repo,
        pr_number,
        token=token,
        workspace=_workspace(),
        head_ref=_get_head_ref(payload),
        remote_fallback=inputs.remote_fallback,
    )


def run_action(inputs: ActionInputs, host: Any = None, config: ReviewerConfig | None = None) -> int:
    """Resolve reviewers for the current PR and report them.

    Returns 0 on success, 1 when no CODEOWNERS file exists or the comment
    could not be posted. The ``reviewers`` output is written in every case.
    """
    host = host or build_host(inputs)
    config = config or resolve_config(inputs, _workspace())

    try:
        changed_files = host.list_changed_files()
        result = assign_reviewers(
            lambda: host.read_codeowners(config.codeowners_path),
            changed_files,
            security_reviewers=config.security_reviewers,
            custom_message=config.custom_message,
        )
    except GitHubError:
        _write_outputs(reviewers="")
        raise

    if isinstance(result, NotFound):
        body = render_not_found_comment(result)
        if inputs.comment:
            logger.info("Posting comment about missing CODEOWNERS file")
            try:
                host.post_report(body)
            except GitHubError as e:
                logger.error(f"Failed to post comment: {e}")
        _write_step_summary(body)
        _write_outputs(reviewers="")
        return 1

    body = render_reviewers_comment(result.classification, custom_message=result.custom_message)
    _write_step_summary(body)

    rc = 0
    if inputs.comment:
        try:
            logger.info("Posting comment to PR")
            host.post_report(body)
            logger.info("Successfully posted comment")
        except GitHubError as e:
            logger.error(f"Failed to post comment: {e}")
            rc = 1

    _write_outputs(reviewers=result.reviewers_output)
    return rc
