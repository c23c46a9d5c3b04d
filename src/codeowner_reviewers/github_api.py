from __future__ import annotations

import base64
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Iterable, Mapping

from .errors import CodeownersNotFoundError, GitHubError

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"

# GitHub stops listing pull request files after 3000 entries.
MAX_FILE_PAGES = 30


def _request(
    method: str,
    url: str,
    *,
    token: str,
    body: Mapping[str, Any] | None = None,
    timeout_s: int = 20,
) -> tuple[int, Any, dict[str, str]]:
    data: bytes | None = None
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": "codeowner-reviewers",
        "Authorization": f"Bearer {token}",
        "X-GitHub-Api-Version": "2022-11-28",
    }
    if body is not None:
        data = json.dumps(body).encode("utf-8")
        headers["Content-Type"] = "application/json"

    req = urllib.request.Request(url, method=method, data=data, headers=headers)
    try:
        with urllib.request.urlopen(req, timeout=timeout_s) as resp:
            raw = resp.read().decode("utf-8")
            payload = json.loads(raw) if raw else {}
            return resp.status, payload, dict(resp.headers.items())
    except urllib.error.HTTPError as e:
        raw = (e.read() or b"").decode("utf-8", errors="replace")
        try:
            details = json.loads(raw) if raw else {}
        except ValueError:
            details = {"raw": raw}
        raise GitHubError(
            f"GitHub API {method} {url} failed: {e.code} {e.reason}: {details}", status=e.code
        ) from e
    except urllib.error.URLError as e:
        raise GitHubError(f"GitHub API {method} {url} failed: {e}") from e


def _comments_url(owner: str, repo: str, pr_number: int) -> str:
    return f"{GITHUB_API}/repos/{owner}/{repo}/issues/{pr_number}/comments"


def _comment_url(owner: str, repo: str, comment_id: int) -> str:
    return f"{GITHUB_API}/repos/{owner}/{repo}/issues/comments/{comment_id}"


def _files_url(owner: str, repo: str, pr_number: int) -> str:
    return f"{GITHUB_API}/repos/{owner}/{repo}/pulls/{pr_number}/files"


def _contents_url(owner: str, repo: str, path: str) -> str:
    return f"{GITHUB_API}/repos/{owner}/{repo}/contents/{urllib.parse.quote(path)}"


def list_pr_files(
    owner: str,
    repo: str,
    pr_number: int,
    *,
    token: str,
    max_pages: int = MAX_FILE_PAGES,
) -> list[str]:
    files: list[str] = []
    for page in range(1, max_pages + 1):
        url = _files_url(owner, repo, pr_number) + f"?per_page=100&page={page}"
        _, payload, _ = _request("GET", url, token=token)
        if not isinstance(payload, list):
            break

        for f in payload:
            name = f.get("filename") if isinstance(f, dict) else None
            if isinstance(name, str) and name:
                files.append(name)

        if len(payload) < 100:
            break

    logger.info(f"Found {len(files)} changed files in PR #{pr_number}")
    return files


def get_file_text(owner: str, repo: str, path: str, *, token: str, ref: str | None = None) -> str | None:
    """Fetch a file through the contents API; None if it does not exist."""
    url = _contents_url(owner, repo, path)
    if ref:
        url += "?" + urllib.parse.urlencode({"ref": ref})
    try:
        _, payload, _ = _request("GET", url, token=token)
    except GitHubError as e:
        if e.status == 404:
            return None
        raise
    if not isinstance(payload, dict) or payload.get("type") != "file":
        return None
    content = payload.get("content") or ""
    return base64.b64decode(content).decode("utf-8-sig", errors="replace")


def fetch_codeowners(
    owner: str,
    repo: str,
    candidates: Iterable[str],
    *,
    token: str,
    ref: str | None = None,
) -> tuple[str, str]:
    searched: list[str] = []
    for path in candidates:
        searched.append(path)
        logger.debug(f"Checking for CODEOWNERS at: {owner}/{repo}/{path}")
        text = get_file_text(owner, repo, path.lstrip("/"), token=token, ref=ref)
        if text is not None:
            logger.info(f"Found CODEOWNERS via contents API at: {path}")
            return text, path
    raise CodeownersNotFoundError(searched)


def find_existing_comment_id(
    owner: str,
    repo: str,
    pr_number: int,
    *,
    token: str,
    marker: str,
    max_pages: int = 10,
) -> int | None:
    # Paginate through issue comments and find our marker.
    for page in range(1, max_pages + 1):
        url = _comments_url(owner, repo, pr_number) + f"?per_page=100&page={page}"
        _, payload, _ = _request("GET", url, token=token)
        if not isinstance(payload, list):
            return None

        for c in payload:
            body = (c.get("body") or "") if isinstance(c, dict) else ""
            if marker in body:
                cid = c.get("id")
                if isinstance(cid, int):
                    return cid

        if len(payload) < 100:
            break

    return None


def upsert_pr_comment(
    owner: str,
    repo: str,
    pr_number: int,
    *,
    token: str,
    body: str,
    marker: str,
) -> None:
    cid = find_existing_comment_id(owner, repo, pr_number, token=token, marker=marker)
    if cid is None:
        _request("POST", _comments_url(owner, repo, pr_number), token=token, body={"body": body})
    else:
        _request("PATCH", _comment_url(owner, repo, cid), token=token, body={"body": body})
