from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .action_runner import ActionInputs, run_action
from .codeowners_file import parse_codeowners_text, read_codeowners
from .config import ReviewerConfig, load_config
from .errors import CodeownersNotFoundError, ConfigError, GitError, GitHubError, UsageError
from .gitutils import find_repo_root, git_changed_files
from .markdown import render_assignment_text, render_not_found_comment, render_reviewers_comment
from .ownership import OwnershipIndex
from .paths import normalize_changed_path, normalize_changed_paths
from .resolve import NotFound, assign_reviewers
from .version import __version__


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _repo_root(args_repo_root: str | None) -> Path:
    if args_repo_root:
        return Path(args_repo_root).resolve()
    try:
        return find_repo_root()
    except GitError:
        return Path.cwd()


def _config(args: argparse.Namespace, repo_root: Path) -> ReviewerConfig:
    base = load_config(repo_root / args.config)
    return base.override(
        codeowners_path=args.codeowners_path,
        custom_message=getattr(args, "custom_message", None),
        security_reviewers=getattr(args, "security_reviewers", None),
    )


def _rule_json(r) -> dict:
    return {"pattern": r.pattern, "owners": list(r.owners), "line": r.line, "source": r.source}


def cmd_who_owns(args: argparse.Namespace) -> int:
    repo_root = _repo_root(args.repo_root)
    cfg = _config(args, repo_root)

    text, source = read_codeowners(repo_root, cfg.codeowners_path)
    idx = OwnershipIndex(parse_codeowners_text(text, source=source))
    path = normalize_changed_path(args.path, repo_root=repo_root)
    m = idx.explain(path)

    if args.format == "json":
        payload = {
            "path": path,
            "owners": list(m.owners),
            "chosen_rule": _rule_json(m.chosen) if m.chosen else None,
            "matches": [_rule_json(r) for r in m.matches],
            "version": __version__,
        }
        print(json.dumps(payload, indent=2))
        return 0

    if m.chosen is None:
        print(f"{path}: (no owners)")
    else:
        print(f"{path}: {' '.join(m.owners)}")

    if args.explain:
        print("")
        if not m.matches:
            print("No matching rules.")
        else:
            print("Matched rules (most specific first, first match wins):")
            for r in m.matches:
                chosen = "  <== chosen" if r is m.chosen else ""
                print(f"- {r.pattern} -> {' '.join(r.owners)} ({r.source}:{r.line}, depth {r.depth}){chosen}")

    return 0


def cmd_reviewers(args: argparse.Namespace) -> int:
    repo_root = _repo_root(args.repo_root)
    cfg = _config(args, repo_root)

    if args.paths and (args.stdin or args.diff):
        raise UsageError("pass changed files as arguments, --stdin or --diff, not several")
    if args.paths:
        changed = list(args.paths)
    elif args.stdin:
        changed = [line.strip() for line in sys.stdin.read().splitlines() if line.strip()]
    else:
        changed = git_changed_files(repo_root, args.diff or "HEAD~1...HEAD")
    changed = normalize_changed_paths(changed, repo_root=repo_root)

    result = assign_reviewers(
        lambda: read_codeowners(repo_root, cfg.codeowners_path),
        changed,
        security_reviewers=cfg.security_reviewers,
        custom_message=cfg.custom_message,
    )

    if args.format == "json":
        if isinstance(result, NotFound):
            payload = {"error": result.message, "searched": list(result.searched), "reviewers": ""}
        else:
            r = result.resolution
            c = result.classification
            payload = {
                "source": result.source,
                "reviewers": result.reviewers_output,
                "regular": list(c.regular),
                "security_from_codeowners": list(c.security_from_rules),
                "security_additional": list(c.security_additional),
                "files": {k: list(v) for k, v in sorted(r.files_to_owners.items())},
                "unmatched_files": r.unmatched_files,
                "files_processed": r.files_processed,
                "rules_parsed": r.rules_parsed,
                "version": __version__,
            }
        print(json.dumps(payload, indent=2))
    elif isinstance(result, NotFound):
        if args.format == "markdown":
            print(render_not_found_comment(result, marker=""))
        else:
            print(f"error: {result.message} (searched: {', '.join(result.searched)})", file=sys.stderr)
    elif args.format == "markdown":
        print(render_reviewers_comment(result.classification, custom_message=result.custom_message, marker=""))
    else:
        print(render_assignment_text(result))

    return 1 if isinstance(result, NotFound) else 0


def _flag(value: str) -> bool:
    return value.strip().lower() == "true"


def cmd_action(args: argparse.Namespace) -> int:
    inputs = ActionInputs(
        codeowners_path=args.codeowners_path or "",
        custom_message=args.custom_message or "",
        security_reviewers=args.security_reviewers or "",
        config_file=args.config,
        pr_number=args.pr_number,
        comment=_flag(args.comment),
        remote_fallback=_flag(args.remote_fallback),
    )
    return run_action(inputs)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="codeowner-reviewers",
        description="Find the CODEOWNERS reviewers for a change set",
    )
    p.add_argument("--codeowners-path", default=None, help="CODEOWNERS location to try first (relative to repo root)")
    p.add_argument("--config", default=".github/codeowner-reviewers.yml", help="Optional YAML config (relative to repo root)")
    p.add_argument("--repo-root", default=None, help="Repository root (default: auto-detect with git)")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for info, -vv for debug logging")
    p.add_argument("--version", action="version", version=f"codeowner-reviewers {__version__}")

    sub = p.add_subparsers(dest="cmd", required=True)

    w = sub.add_parser("who-owns", aliases=["who", "owner"], help="Find the owners of one path")
    w.add_argument("path", help="Path to a file (relative or absolute)")
    w.add_argument("--format", choices=["text", "json"], default="text")
    w.add_argument("--explain", action="store_true", help="Show every matching rule in precedence order")
    w.set_defaults(func=cmd_who_owns)

    r = sub.add_parser("reviewers", help="Compute reviewers for a list of changed files or a git diff")
    r.add_argument("paths", nargs="*", help="Changed files")
    r.add_argument("--diff", default=None, help="Git rev range, e.g. origin/main...HEAD")
    r.add_argument("--stdin", action="store_true", help="Read changed files (one per line) from stdin")
    r.add_argument("--security-reviewers", default=None, help="Comma-separated security reviewers")
    r.add_argument("--custom-message", default=None, help="Extra text for the markdown report")
    r.add_argument("--format", choices=["text", "json", "markdown"], default="text")
    r.set_defaults(func=cmd_reviewers)

    a = sub.add_parser("action", help="(internal) run inside GitHub Actions")
    a.add_argument("--security-reviewers", default=None, help="Comma-separated security reviewers")
    a.add_argument("--custom-message", default=None, help="Extra text for the PR comment")
    a.add_argument("--pr-number", type=int, default=None, help="Override PR number (default: from GitHub event)")
    a.add_argument("--comment", default="true", help="true/false - comment on PR")
    a.add_argument("--remote-fallback", default="true", help="true/false - read CODEOWNERS via the API if not checked out")
    a.set_defaults(func=cmd_action)

    return p


def main(argv: list[str] | None = None) -> None:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
        _setup_logging(args.verbose)
        rc = args.func(args)
    except UsageError as e:
        print(f"error: {e}", file=sys.stderr)
        rc = 2
    except ConfigError as e:
        print(f"config error: {e}", file=sys.stderr)
        rc = 2
    except GitError as e:
        print(f"git error: {e}", file=sys.stderr)
        rc = 2
    except GitHubError as e:
        print(f"github error: {e}", file=sys.stderr)
        rc = 2
    except CodeownersNotFoundError as e:
        print(f"error: {e} (searched: {', '.join(e.searched)})", file=sys.stderr)
        rc = 1
    except KeyboardInterrupt:
        rc = 130

    raise SystemExit(rc)
