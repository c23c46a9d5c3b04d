from __future__ import annotations

from .classify import Classification
from .resolve import Assignment, NotFound

COMMENT_MARKER = "<!-- codeowner-reviewers -->"


def _bullets(handles) -> str:
    return "\n".join(f"- {h}" for h in handles)


def render_reviewers_comment(
    classification: Classification,
    *,
    custom_message: str = "",
    marker: str = COMMENT_MARKER,
) -> str:
    c = classification
    out = f"{marker}\n" if marker else ""
    out += "## 👥 Required Reviewers\n\n"

    if c.regular:
        out += "### Reviewers for this PR:\n\n"
        out += _bullets(c.regular)
        out += "\n\n"
        out += "> 💡 These reviewers were automatically assigned based on the files changed in this PR.\n"
    elif not c.security_from_rules:
        out += "> ⚠️ No CODEOWNERS found for the changed files in this PR.\n"
        out += "> Please ensure you have a CODEOWNERS file set up in your repository.\n\n"

    if c.has_security:
        out += "\n## 🔒 Security Approval Required\n\n"
        out += "### Security Reviewers:\n\n"
        if c.security_from_rules:
            out += "#### From CODEOWNERS:\n\n"
            out += _bullets(c.security_from_rules)
            out += "\n\n"
        if c.security_additional:
            out += "#### Additional Security Reviewers:\n\n"
            out += _bullets(c.security_additional)
            out += "\n\n"
        out += "> ⚡ Security review is required for this PR. Please ensure all security reviewers approve the changes.\n\n"

    if custom_message:
        out += f"\n### ℹ️ Info\n\n{custom_message}\n\n"

    out += "\n---\n"
    out += "*This comment was automatically generated by the CODEOWNERS Reviewers action*"
    return out


def render_not_found_comment(result: NotFound, *, marker: str = COMMENT_MARKER) -> str:
    out = f"{marker}\n" if marker else ""
    out += f"## ⚠️ CODEOWNERS Error\n\n{result.message}\n\n"
    out += "Please check the GitHub Actions logs for more details."
    return out


def render_assignment_text(assignment: Assignment) -> str:
    """Plain-text summary for the terminal."""
    r = assignment.resolution
    c = assignment.classification
    lines: list[str] = [
        f"{assignment.source}: {r.rules_parsed} rules, {r.files_processed} changed files",
        "",
    ]

    for path, owners in sorted(r.files_to_owners.items()):
        lines.append(f"{path}: {' '.join(owners)}")
    for path in r.unmatched_files:
        lines.append(f"{path}: (no owners)")
    if r.files_processed:
        lines.append("")

    lines.append("reviewers: " + (", ".join(c.regular) or "(none)"))
    if c.has_security:
        lines.append("security (from CODEOWNERS): " + (", ".join(c.security_from_rules) or "(none)"))
        lines.append("security (additional): " + (", ".join(c.security_additional) or "(none)"))
    if r.skipped_patterns:
        lines.append("skipped invalid patterns: " + ", ".join(r.skipped_patterns))
    return "\n".join(lines)
