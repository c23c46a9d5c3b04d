from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Sequence

from .classify import Classification, classify_reviewers
from .codeowners_file import parse_codeowners_text
from .errors import CodeownersNotFoundError
from .ownership import OwnershipIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    reviewers: tuple[str, ...] = ()  # first-seen order
    files_to_owners: dict[str, tuple[str, ...]] = field(default_factory=dict)
    unmatched_files: list[str] = field(default_factory=list)
    files_processed: int = 0
    rules_parsed: int = 0
    skipped_patterns: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Assignment:
    resolution: Resolution
    classification: Classification
    source: str = "CODEOWNERS"
    custom_message: str = ""

    @property
    def reviewers(self) -> list[str]:
        return sorted(self.resolution.reviewers)

    @property
    def reviewers_output(self) -> str:
        return ",".join(self.reviewers)


@dataclass(frozen=True)
class NotFound:
    message: str
    searched: tuple[str, ...] = ()

    @property
    def reviewers_output(self) -> str:
        return ""


def _filename(changed: Any) -> str:
    # Host adapters hand over plain paths, API objects or JSON mappings.
    if isinstance(changed, str):
        return changed
    if isinstance(changed, dict):
        return changed["filename"]
    return changed.filename


def resolve_reviewers(index: OwnershipIndex, changed_files: Iterable[Any]) -> Resolution:
    reviewers: dict[str, None] = {}
    files_to_owners: dict[str, tuple[str, ...]] = {}
    unmatched: list[str] = []
    processed = 0

    for changed in changed_files:
        path = _filename(changed)
        processed += 1
        m = index.match(path)
        if m.chosen is None:
            unmatched.append(path)
            continue
        files_to_owners[path] = m.owners
        for owner in m.owners:
            reviewers.setdefault(owner, None)

    logger.info(f"Found {len(reviewers)} reviewers for {processed} changed files")

    return Resolution(
        reviewers=tuple(reviewers),
        files_to_owners=files_to_owners,
        unmatched_files=unmatched,
        files_processed=processed,
        rules_parsed=len(index.rules),
        skipped_patterns=[r.pattern for r in index.skipped],
    )


def assign_reviewers(
    read_codeowners: Callable[[], tuple[str, str]],
    changed_files: Iterable[Any],
    *,
    security_reviewers: Sequence[str] | None = None,
    custom_message: str = "",
) -> Assignment | NotFound:
    """Resolve and classify reviewers for a change set.

    ``read_codeowners`` returns ``(text, source)`` or raises
    CodeownersNotFoundError, which comes back as a NotFound result.
    """
    try:
        text, source = read_codeowners()
    except CodeownersNotFoundError as e:
        logger.error(str(e))
        return NotFound(message=str(e), searched=e.searched)

    index = OwnershipIndex(parse_codeowners_text(text, source=source))
    resolution = resolve_reviewers(index, changed_files)
    classification = classify_reviewers(resolution.reviewers, security_reviewers)

    return Assignment(
        resolution=resolution,
        classification=classification,
        source=source,
        custom_message=custom_message,
    )
