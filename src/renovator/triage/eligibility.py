"""Decide whether a PR may be approved and merged, from already-fetched state."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from renovator.github.models import CheckRun, PullRequestDetail, RepositoryState


class Verdict(Enum):
    ARCHIVED = "is in an archived repository, skipping"
    ALREADY_MERGED = "is already merged"
    NOT_MERGEABLE = "cannot be merged"
    CHECKS_FAILED = "has non-succeeded checks"
    ELIGIBLE = "is eligible for merge"

    @property
    def eligible(self) -> bool:
        return self is Verdict.ELIGIBLE

    def describe(self, title: str) -> str:
        """Operator-facing line, e.g. "PR bump lodash cannot be merged"."""
        return f"PR {title} {self.value}"


def check_runs_passed(check_runs: Iterable[CheckRun]) -> bool:
    """True when every check concluded success or skipped. No checks at all counts as passing."""
    return all(c.passed for c in check_runs)


def evaluate(
    detail: PullRequestDetail,
    repo_state: RepositoryState,
    check_runs: Iterable[CheckRun],
) -> Verdict:
    """First failing gate wins: archived, merged, mergeable, checks."""
    if repo_state.archived:
        return Verdict.ARCHIVED
    if detail.merged:
        return Verdict.ALREADY_MERGED
    if not detail.mergeable:
        return Verdict.NOT_MERGEABLE
    if not check_runs_passed(check_runs):
        return Verdict.CHECKS_FAILED
    return Verdict.ELIGIBLE
