"""Pytest fixtures for renovator tests."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pytest

from renovator.github.client import GitHubAPIError
from renovator.github.models import CandidatePR, CheckRun, PullRequestDetail, RepositoryState


class FakeHost:
    """In-memory PullRequestHost. Records every call; errors can be injected per operation."""

    def __init__(self) -> None:
        self.search_items: list[dict[str, Any]] = []
        self.pulls: dict[tuple[str, str, int], PullRequestDetail] = {}
        self.repos: dict[tuple[str, str], RepositoryState] = {}
        self.checks: dict[tuple[str, str, str], list[CheckRun]] = {}
        self.fail: set[str] = set()
        self.calls: list[tuple[Any, ...]] = []
        self.merge_marks_merged = True

    def add_pr(
        self,
        number: int,
        title: str,
        owner: str = "acme",
        repo: str = "web",
        *,
        merged: bool = False,
        mergeable: bool = True,
        archived: bool = False,
        conclusions: Iterable[str | None] = ("success",),
    ) -> CandidatePR:
        sha = f"sha{number}"
        self.pulls[(owner, repo, number)] = PullRequestDetail(number, merged, mergeable, sha)
        self.repos[(owner, repo)] = RepositoryState(f"{owner}/{repo}", archived)
        self.checks[(owner, repo, sha)] = [
            CheckRun(f"check-{i}", "completed", c) for i, c in enumerate(conclusions)
        ]
        self.search_items.append(
            {
                "number": number,
                "title": title,
                "html_url": f"https://github.com/{owner}/{repo}/pull/{number}",
                "repository_url": f"https://api.github.com/repos/{owner}/{repo}",
            }
        )
        return CandidatePR(number, title, owner, repo, f"https://github.com/{owner}/{repo}/pull/{number}")

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail:
            raise GitHubAPIError(f"{op} failed", status=502)

    def calls_to(self, op: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == op]

    def search_issues(self, query: str) -> list[dict[str, Any]]:
        self.calls.append(("search_issues", query))
        self._maybe_fail("search_issues")
        return list(self.search_items)

    def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequestDetail:
        self.calls.append(("get_pull_request", owner, repo, number))
        self._maybe_fail("get_pull_request")
        return self.pulls[(owner, repo, number)]

    def get_repository(self, owner: str, repo: str) -> RepositoryState:
        self.calls.append(("get_repository", owner, repo))
        self._maybe_fail("get_repository")
        return self.repos[(owner, repo)]

    def list_check_runs(self, owner: str, repo: str, ref: str) -> list[CheckRun]:
        self.calls.append(("list_check_runs", owner, repo, ref))
        self._maybe_fail("list_check_runs")
        return self.checks.get((owner, repo, ref), [])

    def create_review(
        self, owner: str, repo: str, number: int, body: str, event: str = "APPROVE"
    ) -> dict[str, Any]:
        self.calls.append(("create_review", owner, repo, number, body, event))
        self._maybe_fail("create_review")
        return {"id": 1, "state": "APPROVED"}

    def merge_pull_request(
        self, owner: str, repo: str, number: int, merge_method: str = "rebase"
    ) -> dict[str, Any]:
        self.calls.append(("merge_pull_request", owner, repo, number, merge_method))
        self._maybe_fail("merge_pull_request")
        if self.merge_marks_merged:
            old = self.pulls[(owner, repo, number)]
            self.pulls[(owner, repo, number)] = PullRequestDetail(
                old.number, True, old.mergeable, old.head_sha
            )
        return {"merged": True, "sha": "abc"}


def scripted_input(*answers: str):
    """input() replacement that returns answers in order, then raises EOFError."""
    remaining = list(answers)
    asked: list[str] = []

    def _input(text: str) -> str:
        asked.append(text)
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    _input.asked = asked  # type: ignore[attr-defined]
    return _input


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def scripted():
    """Factory fixture: scripted("y") -> input_fn answering "y" then EOF."""
    return scripted_input
