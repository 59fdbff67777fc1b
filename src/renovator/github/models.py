"""Typed views over the GitHub REST payloads renovator reads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from renovator.helpers import split_repository_url

PASSING_CONCLUSIONS = frozenset({"success", "skipped"})


@dataclass(frozen=True)
class CandidatePR:
    """A PR found by search. Identity only; live state is fetched per round."""

    number: int
    title: str
    owner: str
    repo: str
    html_url: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def from_search_item(cls, item: dict[str, Any]) -> CandidatePR:
        """Build from a /search/issues hit. Raises ValueError if number or repository is missing."""
        number = item.get("number")
        if not isinstance(number, int):
            msg = f"Search result has no PR number: {item.get('html_url')!r}"
            raise ValueError(msg)
        repository_url = item.get("repository_url") or item.get("html_url") or ""
        owner, repo = split_repository_url(repository_url)
        return cls(
            number=number,
            title=item.get("title") or "",
            owner=owner,
            repo=repo,
            html_url=item.get("html_url") or "",
        )


@dataclass(frozen=True)
class PullRequestDetail:
    number: int
    merged: bool
    mergeable: bool
    head_sha: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> PullRequestDetail:
        """Build from GET /repos/{o}/{r}/pulls/{n}.

        GitHub reports mergeable as null while it is still computing; that counts as not mergeable.
        """
        head = data.get("head") or {}
        sha = head.get("sha") or ""
        if not sha:
            msg = f"PR #{data.get('number')} has no head commit SHA"
            raise ValueError(msg)
        return cls(
            number=int(data.get("number") or 0),
            merged=bool(data.get("merged")),
            mergeable=data.get("mergeable") is True,
            head_sha=sha,
        )


@dataclass(frozen=True)
class RepositoryState:
    full_name: str
    archived: bool

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> RepositoryState:
        return cls(full_name=data.get("full_name") or "", archived=bool(data.get("archived")))


@dataclass(frozen=True)
class CheckRun:
    name: str
    status: str
    conclusion: str | None

    @property
    def passed(self) -> bool:
        return self.conclusion in PASSING_CONCLUSIONS

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> CheckRun:
        return cls(
            name=data.get("name") or "",
            status=data.get("status") or "",
            conclusion=data.get("conclusion"),
        )
