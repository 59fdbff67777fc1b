"""Find candidate PRs and narrow them to one dependency."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from renovator.github.client import PullRequestHost
from renovator.github.models import CandidatePR

log = logging.getLogger(__name__)

DEFAULT_AUTHOR = "app/renovate"


def build_search_query(org: str, author: str, reviewer: str) -> str:
    """GitHub issue-search query for open PRs by author in org that request reviewer."""
    return f"org:{org} author:{author} is:open is:pr review-requested:{reviewer}"


def search_candidates(
    client: PullRequestHost, org: str, author: str, reviewer: str
) -> list[CandidatePR]:
    """Open PRs by author in org awaiting reviewer's review.

    Hits without a usable PR number or repository are logged and dropped.
    Raises GitHubAPIError if the search itself fails.
    """
    items = client.search_issues(build_search_query(org, author, reviewer))
    candidates: list[CandidatePR] = []
    for item in items:
        try:
            candidates.append(CandidatePR.from_search_item(item))
        except ValueError as e:
            log.error("Skipping search result %r: %s", item.get("title"), e)
    print(f"Found {len(candidates)} renovate PRs for user {reviewer}")
    return candidates


def filter_by_title(candidates: Sequence[CandidatePR], dependency: str | None) -> list[CandidatePR]:
    """Keep candidates whose title equals dependency exactly. Empty dependency keeps everything."""
    if not dependency:
        return list(candidates)
    matching = [c for c in candidates if c.title == dependency]
    for c in matching:
        log.debug("Repository details for %r: %s", c.title, c.full_name)
    print(f"Found {len(matching)} renovate PRs for dependency {dependency}")
    return matching
