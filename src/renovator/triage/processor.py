"""One pass over one candidate PR: fetch, gate, confirm, approve, merge."""

from __future__ import annotations

import logging
from enum import Enum

from renovator.github.client import GitHubAPIError, PullRequestHost
from renovator.github.models import CandidatePR
from renovator.triage.eligibility import Verdict, evaluate
from renovator.triage.prompt import ConfirmationPrompt

log = logging.getLogger(__name__)

MERGE_METHOD = "rebase"
REVIEW_EVENT = "APPROVE"


class Outcome(Enum):
    MERGED = "merged"
    INELIGIBLE = "ineligible"
    DECLINED = "declined"
    ERROR = "error"


def process_pr(
    candidate: CandidatePR,
    client: PullRequestHost,
    org: str,
    prompt: ConfirmationPrompt,
) -> Outcome:
    """Process one candidate for the current round.

    Every remote read is fresh. Errors are logged and end this candidate's round;
    they never propagate, so the batch carries on with the next PR.
    """
    title = candidate.title
    print(f"Processing PR: {title}")
    print(f"Repo URL: {candidate.html_url}")

    owner = candidate.owner or org
    repo = candidate.repo
    if not repo:
        log.error("Cannot get repository name for PR: %s", title)
        return Outcome.ERROR

    try:
        detail = client.get_pull_request(owner, repo, candidate.number)
    except (GitHubAPIError, ValueError) as e:
        log.error("Error fetching PR details for %s: %s", title, e)
        return Outcome.ERROR
    if detail is None:
        log.error("PR details are missing for PR: %s", title)
        return Outcome.ERROR

    try:
        repo_state = client.get_repository(owner, repo)
    except (GitHubAPIError, ValueError) as e:
        log.error("Error fetching repository details for %s/%s: %s", owner, repo, e)
        return Outcome.ERROR

    # CI state is only worth fetching once the cheaper gates pass.
    verdict = evaluate(detail, repo_state, ())
    if verdict is Verdict.ELIGIBLE:
        try:
            check_runs = client.list_check_runs(owner, repo, detail.head_sha)
        except (GitHubAPIError, ValueError) as e:
            log.error("Error fetching check runs for %s: %s", title, e)
            return Outcome.ERROR
        verdict = evaluate(detail, repo_state, check_runs)

    if not verdict.eligible:
        print(verdict.describe(title))
        return Outcome.INELIGIBLE

    decision = prompt.ask(title)
    if not decision.approve:
        print(f"Skipping PR: {title}")
        return Outcome.DECLINED

    comment = decision.comment or prompt.default_comment
    try:
        client.create_review(owner, repo, candidate.number, comment, REVIEW_EVENT)
    except GitHubAPIError as e:
        log.error("Error approving PR %s: %s", title, e)
        return Outcome.ERROR

    try:
        client.merge_pull_request(owner, repo, candidate.number, MERGE_METHOD)
    except GitHubAPIError as e:
        log.error("Error merging PR %s: %s", title, e)
        return Outcome.ERROR

    print(f"Successfully merged PR: {title}")
    return Outcome.MERGED
