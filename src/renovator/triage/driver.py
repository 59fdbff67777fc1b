"""Run the processor over every candidate, optionally until all are merged."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from renovator.github.client import GitHubAPIError, PullRequestHost
from renovator.github.models import CandidatePR
from renovator.triage.processor import Outcome, process_pr
from renovator.triage.prompt import ConfirmationPrompt

log = logging.getLogger(__name__)

DEFAULT_RETRY_DELAY = 5.0


@dataclass
class BatchResult:
    rounds: int = 0
    converged: bool | None = None
    merged: list[int] = field(default_factory=list)


def all_merged(candidates: Sequence[CandidatePR], client: PullRequestHost, org: str) -> bool:
    """Re-fetch every candidate; True only if all report merged. A failed fetch counts as not merged."""
    for candidate in candidates:
        try:
            detail = client.get_pull_request(
                candidate.owner or org, candidate.repo, candidate.number
            )
        except (GitHubAPIError, ValueError) as e:
            log.debug("Could not re-check %s#%d: %s", candidate.full_name, candidate.number, e)
            return False
        if detail is None or not detail.merged:
            return False
    return True


def run_batch(
    candidates: Sequence[CandidatePR],
    client: PullRequestHost,
    org: str,
    prompt: ConfirmationPrompt,
    *,
    retry_until_all_merged: bool = False,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    max_rounds: int | None = None,
) -> BatchResult:
    """Process candidates in list order, round after round.

    Without retry_until_all_merged this is a single pass. With it, rounds repeat
    (sleeping retry_delay in between) until all_merged holds, or until max_rounds
    rounds have run when a cap is given.
    """
    result = BatchResult()
    while True:
        result.rounds += 1
        for candidate in candidates:
            if process_pr(candidate, client, org, prompt) is Outcome.MERGED:
                result.merged.append(candidate.number)

        if not retry_until_all_merged:
            break
        if all_merged(candidates, client, org):
            result.converged = True
            break
        if max_rounds is not None and result.rounds >= max_rounds:
            log.warning("Giving up after %d round(s); some PR-s are still not merged", result.rounds)
            result.converged = False
            break

        print(f"Some PR-s are not merged, retrying in {retry_delay:g} seconds")
        time.sleep(retry_delay)
    return result
