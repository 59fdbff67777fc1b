"""GitHub REST client for the six calls renovator needs.

Transient failures (HTTP 5xx, 429, network errors, timeouts, undecodable JSON)
are retried with a Fibonacci backoff; anything else raises GitHubAPIError at once.
The review POST and the merge PUT are sent at most once per call.
"""

from __future__ import annotations

import http.client
import json
import logging
import time
from typing import Any, Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from renovator import __version__
from renovator.github.models import CheckRun, PullRequestDetail, RepositoryState
from renovator.helpers import backoff_wait, fibonacci_backoff_sequence

log = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
PER_PAGE = 100
# /search only ever serves the first 1000 hits
SEARCH_RESULT_LIMIT = 1000
RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


class GitHubAPIError(Exception):
    """A GitHub API call failed (after retries, for transient errors)."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class PullRequestHost(Protocol):
    """What the triage pipeline needs from a PR-hosting service."""

    def search_issues(self, query: str) -> list[dict[str, Any]]: ...

    def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequestDetail: ...

    def get_repository(self, owner: str, repo: str) -> RepositoryState: ...

    def list_check_runs(self, owner: str, repo: str, ref: str) -> list[CheckRun]: ...

    def create_review(
        self, owner: str, repo: str, number: int, body: str, event: str = "APPROVE"
    ) -> dict[str, Any]: ...

    def merge_pull_request(
        self, owner: str, repo: str, number: int, merge_method: str = "rebase"
    ) -> dict[str, Any]: ...


class GitHubClient:
    """Token-authenticated GitHub REST v3 client over urllib."""

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        *,
        max_retries: int = 5,
        timeout: float = 10,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.max_retries = max(1, max_retries)
        self.timeout = timeout
        self._headers = {
            "Accept": "application/vnd.github.v3+json",
            "Authorization": f"token {token}",
            "User-Agent": f"renovator/{__version__}",
        }

    # --- transport ---

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
        retry: bool = True,
    ) -> Any:
        url = f"{self.api_url}{path}"
        if params:
            url = f"{url}?{urlencode(params)}"
        data = json.dumps(body).encode() if body is not None else None
        headers = dict(self._headers)
        if data is not None:
            headers["Content-Type"] = "application/json"

        attempts = self.max_retries if retry else 1
        backoff_sequence = fibonacci_backoff_sequence(max_total_seconds=300)
        last_error: Exception | None = None

        for attempt in range(attempts):
            req = Request(url, data=data, headers=headers, method=method)
            try:
                with urlopen(req, timeout=self.timeout) as response:
                    raw = response.read().decode()
                    return json.loads(raw) if raw else {}
            except HTTPError as e:
                if e.code not in RETRYABLE_STATUS:
                    msg = f"{method} {path} failed: HTTP {e.code} {e.reason}"
                    raise GitHubAPIError(msg, status=e.code) from e
                last_error = e
                reason = f"HTTP {e.code} error"
            except URLError as e:
                last_error = e
                reason = f"Network error ({e.reason})"
            except (TimeoutError, ConnectionError, http.client.HTTPException) as e:
                # raised by getresponse/read, which urlopen does not wrap
                last_error = e
                reason = f"Network error ({type(e).__name__}: {e})"
            except json.JSONDecodeError as e:
                last_error = e
                reason = f"Invalid JSON ({e})"

            if attempt + 1 < attempts:
                wait_time = backoff_wait(backoff_sequence, attempt)
                log.warning(
                    "Retry %d/%d for %s %s: %s, waiting %ss",
                    attempt + 1,
                    attempts - 1,
                    method,
                    path,
                    reason,
                    wait_time,
                )
                time.sleep(wait_time)

        status = last_error.code if isinstance(last_error, HTTPError) else None
        msg = f"{method} {path} failed after {attempts} attempt(s): {last_error}"
        raise GitHubAPIError(msg, status=status) from last_error

    def _paginate(
        self, path: str, key: str, params: dict[str, Any], limit: int | None = None
    ) -> list[dict[str, Any]]:
        """Collect `key` items across pages until total_count is reached or a page comes back short."""
        items: list[dict[str, Any]] = []
        page = 1
        while True:
            data = self._request("GET", path, params={**params, "per_page": PER_PAGE, "page": page})
            batch = data.get(key) or []
            items.extend(batch)
            total = data.get("total_count", len(items))
            if limit is not None:
                total = min(total, limit)
            if len(batch) < PER_PAGE or len(items) >= total:
                return items
            page += 1

    @staticmethod
    def _repo_path(owner: str, repo: str) -> str:
        return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    # --- operations ---

    def search_issues(self, query: str) -> list[dict[str, Any]]:
        """All hits of an issue search, up to the 1000-result window."""
        return self._paginate("/search/issues", "items", {"q": query}, limit=SEARCH_RESULT_LIMIT)

    def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequestDetail:
        """Fresh merged/mergeable state and head SHA of one PR."""
        data = self._request("GET", f"{self._repo_path(owner, repo)}/pulls/{number}")
        log.debug("PR %s/%s#%d: %s", owner, repo, number, data)
        return PullRequestDetail.from_api(data)

    def get_repository(self, owner: str, repo: str) -> RepositoryState:
        """Repository metadata; only the archived flag matters here."""
        return RepositoryState.from_api(self._request("GET", self._repo_path(owner, repo)))

    def list_check_runs(self, owner: str, repo: str, ref: str) -> list[CheckRun]:
        """Every check run reported for a commit."""
        path = f"{self._repo_path(owner, repo)}/commits/{quote(ref, safe='')}/check-runs"
        return [CheckRun.from_api(c) for c in self._paginate(path, "check_runs", {})]

    def create_review(
        self, owner: str, repo: str, number: int, body: str, event: str = "APPROVE"
    ) -> dict[str, Any]:
        """Submit a review (APPROVE by default). Never retried."""
        return self._request(
            "POST",
            f"{self._repo_path(owner, repo)}/pulls/{number}/reviews",
            body={"body": body, "event": event},
            retry=False,
        )

    def merge_pull_request(
        self, owner: str, repo: str, number: int, merge_method: str = "rebase"
    ) -> dict[str, Any]:
        """Merge a PR with the given method. Never retried; raises unless GitHub reports it merged."""
        result = self._request(
            "PUT",
            f"{self._repo_path(owner, repo)}/pulls/{number}/merge",
            body={"merge_method": merge_method},
            retry=False,
        )
        if not result.get("merged", False):
            msg = f"Merge of {owner}/{repo}#{number} was not performed: {result.get('message', '')}"
            raise GitHubAPIError(msg)
        return result
