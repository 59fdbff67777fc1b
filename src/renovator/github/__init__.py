"""GitHub access: REST client and payload models."""

from .client import DEFAULT_API_URL, GitHubAPIError, GitHubClient, PullRequestHost
from .models import CandidatePR, CheckRun, PullRequestDetail, RepositoryState

__all__ = [
    "DEFAULT_API_URL",
    "CandidatePR",
    "CheckRun",
    "GitHubAPIError",
    "GitHubClient",
    "PullRequestDetail",
    "PullRequestHost",
    "RepositoryState",
]
