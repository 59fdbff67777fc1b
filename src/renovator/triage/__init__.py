"""PR triage: search, eligibility, confirmation, processing and the retry loop."""

from .driver import BatchResult, all_merged, run_batch
from .eligibility import Verdict, check_runs_passed, evaluate
from .processor import MERGE_METHOD, Outcome, process_pr
from .prompt import ApprovalDecision, ConfirmationPrompt
from .search import build_search_query, filter_by_title, search_candidates

__all__ = [
    "MERGE_METHOD",
    "ApprovalDecision",
    "BatchResult",
    "ConfirmationPrompt",
    "Outcome",
    "Verdict",
    "all_merged",
    "build_search_query",
    "check_runs_passed",
    "evaluate",
    "filter_by_title",
    "process_pr",
    "run_batch",
    "search_candidates",
]
