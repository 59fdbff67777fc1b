"""Tests for renovator.triage.eligibility."""

import pytest

from renovator.github.models import CheckRun, PullRequestDetail, RepositoryState
from renovator.triage.eligibility import Verdict, check_runs_passed, evaluate


def _detail(*, merged: bool = False, mergeable: bool = True) -> PullRequestDetail:
    return PullRequestDetail(number=7, merged=merged, mergeable=mergeable, head_sha="abc")


def _repo(archived: bool = False) -> RepositoryState:
    return RepositoryState(full_name="acme/web", archived=archived)


def _checks(*conclusions: str | None) -> list[CheckRun]:
    return [CheckRun(f"c{i}", "completed", c) for i, c in enumerate(conclusions)]


class TestGateOrder:
    @pytest.mark.parametrize("merged", [True, False])
    @pytest.mark.parametrize("mergeable", [True, False])
    @pytest.mark.parametrize("conclusions", [("success",), ("failure",), ()])
    def test_archived_wins_over_everything(self, merged, mergeable, conclusions) -> None:
        verdict = evaluate(_detail(merged=merged, mergeable=mergeable), _repo(True), _checks(*conclusions))
        assert verdict is Verdict.ARCHIVED

    def test_merged_wins_over_unmergeable_and_failed_checks(self) -> None:
        verdict = evaluate(_detail(merged=True, mergeable=False), _repo(), _checks("failure"))
        assert verdict is Verdict.ALREADY_MERGED

    def test_not_mergeable(self) -> None:
        assert evaluate(_detail(mergeable=False), _repo(), _checks("success")) is Verdict.NOT_MERGEABLE

    def test_not_mergeable_wins_over_failed_checks(self) -> None:
        assert evaluate(_detail(mergeable=False), _repo(), _checks("failure")) is Verdict.NOT_MERGEABLE


class TestChecks:
    @pytest.mark.parametrize(
        "conclusions",
        [("failure",), ("success", "cancelled"), ("neutral",), ("timed_out",), (None,), ("action_required",)],
    )
    def test_any_non_passing_conclusion_fails(self, conclusions) -> None:
        assert evaluate(_detail(), _repo(), _checks(*conclusions)) is Verdict.CHECKS_FAILED

    def test_success_and_skipped_are_eligible(self) -> None:
        assert evaluate(_detail(), _repo(), _checks("success", "skipped", "success")) is Verdict.ELIGIBLE

    def test_no_checks_is_eligible(self) -> None:
        assert evaluate(_detail(), _repo(), []) is Verdict.ELIGIBLE

    def test_conclusion_match_is_case_sensitive(self) -> None:
        assert check_runs_passed(_checks("SUCCESS")) is False


class TestVerdict:
    def test_only_eligible_is_eligible(self) -> None:
        assert [v for v in Verdict if v.eligible] == [Verdict.ELIGIBLE]

    def test_describe_mentions_title(self) -> None:
        assert Verdict.NOT_MERGEABLE.describe("bump lodash") == "PR bump lodash cannot be merged"
        assert "archived" in Verdict.ARCHIVED.describe("x")
