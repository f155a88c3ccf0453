"""Tests for danger scoring in pbl_dashboard/core/danger.py."""

from datetime import datetime, timezone

import pytest

from pbl_dashboard.core.danger import (
    DEFAULT_COMMUNICATION_GAP,
    DEFAULT_RECENT_ACTIVITY,
    DEFAULT_SKILL_GAP,
    assess_danger,
    build_risk_factors,
    compute_danger,
    count_overdue,
    get_danger_level,
    get_danger_recommendations,
)
from pbl_dashboard.core.schemas_scoring import RiskFactors
from pbl_dashboard.core.schemas_students import Student
from pbl_dashboard.core.schemas_tasks import Task

REF = datetime(2025, 6, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def worst_case():
    return RiskFactors(
        motivation_score=1,
        load_score=5,
        overdue_tasks=4,
        skill_gap=1.0,
        recent_activity=0.0,
        communication_gap=1.0,
    )


@pytest.fixture
def best_case():
    return RiskFactors(motivation_score=5, load_score=1)


class TestComputeDanger:
    def test_worst_case_is_maximum(self, worst_case):
        assert compute_danger(worst_case) == 5.0

    def test_best_case_is_clamped_to_minimum(self, best_case):
        assert compute_danger(best_case) == 1.0

    def test_overdue_contribution_caps_at_five(self, worst_case):
        more_overdue = worst_case.model_copy(update={"overdue_tasks": 40})
        assert compute_danger(more_overdue) == compute_danger(worst_case)


@pytest.mark.parametrize(
    "score,level",
    [(1.0, "safe"), (1.9, "safe"), (2.0, "caution"), (3.0, "warning"), (3.9, "warning"), (4.0, "critical")],
)
def test_danger_level(score, level):
    assert get_danger_level(score) == level


class TestRecommendations:
    def test_worst_case_blocks_in_order(self, worst_case):
        recs = get_danger_recommendations(5.0, worst_case)

        headers = [r for r in recs if not r.startswith("   ")]
        assert headers[0].startswith("🔴")
        assert headers[1].startswith("💡")
        assert headers[2].startswith("⚖️")
        assert headers[3] == "⏰ 4 task(s) are past their deadline."
        assert headers[4].startswith("📉")
        assert headers[5].startswith("📚")
        assert headers[6].startswith("💬")

    def test_calm_student_gets_no_recommendations(self):
        factors = RiskFactors(motivation_score=3, load_score=3)
        assert get_danger_recommendations(2.0, factors) == []

    def test_urgent_banner_depends_on_score_only(self):
        factors = RiskFactors(motivation_score=3, load_score=3)
        assert get_danger_recommendations(4.0, factors) == [
            "🔴 Urgent attention needed. Contact the PM immediately."
        ]


def test_build_risk_factors_uses_stored_scores_and_defaults():
    student = Student(student_id="s1", motivation_score=2.0, load_score=4.5)
    tasks = [
        Task(task_id="a", deadline="2025-06-01", status="pending"),
        Task(task_id="b", deadline="2025-06-01", status="completed"),
        Task(task_id="c", deadline="2025-07-01", status="in_progress"),
        Task(task_id="d"),
    ]

    factors = build_risk_factors(student, tasks, reference_date=REF)

    assert factors.motivation_score == 2.0
    assert factors.load_score == 4.5
    assert factors.overdue_tasks == 1
    assert factors.skill_gap == DEFAULT_SKILL_GAP
    assert factors.recent_activity == DEFAULT_RECENT_ACTIVITY
    assert factors.communication_gap == DEFAULT_COMMUNICATION_GAP


def test_count_overdue_ignores_missing_deadlines():
    assert count_overdue([Task(task_id="a")], reference_date=REF) == 0


def test_assess_danger_bundles_everything(worst_case):
    assessment = assess_danger(worst_case, student_id="s1")
    assert assessment.score == 5.0
    assert assessment.level == "critical"
    assert assessment.student_id == "s1"
    assert assessment.factors == worst_case
    assert assessment.recommendations
