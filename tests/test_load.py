"""Tests for the load calculator in pbl_dashboard/core/load.py."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from pbl_dashboard.core.load import (
    calculate_load_by_category,
    compute_load,
    get_load_level,
    load_breakdown,
    urgency_multiplier,
)
from pbl_dashboard.core.schemas_tasks import Task
from pbl_dashboard.core.scoring import round1, weighted_average

REF = datetime(2025, 6, 10, 12, 0, tzinfo=timezone.utc)


def make_task(**overrides) -> Task:
    data = {
        "task_id": "t1",
        "title": "Task",
        "difficulty": 3,
        "estimated_hours": 5,
        "deadline": None,
        "status": "pending",
        "category": "design",
    }
    data.update(overrides)
    return Task(**data)


class TestComputeLoad:
    def test_single_overdue_task(self):
        """One hard, long task due yesterday lands just under 2."""
        task = make_task(difficulty=5, estimated_hours=10, deadline="2025-06-09T12:00:00Z", category="x")

        score = compute_load([task], reference_date=REF)

        assert score == 1.9
        assert get_load_level(score) == "low"

    def test_overdue_task_outweighs_same_task_due_later(self):
        overdue = make_task(difficulty=5, estimated_hours=10, deadline="2025-06-09T12:00:00Z")
        later = make_task(difficulty=5, estimated_hours=10, deadline="2025-06-20T12:00:00Z")

        assert compute_load([overdue], REF) > compute_load([later], REF)

    def test_no_tasks_is_minimum(self):
        assert compute_load([], reference_date=REF) == 1.0

    def test_completed_tasks_are_ignored(self):
        tasks = [
            make_task(task_id="a", status="completed", difficulty=5, estimated_hours=20),
            make_task(task_id="b", status="completed", difficulty=5, estimated_hours=20),
        ]
        assert compute_load(tasks, reference_date=REF) == 1.0

    def test_task_without_deadline_uses_neutral_urgency(self):
        # 3 * 0.5 * 1.0 = 1.5; (1.5 / 3 / 15) * 4 + 1 = 1.13
        assert compute_load([make_task()], reference_date=REF) == 1.1

    def test_heavy_workload_is_clamped(self):
        tasks = [
            make_task(task_id=f"t{i}", difficulty=5, estimated_hours=12, deadline="2025-06-01")
            for i in range(6)
        ]
        assert compute_load(tasks, reference_date=REF) == 5.0

    def test_naive_deadline_read_as_utc(self):
        # Exactly one day away falls into the 1.5 tier
        task = make_task(difficulty=5, estimated_hours=10, deadline="2025-06-11T12:00:00")
        # 5 * 1 * 1.5 = 7.5; (7.5 / 3 / 15) * 4 + 1 = 1.67
        assert compute_load([task], reference_date=REF) == 1.7

    def test_task_count_multiplier_caps_at_one_and_a_half(self):
        tasks = [make_task(task_id=f"t{i}", difficulty=2, estimated_hours=10) for i in range(9)]
        # total 18 * 1.5 = 27; 27 / 15 * 4 + 1 = 8.2 -> clamped
        assert compute_load(tasks, reference_date=REF) == 5.0

    def test_is_deterministic(self):
        tasks = [make_task(deadline="2025-06-12")]
        assert compute_load(tasks, REF) == compute_load(tasks, REF)


class TestUrgencyMultiplier:
    @pytest.mark.parametrize(
        "days,expected",
        [
            (None, 1.0),
            (-0.1, 2.0),
            (0, 1.8),
            (0.5, 1.8),
            (1, 1.5),
            (2.9, 1.5),
            (3, 1.2),
            (6.9, 1.2),
            (7, 1.0),
            (30, 1.0),
        ],
    )
    def test_tiers(self, days, expected):
        assert urgency_multiplier(days) == expected


class TestLoadLevel:
    @pytest.mark.parametrize(
        "score,level",
        [(1.0, "low"), (1.9, "low"), (2.0, "medium"), (2.9, "medium"), (3.0, "high"), (4.0, "critical"), (5.0, "critical")],
    )
    def test_half_open_intervals(self, score, level):
        assert get_load_level(score) == level


class TestLoadByCategory:
    def test_average_difficulty_per_category(self):
        tasks = [
            make_task(task_id="a", category="design", difficulty=4),
            make_task(task_id="b", category="development", difficulty=2),
            make_task(task_id="c", category="design", difficulty=5, status="completed"),
            make_task(task_id="d", category="design", difficulty=3),
        ]

        result = calculate_load_by_category(tasks)

        assert result == {"design": 3.5, "development": 2.0}
        assert list(result) == ["design", "development"]

    def test_breakdown_combines_score_and_level(self):
        breakdown = load_breakdown([make_task()], reference_date=REF)
        assert breakdown.score == 1.1
        assert breakdown.level == "low"
        assert breakdown.by_category == {"design": 3.0}


def test_round1_rounds_halves_up():
    assert round1(2.25) == 2.3
    assert round1(2.24) == 2.2


def test_weighted_average_without_weight_is_neutral():
    assert weighted_average([]) == 3.0
    assert weighted_average([(5.0, 0.0)]) == 3.0


class TestTaskDates:
    @pytest.mark.parametrize("value", ["2025-06-01", "2025-06-01T09:30:00Z", "2025-06-01T09:30:00+09:00"])
    def test_iso_dates_are_accepted(self, value):
        assert make_task(deadline=value, start_date=value, end_date=value).deadline == value

    def test_blank_date_means_unset(self):
        assert make_task(deadline="  ").deadline is None

    @pytest.mark.parametrize("field", ["deadline", "start_date", "end_date"])
    def test_unparseable_date_is_rejected(self, field):
        with pytest.raises(ValidationError, match="Invalid ISO-8601 date"):
            make_task(**{field: "next friday"})
