"""Tests for automatic skill estimation."""

from pbl_dashboard.core.schemas_pm import SelfAssessment
from pbl_dashboard.core.schemas_students import StudentProfile
from pbl_dashboard.core.schemas_tasks import Task
from pbl_dashboard.core.skill_calculator import (
    SKILL_CATEGORIES,
    calculate_skills,
    mbti_skill_base,
    skill_field_updates,
    skill_from_completion_rate,
    skill_from_difficulty,
    skill_from_speed,
)


def completed(task_id: str, estimated_hours: float, start: str, end: str) -> Task:
    return Task(
        task_id=task_id,
        status="completed",
        estimated_hours=estimated_hours,
        start_date=start,
        end_date=end,
    )


def test_twelve_categories():
    assert len(SKILL_CATEGORIES) == 12
    assert "problem-solving" in SKILL_CATEGORIES


class TestMbtiSkillBase:
    def test_missing_code_is_neutral(self):
        assert set(mbti_skill_base("").values()) == {3.0}
        assert set(mbti_skill_base("EN").values()) == {3.0}

    def test_letter_adjustments(self):
        base = mbti_skill_base("entj")
        assert base["communication"] == 3.3
        assert base["planning"] == 3.4
        assert base["problem-solving"] == 3.3
        assert base["design"] == 3.0


class TestComponents:
    def test_completion_rate(self):
        tasks = [Task(task_id="a", status="completed"), Task(task_id="b")]
        assert skill_from_completion_rate(tasks) == 3.0
        assert skill_from_completion_rate([]) == 3.0

    def test_difficulty(self):
        tasks = [Task(task_id="a", difficulty=4), Task(task_id="b", difficulty=5)]
        assert skill_from_difficulty(tasks) == 4.5

    def test_speed_fast(self):
        # 16 estimated hours finished in one 8-hour day
        assert skill_from_speed([completed("a", 16, "2025-06-01", "2025-06-02")]) == 5.0

    def test_speed_on_estimate(self):
        assert skill_from_speed([completed("a", 8, "2025-06-01", "2025-06-02")]) == 3.0

    def test_speed_slow(self):
        assert skill_from_speed([completed("a", 4, "2025-06-01", "2025-06-02")]) == 1.0

    def test_speed_without_dates(self):
        assert skill_from_speed([Task(task_id="a", status="completed")]) == 3.0


class TestCalculateSkills:
    def test_no_history_is_neutral(self):
        evaluation = calculate_skills(StudentProfile(student_id="s1"), [])

        assert set(evaluation.scores) == set(SKILL_CATEGORIES)
        assert set(evaluation.scores.values()) == {3.0}
        assert set(evaluation.confidence.values()) == {0.0}

    def test_self_assessment_is_blended_in(self):
        assessment = SelfAssessment(skill="design", score=5, confidence=5)

        evaluation = calculate_skills(StudentProfile(student_id="s1"), [], [assessment])

        assert evaluation.scores["design"] == 4.0
        assert evaluation.confidence["design"] == 0.7
        assert evaluation.breakdown["design"].self_assessment == 5
        assert evaluation.breakdown["planning"].self_assessment is None

    def test_only_own_tasks_count(self):
        tasks = [
            Task(task_id="a", category="design", status="completed", difficulty=5, assignee_id="s1"),
            Task(task_id="b", category="design", status="completed", difficulty=1, assignee_id="other"),
        ]

        evaluation = calculate_skills(StudentProfile(student_id="s1"), tasks)

        assert evaluation.breakdown["design"].difficulty_adaptation == 5.0
        assert evaluation.breakdown["design"].completion_rate == 5.0
        assert evaluation.confidence["design"] == 0.1


def test_skill_field_updates():
    evaluation = calculate_skills(StudentProfile(student_id="s1"), [])
    updates = skill_field_updates(evaluation)
    assert updates["skill_problem_solving"] == 3.0
    assert len(updates) == 12
