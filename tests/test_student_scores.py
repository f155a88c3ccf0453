"""Tests for live per-student scoring in pbl_dashboard/core/student_scores.py."""

from datetime import datetime, timezone

from pbl_dashboard.core.schemas_students import Student
from pbl_dashboard.core.schemas_tasks import Task
from pbl_dashboard.core.student_scores import (
    RECENT_TASK_LIMIT,
    rescore_students,
    score_student,
    student_state,
)

REF = datetime(2025, 6, 10, 12, 0, tzinfo=timezone.utc)


def test_student_state_uses_first_tasks_and_aptitude_labels():
    student = Student(
        student_id="s1",
        name="Aoi",
        skill_design=4.5,
        skill_analysis=2.0,
        strengths=["planning"],
        weaknesses=["documentation"],
    )
    tasks = [Task(task_id=f"t{i}", title=f"Task {i}") for i in range(7)]
    scores = score_student(student, tasks, [], REF)

    state = student_state(student, tasks, scores)

    assert [t.title for t in state.recent_tasks] == [f"Task {i}" for i in range(RECENT_TASK_LIMIT)]
    assert state.strengths == ["design"]
    assert state.weaknesses == ["analysis"]
    assert state.load_score == scores.load_score


def test_student_state_falls_back_to_legacy_labels():
    student = Student(student_id="s1", strengths=["planning"], weaknesses=["documentation"])
    scores = score_student(student, [], [], REF)

    state = student_state(student, [], scores)

    assert state.name == "s1"
    assert state.strengths == ["planning"]
    assert state.weaknesses == ["documentation"]


def test_rescore_replaces_stored_scores():
    students = [
        Student(student_id="s1", team_id="a", motivation_score=5, load_score=5),
        Student(student_id="s2", team_id="a"),
    ]
    tasks = [Task(task_id="t1", assignee_id="s1", status="completed")]

    rescored = rescore_students(students, tasks, REF)

    assert rescored[0].load_score == 1.0
    assert rescored[0].motivation_score != 5
    assert students[0].load_score == 5
