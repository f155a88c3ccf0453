"""Live per-student scoring shared by the student and PM endpoints."""

from datetime import datetime

from pbl_dashboard.core.aptitude import aptitude_for
from pbl_dashboard.core.danger import build_risk_factors
from pbl_dashboard.core.load import calculate_load_by_category, compute_load, get_load_level
from pbl_dashboard.core.motivation import compute_motivation
from pbl_dashboard.core.schemas_scoring import RecentTask, RiskFactors, StudentScores, StudentState
from pbl_dashboard.core.schemas_students import Student, build_team_compatibility
from pbl_dashboard.core.schemas_tasks import Task

RECENT_TASK_LIMIT = 5


def score_student(
    student: Student,
    tasks: list[Task],
    teammates: list[Student],
    reference_date: datetime | None = None,
) -> StudentScores:
    """
    Compute motivation and load from the student's own tasks.

    Args:
        student: The student being scored
        tasks: Tasks assigned to the student
        teammates: Other members of the student's team
        reference_date: Point in time for deadline urgency (defaults to now)
    """
    load_score = compute_load(tasks, reference_date)
    return StudentScores(
        motivation_score=compute_motivation(
            student, tasks, build_team_compatibility(student, teammates)
        ),
        load_score=load_score,
        load_level=get_load_level(load_score),
        load_by_category=calculate_load_by_category(tasks),
    )


def with_scores(student: Student, scores: StudentScores) -> Student:
    """Copy of the student carrying live scores in place of the stored ones."""
    return student.model_copy(update={
        "motivation_score": scores.motivation_score,
        "load_score": scores.load_score,
    })


def live_risk_factors(
    student: Student,
    tasks: list[Task],
    teammates: list[Student],
    reference_date: datetime | None = None,
) -> RiskFactors:
    scores = score_student(student, tasks, teammates, reference_date)
    return build_risk_factors(with_scores(student, scores), tasks, reference_date)


def student_state(student: Student, tasks: list[Task], scores: StudentScores) -> StudentState:
    """Snapshot used by the encouragement generator."""
    aptitude = aptitude_for(student)
    return StudentState(
        name=student.name or student.student_id,
        motivation_score=scores.motivation_score,
        load_score=scores.load_score,
        MBTI=student.MBTI,
        strengths=aptitude.strengths(),
        weaknesses=aptitude.weaknesses(),
        recent_tasks=[
            RecentTask(title=t.title, status=t.status) for t in tasks[:RECENT_TASK_LIMIT]
        ],
    )


def tasks_by_assignee(tasks: list[Task]) -> dict[str, list[Task]]:
    grouped: dict[str, list[Task]] = {}
    for task in tasks:
        if task.assignee_id:
            grouped.setdefault(task.assignee_id, []).append(task)
    return grouped


def rescore_students(
    students: list[Student],
    tasks: list[Task],
    reference_date: datetime | None = None,
) -> list[Student]:
    """Every student with stored scores replaced by live ones."""
    grouped = tasks_by_assignee(tasks)
    rescored = []
    for student in students:
        teammates = [
            s for s in students
            if student.team_id and s.team_id == student.team_id and s.student_id != student.student_id
        ]
        own_tasks = grouped.get(student.student_id, [])
        rescored.append(with_scores(student, score_student(student, own_tasks, teammates, reference_date)))
    return rescored
