"""PM intervention list: at-risk students with the actions to take."""

from datetime import datetime

from pbl_dashboard.core.danger import assess_danger, build_risk_factors
from pbl_dashboard.core.schemas_pm import PRIORITY_RANK, Intervention, Priority
from pbl_dashboard.core.schemas_students import Student
from pbl_dashboard.core.schemas_tasks import Task

INTERVENTION_THRESHOLD = 3.0
HIGH_PRIORITY_SCORE = 4.0
MEDIUM_PRIORITY_SCORE = 3.5


def intervention_priority(danger_score: float) -> Priority:
    if danger_score >= HIGH_PRIORITY_SCORE:
        return "high"
    if danger_score >= MEDIUM_PRIORITY_SCORE:
        return "medium"
    return "low"


def build_interventions(
    students: list[Student],
    tasks: list[Task],
    reference_date: datetime | None = None,
) -> list[Intervention]:
    """
    Recommend interventions for students whose danger score is 3 or more.

    Args:
        students: Students carrying the scores to assess (typically live ones)
        tasks: All tasks; each student's are picked out by assignee
        reference_date: Point in time for overdue checks (defaults to now)

    Returns:
        Interventions ordered high, medium, low; input order within a priority
    """
    interventions = []
    for student in students:
        own_tasks = [t for t in tasks if t.assignee_id == student.student_id]
        assessment = assess_danger(build_risk_factors(student, own_tasks, reference_date))
        if assessment.score < INTERVENTION_THRESHOLD:
            continue

        interventions.append(Intervention(
            student_id=student.student_id,
            student_name=student.name,
            danger_score=assessment.score,
            reason=f"Danger score: {assessment.score:.1f}/5",
            priority=intervention_priority(assessment.score),
            actions=assessment.recommendations,
        ))

    interventions.sort(key=lambda i: PRIORITY_RANK[i.priority], reverse=True)
    return interventions
