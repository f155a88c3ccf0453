"""Danger (at-risk) scoring for students.

Combines motivation, load, overdue work and three auxiliary signals into a
1-5 risk score, and turns the same inputs into a PM-facing action list.
"""

from datetime import datetime

from pbl_dashboard.core.schemas_scoring import DangerAssessment, DangerLevel, RiskFactors
from pbl_dashboard.core.schemas_students import Student
from pbl_dashboard.core.schemas_tasks import Task
from pbl_dashboard.core.scoring import clamp_score, days_until, weighted_average

# Weight distribution (must sum to 1.0)
WEIGHT_MOTIVATION = 0.30
WEIGHT_LOAD = 0.25
WEIGHT_OVERDUE = 0.20
WEIGHT_SKILL_GAP = 0.10
WEIGHT_ACTIVITY = 0.10
WEIGHT_COMMUNICATION = 0.05

OVERDUE_RISK_PER_TASK = 1.5

# Used until activity and communication tracking feed real values
DEFAULT_SKILL_GAP = 0.3
DEFAULT_RECENT_ACTIVITY = 0.7
DEFAULT_COMMUNICATION_GAP = 0.2

URGENT_SCORE = 4


def compute_danger(factors: RiskFactors) -> float:
    """
    Compute a 1-5 danger score.

    Args:
        factors: Risk inputs for one student

    Returns:
        Danger score in [1, 5] rounded to one decimal
    """
    components = [
        ((6 - factors.motivation_score) / 5 * 5, WEIGHT_MOTIVATION),
        (factors.load_score, WEIGHT_LOAD),
        (min(5, factors.overdue_tasks * OVERDUE_RISK_PER_TASK), WEIGHT_OVERDUE),
        (factors.skill_gap * 5, WEIGHT_SKILL_GAP),
        ((1 - factors.recent_activity) * 5, WEIGHT_ACTIVITY),
        (factors.communication_gap * 5, WEIGHT_COMMUNICATION),
    ]
    return clamp_score(weighted_average(components))


def get_danger_level(score: float) -> DangerLevel:
    if score < 2:
        return "safe"
    if score < 3:
        return "caution"
    if score < 4:
        return "warning"
    return "critical"


def get_danger_recommendations(score: float, factors: RiskFactors) -> list[str]:
    """
    Build the ordered list of recommended PM actions.

    Blocks are appended in a fixed order: escalation, motivation, load,
    overdue, activity, skills, communication.
    """
    recommendations: list[str] = []

    if score >= URGENT_SCORE:
        recommendations.append("🔴 Urgent attention needed. Contact the PM immediately.")

    if factors.motivation_score <= 2:
        recommendations.append("💡 Consider support to raise motivation.")
        recommendations.append("   - Hold a 1-on-1 meeting")
        recommendations.append("   - Review task difficulty and type")

    if factors.load_score >= 4:
        recommendations.append("⚖️ Consider redistributing tasks.")
        recommendations.append("   - Postpone low-priority tasks")
        recommendations.append("   - Hand tasks over to teammates")

    if factors.overdue_tasks > 0:
        recommendations.append(f"⏰ {factors.overdue_tasks} task(s) are past their deadline.")
        recommendations.append("   - Priorities need to be reviewed")
        recommendations.append("   - Consider resetting deadlines")

    if factors.recent_activity < 0.5:
        recommendations.append("📉 Recent activity has dropped.")
        recommendations.append("   - Check in to understand the situation")
        recommendations.append("   - Look for blockers")

    if factors.skill_gap > 0.5:
        recommendations.append("📚 Skill support is needed.")
        recommendations.append("   - Arrange mentoring")
        recommendations.append("   - Provide learning resources")

    if factors.communication_gap > 0.5:
        recommendations.append("💬 Communication has decreased.")
        recommendations.append("   - Set up regular check-ins")
        recommendations.append("   - Encourage joining team meetings")

    return recommendations


def count_overdue(tasks: list[Task], reference_date: datetime | None = None) -> int:
    overdue = 0
    for task in tasks:
        if not task.is_active:
            continue
        days_left = days_until(task.deadline, reference_date)
        if days_left is not None and days_left < 0:
            overdue += 1
    return overdue


def build_risk_factors(
    student: Student,
    tasks: list[Task],
    reference_date: datetime | None = None,
) -> RiskFactors:
    """Assemble risk inputs from a student's stored scores and assigned tasks."""
    return RiskFactors(
        motivation_score=student.motivation_score,
        load_score=student.load_score,
        overdue_tasks=count_overdue(tasks, reference_date),
        skill_gap=DEFAULT_SKILL_GAP,
        recent_activity=DEFAULT_RECENT_ACTIVITY,
        communication_gap=DEFAULT_COMMUNICATION_GAP,
    )


def assess_danger(factors: RiskFactors, student_id: str | None = None) -> DangerAssessment:
    score = compute_danger(factors)
    return DangerAssessment(
        score=score,
        level=get_danger_level(score),
        factors=factors,
        recommendations=get_danger_recommendations(score, factors),
        student_id=student_id,
    )
