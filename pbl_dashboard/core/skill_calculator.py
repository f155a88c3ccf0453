"""Automatic skill estimation.

Estimates all twelve skill ratings for a student from their task history:
completion rate per category, difficulty of completed work, completion speed
against the estimate, and an MBTI-based prior. Optional self-assessments are
blended in with a weight that grows with the student's stated confidence.
"""

from pbl_dashboard.core.logging import get_logger
from pbl_dashboard.core.schemas_pm import SelfAssessment, SkillBreakdown, SkillEvaluation
from pbl_dashboard.core.schemas_students import StudentProfile
from pbl_dashboard.core.schemas_tasks import Task, TaskCategory, TaskStatus
from pbl_dashboard.core.scoring import (
    NEUTRAL_SCORE,
    SECONDS_PER_DAY,
    clamp_score,
    parse_iso,
    weighted_average,
)

logger = get_logger(__name__)

SKILL_CATEGORIES = [c.value for c in TaskCategory]

HOURS_PER_DAY = 8
# Completed tasks needed for full confidence in task-derived ratings
CONFIDENT_TASK_COUNT = 10
DEFAULT_CONFIDENCE = 0.5

# Per-letter adjustments applied on top of a neutral 3.0
MBTI_ADJUSTMENTS: dict[tuple[int, str], dict[str, float]] = {
    (0, "E"): {"coordination": 0.2, "exploration": 0.1, "communication": 0.3, "leadership": 0.2, "presentation": 0.2},
    (0, "I"): {"planning": 0.2, "execution": 0.1, "analysis": 0.2, "documentation": 0.1},
    (1, "S"): {"execution": 0.3, "coordination": 0.2, "development": 0.2, "planning": -0.1, "exploration": -0.1},
    (1, "N"): {"planning": 0.3, "exploration": 0.3, "execution": -0.2, "coordination": 0.1, "analysis": 0.2},
    (2, "T"): {"execution": 0.1, "planning": 0.1, "development": 0.2, "analysis": 0.2, "problem-solving": 0.2},
    (2, "F"): {"coordination": 0.2, "communication": 0.2, "design": 0.1},
    (3, "J"): {"execution": 0.1, "coordination": 0.1, "documentation": 0.2, "problem-solving": 0.1},
    (3, "P"): {"exploration": 0.1, "planning": 0.1, "design": 0.1},
}

# The letter that applies when a position holds anything other than the first option
_MBTI_OPPOSITES = {0: ("E", "I"), 1: ("S", "N"), 2: ("T", "F"), 3: ("J", "P")}


def mbti_skill_base(mbti: str) -> dict[str, float]:
    """MBTI prior for every skill; all 3.0 when the code is missing or short."""
    base = {category: NEUTRAL_SCORE for category in SKILL_CATEGORIES}
    code = (mbti or "").upper()
    if len(code) < 4:
        return base

    for position, (first, second) in _MBTI_OPPOSITES.items():
        letter = first if code[position] == first else second
        for category, delta in MBTI_ADJUSTMENTS[(position, letter)].items():
            base[category] += delta

    return {category: clamp_score(value) for category, value in base.items()}


def _category_tasks(student_id: str, category: str, tasks: list[Task]) -> list[Task]:
    return [t for t in tasks if t.category == category and t.assignee_id == student_id]


def skill_from_completion_rate(category_tasks: list[Task]) -> float:
    if not category_tasks:
        return NEUTRAL_SCORE
    completed = sum(1 for t in category_tasks if t.status == TaskStatus.COMPLETED.value)
    return clamp_score(1 + completed / len(category_tasks) * 4)


def skill_from_difficulty(completed_tasks: list[Task]) -> float:
    if not completed_tasks:
        return NEUTRAL_SCORE
    return clamp_score(sum(t.difficulty for t in completed_tasks) / len(completed_tasks))


def skill_from_speed(completed_tasks: list[Task]) -> float:
    """Rate how fast estimated work was actually finished."""
    timed = [t for t in completed_tasks if t.start_date and t.end_date]
    if not timed:
        return NEUTRAL_SCORE

    efficiencies = []
    for task in timed:
        elapsed = parse_iso(task.end_date) - parse_iso(task.start_date)
        actual_hours = elapsed.total_seconds() / SECONDS_PER_DAY * HOURS_PER_DAY
        estimated_hours = task.estimated_hours or actual_hours
        efficiencies.append(estimated_hours / max(actual_hours, 0.1))

    efficiency = sum(efficiencies) / len(efficiencies)
    if efficiency >= 1.2:
        score = NEUTRAL_SCORE + (efficiency - 1.2) * 5
    elif efficiency >= 1.0:
        score = NEUTRAL_SCORE + (efficiency - 1.0) * 5
    else:
        score = NEUTRAL_SCORE - (1.0 - efficiency) * 10
    return clamp_score(score)


def calculate_skills(
    student: StudentProfile,
    tasks: list[Task],
    self_assessments: list[SelfAssessment] | None = None,
) -> SkillEvaluation:
    """
    Estimate every skill rating for a student.

    Args:
        student: The student being rated
        tasks: Tasks across the project (filtered to the student's own)
        self_assessments: Optional self-ratings, at most one per skill

    Returns:
        SkillEvaluation with scores, confidence (0-1) and per-skill breakdown
    """
    mbti_base = mbti_skill_base(student.MBTI)
    by_skill = {a.skill: a for a in (self_assessments or [])}

    scores: dict[str, float] = {}
    confidence: dict[str, float] = {}
    breakdown: dict[str, SkillBreakdown] = {}

    for category in SKILL_CATEGORIES:
        category_tasks = _category_tasks(student.student_id, category, tasks)
        completed = [t for t in category_tasks if t.status == TaskStatus.COMPLETED.value]
        has_speed_data = any(t.start_date and t.end_date for t in completed)

        completion_score = skill_from_completion_rate(category_tasks)
        difficulty_score = skill_from_difficulty(completed)
        speed_score = skill_from_speed(completed)
        prior = mbti_base[category]
        task_confidence = min(1.0, len(completed) / CONFIDENT_TASK_COUNT)

        components: list[tuple[float, float]] = []
        assessment = by_skill.get(category)

        if assessment is not None:
            self_score = assessment.score or NEUTRAL_SCORE
            self_confidence = assessment.confidence or NEUTRAL_SCORE
            components.append((self_score, 0.3 + (self_confidence / 5) * 0.2))
            components.append((completion_score, 0.2))
            components.append((difficulty_score, 0.2) if completed else (prior, 0.1))
            if has_speed_data:
                components.append((speed_score, 0.1))
            confidence[category] = max(
                task_confidence * 0.3 + (self_confidence / 5) * 0.7,
                DEFAULT_CONFIDENCE,
            )
        else:
            components.append((completion_score, 0.3))
            components.append((difficulty_score, 0.3) if completed else (prior, 0.3))
            components.append((speed_score, 0.2) if has_speed_data else (prior, 0.1))
            confidence[category] = task_confidence

        remaining = 1.0 - sum(weight for _, weight in components)
        if remaining > 0:
            components.append((prior, remaining))

        scores[category] = clamp_score(weighted_average(components))

        breakdown[category] = SkillBreakdown(
            completion_rate=completion_score,
            difficulty_adaptation=difficulty_score,
            speed=speed_score,
            mbti_base=prior,
            self_assessment=assessment.score if assessment is not None else None,
        )

    logger.debug(f"Calculated skills for {student.student_id}: {scores}")
    return SkillEvaluation(scores=scores, confidence=confidence, breakdown=breakdown)


def skill_field_updates(evaluation: SkillEvaluation) -> dict[str, float]:
    """Map calculated scores onto StudentProfile skill_* field names."""
    return {
        f"skill_{category.replace('-', '_')}": score
        for category, score in evaluation.scores.items()
    }
