"""Motivation scoring.

Estimates a student's engagement on a 1-5 scale from four signals: how much of
their work is done, how well open tasks fit their aptitudes, who they are
teamed with, and a coarse MBTI-based baseline.
"""

from pbl_dashboard.core.aptitude import STRENGTH_THRESHOLD, aptitude_for
from pbl_dashboard.core.schemas_students import StudentProfile, TeamCompatibility
from pbl_dashboard.core.schemas_tasks import Task, TaskStatus
from pbl_dashboard.core.scoring import NEUTRAL_SCORE, clamp_score, weighted_average

# Weight distribution (must sum to 1.0)
WEIGHT_COMPLETION = 0.40
WEIGHT_STRENGTH_MATCH = 0.25
WEIGHT_COMPATIBILITY = 0.20
WEIGHT_PERSONALITY = 0.15

# Completion rate assumed when a student has no tasks yet
NEUTRAL_COMPLETION_RATE = 0.5

PREFERRED_PARTNER_BONUS = 0.5
AVOIDED_PARTNER_PENALTY = 1.0

# Checked in order
MBTI_PREFIX_SCORES = [
    ("EN", 4.0),
    ("ES", 3.5),
    ("IN", 3.0),
    ("IS", 2.5),
]


def mbti_base_score(mbti: str | None) -> float:
    """Personality baseline from the first two MBTI letters."""
    code = (mbti or "").upper()
    for prefix, score in MBTI_PREFIX_SCORES:
        if code.startswith(prefix):
            return score
    return NEUTRAL_SCORE


def completion_rate(tasks: list[Task]) -> float:
    if not tasks:
        return NEUTRAL_COMPLETION_RATE
    completed = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED.value)
    return completed / len(tasks)


def strength_match(profile: StudentProfile, tasks: list[Task]) -> float:
    """
    Average aptitude-weighted difficulty of open tasks, on a 0-1 scale.

    Only open tasks on which the student is strong contribute, but the sum is
    divided by the total task count, completed tasks included.
    """
    if not tasks:
        return 0.0

    lookup = aptitude_for(profile)
    total = 0.0
    for task in tasks:
        if not task.is_active:
            continue
        skill = lookup.aptitude(task.category)
        match = skill / 5 if skill >= STRENGTH_THRESHOLD else 0
        total += match * (task.difficulty / 5)
    return total / len(tasks)


def compatibility_score(compatibility: TeamCompatibility) -> float:
    """Team fit on a 0-5 scale."""
    raw = (
        3
        + compatibility.preferred_count * PREFERRED_PARTNER_BONUS
        - compatibility.avoided_count * AVOIDED_PARTNER_PENALTY
    )
    return max(0.0, min(5.0, raw))


def compute_motivation(
    profile: StudentProfile,
    tasks: list[Task],
    compatibility: TeamCompatibility,
) -> float:
    """
    Compute a 1-5 motivation score.

    Args:
        profile: Student profile (MBTI, skills, partner preferences)
        tasks: All tasks assigned to the student
        compatibility: The student's current team view

    Returns:
        Motivation score in [1, 5] rounded to one decimal
    """
    components = [
        (completion_rate(tasks) * 5, WEIGHT_COMPLETION),
        (strength_match(profile, tasks) * 5, WEIGHT_STRENGTH_MATCH),
        (compatibility_score(compatibility), WEIGHT_COMPATIBILITY),
        (mbti_base_score(profile.MBTI), WEIGHT_PERSONALITY),
    ]
    return clamp_score(weighted_average(components))


def estimate_motivation_from_progress(completed: int, in_progress: int, pending: int) -> float:
    """Fallback estimate from task status counts alone."""
    total = completed + in_progress + pending
    if total == 0:
        return NEUTRAL_SCORE

    rate = completed / total
    progress_bonus = 0.5 if in_progress > 0 else 0
    return clamp_score(rate * 4 + progress_bonus + 1)
