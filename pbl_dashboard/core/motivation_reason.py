"""Narrative explanation of a motivation score."""

from pbl_dashboard.core.aptitude import aptitude_for
from pbl_dashboard.core.motivation import completion_rate, mbti_base_score
from pbl_dashboard.core.schemas_scoring import MotivationReason, ReasonFactor
from pbl_dashboard.core.schemas_students import StudentProfile, TeamCompatibility
from pbl_dashboard.core.schemas_tasks import Task, TaskStatus


def _completion_factor(tasks: list[Task]) -> ReasonFactor:
    completed = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED.value)
    total = len(tasks)
    rate = completion_rate(tasks)
    done = f"Completed {completed}/{total} tasks."

    if rate >= 0.7:
        return ReasonFactor(
            factor="Task completion",
            impact="positive",
            description=f"{done} A high completion rate is keeping motivation up.",
            score=rate * 5,
        )
    if rate < 0.4:
        return ReasonFactor(
            factor="Task completion",
            impact="negative",
            description=f"{done} A low completion rate may be weighing on motivation.",
            score=rate * 5,
        )
    return ReasonFactor(factor="Task completion", impact="neutral", description=done, score=rate * 5)


def _task_fit_factor(profile: StudentProfile, tasks: list[Task]) -> ReasonFactor | None:
    lookup = aptitude_for(profile)
    active = [t for t in tasks if t.is_active]
    matched = sum(1 for t in active if lookup.is_strength(t.category))
    rate = matched / len(active) if active else 0

    if rate >= 0.6:
        strengths = ", ".join(lookup.strengths()) or "their strengths"
        return ReasonFactor(
            factor="Task fit",
            impact="positive",
            description=f"{round(rate * 100)}% of current tasks play to strengths ({strengths}).",
            score=rate * 5,
        )
    if rate < 0.3:
        weaknesses = ", ".join(lookup.weaknesses()) or "weaker areas"
        return ReasonFactor(
            factor="Task fit",
            impact="negative",
            description=(
                f"Most current tasks fall in weaker areas ({weaknesses}). "
                "Consider moving better-suited tasks to this student."
            ),
            score=rate * 5,
        )
    return None


def _team_factor(compatibility: TeamCompatibility) -> ReasonFactor | None:
    preferred = compatibility.preferred_count
    avoided = compatibility.avoided_count

    if preferred > 0 and avoided == 0:
        return ReasonFactor(
            factor="Team fit",
            impact="positive",
            description=f"Working with {preferred} preferred teammate(s).",
            score=4,
        )
    if avoided > 0:
        return ReasonFactor(
            factor="Team fit",
            impact="negative",
            description=f"The team includes {avoided} teammate(s) this student prefers to avoid.",
            score=2,
        )
    return None


def _personality_factor(mbti: str) -> ReasonFactor | None:
    base = mbti_base_score(mbti)
    if base >= 3.5:
        return ReasonFactor(
            factor="Personality",
            impact="positive",
            description=(
                f"MBTI type {mbti} tends to stay motivated through outgoing, "
                "exploratory activities."
            ),
            score=base,
        )
    if base < 2.5:
        return ReasonFactor(
            factor="Personality",
            impact="negative",
            description=(
                f"MBTI type {mbti} leans introverted; active encouragement to "
                "participate may help."
            ),
            score=base,
        )
    return None


def generate_motivation_reason(
    profile: StudentProfile,
    tasks: list[Task],
    compatibility: TeamCompatibility,
    motivation_score: float,
) -> MotivationReason:
    """
    Explain a motivation score as a list of factors plus a summary.

    Args:
        profile: Student profile
        tasks: All tasks assigned to the student
        compatibility: The student's current team view
        motivation_score: The score being explained

    Returns:
        MotivationReason with factors, summary and the score
    """
    candidates = [
        _completion_factor(tasks),
        _task_fit_factor(profile, tasks),
        _team_factor(compatibility),
        _personality_factor(profile.MBTI),
    ]
    factors = [f for f in candidates if f is not None]

    positive = sum(1 for f in factors if f.impact == "positive")
    negative = sum(1 for f in factors if f.impact == "negative")

    if motivation_score >= 4:
        summary = "Motivation is high."
    elif motivation_score >= 3:
        summary = "Motivation is moderate."
    else:
        summary = "Motivation is low."

    if positive > negative:
        summary += " Most contributing factors are favorable."
    elif negative > positive:
        summary += " There are a few areas to improve."

    return MotivationReason(factors=factors, summary=summary, score=motivation_score)
