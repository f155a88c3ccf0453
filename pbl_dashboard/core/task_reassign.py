"""Task reassignment suggestions.

Flags open tasks whose assignee is overloaded, demotivated or lacks the
category skill, and proposes the best-suited teammate to take them over.
"""

import math

from pbl_dashboard.core.aptitude import CATEGORY_SKILL_FIELDS, aptitude_for
from pbl_dashboard.core.schemas_pm import Priority, ReassignmentRejection, ReassignmentSuggestion
from pbl_dashboard.core.schemas_students import Student
from pbl_dashboard.core.schemas_tasks import Task

HIGH_LOAD = 4
LOW_MOTIVATION = 2
REQUIRED_SKILL = 3
MIN_SUGGESTION_SCORE = 50


def _skill(student: Student, category: str) -> float | None:
    """Rated skill for a mapped category; None when the category is unmapped."""
    if category not in CATEGORY_SKILL_FIELDS:
        return None
    return aptitude_for(student).aptitude(category)


def has_required_skill(student: Student, category: str) -> bool:
    skill = _skill(student, category)
    return skill is None or skill >= REQUIRED_SKILL


def needs_reassignment(assignee: Student, task: Task) -> bool:
    return (
        assignee.load_score >= HIGH_LOAD
        or assignee.motivation_score <= LOW_MOTIVATION
        or not has_required_skill(assignee, task.category)
    )


def reassignment_score(candidate: Student, task: Task, current: Student) -> int:
    """Suitability of ``candidate`` to take ``task`` from ``current``, 0-100."""
    score = 0.0

    # Lower load than the current assignee (max 30)
    load_diff = current.load_score - candidate.load_score
    score += max(0.0, min(30.0, load_diff * 10))

    # Category skill (max 30)
    skill = _skill(candidate, task.category)
    if skill is not None:
        score += skill / 5 * 30

    # Motivation (max 20)
    score += candidate.motivation_score / 5 * 20

    # Partner preference (max 10)
    is_preferred = candidate.student_id in current.preferred_partners
    is_avoided = current.student_id in candidate.avoided_partners
    if is_preferred and not is_avoided:
        score += 10
    elif is_avoided:
        score -= 5

    # Load balance bonus (max 10)
    if candidate.load_score < current.load_score:
        score += 10

    return max(0, min(100, math.floor(score + 0.5)))


def _reason(candidate: Student, task: Task, current: Student) -> str:
    reasons: list[str] = []

    load_diff = current.load_score - candidate.load_score
    if load_diff > 0.5:
        reasons.append(
            f"{current.name} is carrying a heavy load ({current.load_score}/5); moving the task "
            f"to {candidate.name} ({candidate.load_score}/5) lowers it by {load_diff:.1f} points"
        )
    elif load_diff > 0:
        reasons.append(
            f"Spreads the load ({current.name}: {current.load_score}/5 -> "
            f"{candidate.name}: {candidate.load_score}/5)"
        )

    motivation_diff = candidate.motivation_score - current.motivation_score
    if motivation_diff > 0.5:
        reasons.append(
            f"{candidate.name} is more motivated ({candidate.motivation_score}/5 vs "
            f"{current.motivation_score}/5), which should speed up the work"
        )

    candidate_skill = _skill(candidate, task.category)
    current_skill = _skill(current, task.category)
    if candidate_skill is not None and current_skill is not None:
        if candidate_skill - current_skill > 0.5:
            reasons.append(
                f"{task.category} skill rises from {current_skill}/5 to {candidate_skill}/5, "
                f"improving the quality of \"{task.title}\""
            )
        elif candidate_skill >= REQUIRED_SKILL and current_skill < REQUIRED_SKILL:
            reasons.append(
                f"{candidate.name} has a {task.category} skill of {candidate_skill}/5 and is better "
                f"suited than {current.name} ({current_skill}/5)"
            )

    if candidate.student_id in current.preferred_partners:
        reasons.append(f"{current.name} and {candidate.name} work well together")

    if task.estimated_hours > 0:
        reasons.append(f"Estimated effort: {task.estimated_hours:g} hours")
    if task.difficulty >= 4:
        reasons.append(
            f"High-difficulty task ({task.difficulty:g}/5); handing it to {candidate.name} is recommended"
        )

    if not reasons:
        return (
            f"Recommended to move from {current.name} to {candidate.name} "
            "to balance load and improve skill fit"
        )
    return ". ".join(reasons)


def _priority(current: Student) -> Priority:
    if current.load_score >= 4.5 or current.motivation_score <= 1.5:
        return "high"
    if current.load_score >= HIGH_LOAD or current.motivation_score <= LOW_MOTIVATION:
        return "medium"
    return "low"


def suggest_task_reassignments(students: list[Student], tasks: list[Task]) -> list[ReassignmentSuggestion]:
    """
    Propose reassignments for open tasks, best suggestions first.

    Only teammates of the current assignee are considered, and a move is
    suggested only when the best candidate scores above MIN_SUGGESTION_SCORE.
    """
    by_id = {s.student_id: s for s in students}
    suggestions: list[ReassignmentSuggestion] = []

    for task in tasks:
        if not task.is_active:
            continue

        current = by_id.get(task.assignee_id or "")
        if current is None or not needs_reassignment(current, task):
            continue

        teammates = [
            s for s in students
            if s.team_id == current.team_id and s.student_id != current.student_id
        ]
        if not teammates:
            continue

        ranked = sorted(
            ((reassignment_score(s, task, current), s) for s in teammates),
            key=lambda pair: pair[0],
            reverse=True,
        )
        best_score, best = ranked[0]
        if best_score <= MIN_SUGGESTION_SCORE:
            continue

        suggestions.append(ReassignmentSuggestion(
            task_id=task.task_id,
            task_title=task.title,
            from_student_id=current.student_id,
            from_student_name=current.name,
            to_student_id=best.student_id,
            to_student_name=best.name,
            reason=_reason(best, task, current),
            priority=_priority(current),
            score=best_score,
        ))

    suggestions.sort(key=lambda s: s.score, reverse=True)
    return suggestions


def without_rejected(
    suggestions: list[ReassignmentSuggestion],
    rejections: list[ReassignmentRejection],
) -> list[ReassignmentSuggestion]:
    """Drop suggestions the PM already rejected for the same task and target."""
    def rejected(suggestion: ReassignmentSuggestion) -> bool:
        return any(
            r.task_id == suggestion.task_id
            and (r.to_student_id is None or r.to_student_id == suggestion.to_student_id)
            for r in rejections
        )

    return [s for s in suggestions if not rejected(s)]
