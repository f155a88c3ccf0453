"""Alerts for open tasks that have passed their deadline."""

import math
from datetime import datetime

from pbl_dashboard.core.schemas_pm import AlertPriority, DelayedTaskAlert
from pbl_dashboard.core.schemas_students import Student
from pbl_dashboard.core.schemas_tasks import Task, TaskStatus
from pbl_dashboard.core.scoring import clamp_score, days_until

PRIORITY_ORDER = {"critical": 4, "high": 3, "medium": 2, "low": 1}
UNASSIGNED = "unassigned"


def delay_priority(delay_days: int) -> AlertPriority:
    if delay_days >= 7:
        return "critical"
    if delay_days >= 3:
        return "high"
    if delay_days >= 1:
        return "medium"
    return "low"


def _delay_reason(task: Task, assignee: Student | None, delay_days: int) -> str:
    reasons: list[str] = []

    if delay_days >= 7:
        reasons.append(f"[URGENT] Seriously delayed by {delay_days} days.")
    elif delay_days >= 3:
        reasons.append(f"[IMPORTANT] Delayed by {delay_days} days.")
    else:
        reasons.append(f"Delayed by {delay_days} days.")

    if assignee is not None:
        if assignee.load_score >= 4.5:
            reasons.append(
                f"The assignee ({assignee.name}) has a very high load ({assignee.load_score}/5) "
                "and is struggling to keep up."
            )
        elif assignee.load_score >= 3.5:
            reasons.append(
                f"The assignee ({assignee.name}) has a high load ({assignee.load_score}/5), "
                "which may be slowing progress."
            )
        if assignee.motivation_score <= 2:
            reasons.append(
                f"The assignee ({assignee.name}) has low motivation ({assignee.motivation_score}/5); "
                "work may have stalled."
            )
    else:
        reasons.append("No one is assigned, so the task is not moving.")

    if task.difficulty >= 4:
        reasons.append(
            f"The task is difficult ({task.difficulty:g}/5) and may be taking longer than expected."
        )

    if task.estimated_hours:
        estimated_days = task.estimated_hours / 8
        if delay_days > estimated_days * 0.5:
            reasons.append(
                f"The delay is large relative to the estimate ({task.estimated_hours:g} hours)."
            )

    if task.status == TaskStatus.PENDING.value:
        reasons.append("The task has not been started.")
    elif task.status == TaskStatus.IN_PROGRESS.value:
        reasons.append("The task is in progress but past its deadline.")

    return " ".join(reasons)


def _recommended_actions(
    task: Task, assignee: Student | None, delay_days: int, priority: AlertPriority
) -> list[str]:
    actions: list[str] = []

    if priority == "critical":
        actions.append("🔴 Urgent: the PM should step in directly and check the situation")
        actions.append("📞 Talk to the assignee right away")
    elif priority == "high":
        actions.append("⚠️ Priority: check in with the assignee and consider support")

    if assignee is not None:
        if assignee.load_score >= 4:
            actions.append(f"⚖️ Redistribute: {assignee.name}'s load is high, consider moving tasks")
        if assignee.motivation_score <= 2.5:
            actions.append(f"💡 Motivation support: hold a 1-on-1 with {assignee.name}")
    else:
        actions.append("👤 Assign someone to this task")

    if task.difficulty >= 4:
        actions.append("📋 Split the task: it is difficult, consider smaller pieces")

    if delay_days >= 3:
        actions.append("📅 Revisit the deadline and set a realistic one")

    if task.status == TaskStatus.PENDING.value:
        actions.append("🚀 Start now: the task has not been started")

    if priority in ("critical", "high"):
        actions.append("👥 Team support: ask other members to help")

    return actions


def impact_score(task: Task, delay_days: int, assignee: Student | None) -> float:
    """Impact of a delay on a 1-10 scale."""
    score = min(4, delay_days * 0.5)
    score += (task.difficulty or 3) * 0.4

    if task.estimated_hours:
        score += min(2, task.estimated_hours / 20)

    if assignee is not None:
        if assignee.load_score >= 4.5:
            score += 1.5
        elif assignee.load_score >= 3.5:
            score += 1
        elif assignee.load_score >= 2.5:
            score += 0.5

        if assignee.motivation_score <= 2:
            score += 1
        elif assignee.motivation_score <= 3:
            score += 0.5
    else:
        score += 1

    return clamp_score(score, low=1, high=10)


def detect_delayed_tasks(
    tasks: list[Task],
    students: list[Student],
    reference_date: datetime | None = None,
) -> list[DelayedTaskAlert]:
    """
    List open tasks at least one full day past deadline.

    Sorted by priority, then impact score, both descending.
    """
    by_id = {s.student_id: s for s in students}
    alerts: list[DelayedTaskAlert] = []

    for task in tasks:
        if not task.deadline or not task.is_active:
            continue

        delay_days = math.floor(-days_until(task.deadline, reference_date))
        if delay_days <= 0:
            continue

        assignee = by_id.get(task.assignee_id) if task.assignee_id else None
        priority = delay_priority(delay_days)

        alerts.append(DelayedTaskAlert(
            task_id=task.task_id,
            task_title=task.title or task.task_id,
            task_category=task.category or "unset",
            assignee_id=task.assignee_id or "",
            assignee_name=assignee.name if assignee else (task.assignee_id or UNASSIGNED),
            deadline=task.deadline,
            delay_days=delay_days,
            status=task.status,
            priority=priority,
            reason=_delay_reason(task, assignee, delay_days),
            recommended_actions=_recommended_actions(task, assignee, delay_days, priority),
            impact_score=impact_score(task, delay_days, assignee),
        ))

    alerts.sort(key=lambda a: (PRIORITY_ORDER[a.priority], a.impact_score), reverse=True)
    return alerts
