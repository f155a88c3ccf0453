"""Narrative explanation of a load score."""

from datetime import datetime

from pbl_dashboard.core.load import active_tasks
from pbl_dashboard.core.schemas_scoring import LoadCause, LoadReason
from pbl_dashboard.core.schemas_tasks import Task
from pbl_dashboard.core.scoring import days_until

HIGH_DIFFICULTY = 4
LONG_TASK_HOURS = 8
MANY_TASKS = 5
TOO_MANY_TASKS = 7
MAX_LISTED_TASKS = 5


def analyze_load_reason(
    tasks: list[Task],
    load_score: float,
    reference_date: datetime | None = None,
) -> LoadReason:
    """
    Identify what is driving a student's load.

    Causes are checked in order: overdue tasks, tasks due within a day,
    high-difficulty tasks, long tasks, and too many open tasks.
    """
    causes: list[LoadCause] = []
    active = active_tasks(tasks)

    timed = [(t, days_until(t.deadline, reference_date)) for t in active]

    overdue = [t for t, days in timed if days is not None and days < 0]
    if overdue:
        count = len(overdue)
        causes.append(LoadCause(
            cause="Overdue tasks",
            severity="high" if count >= 3 else "medium" if count >= 2 else "low",
            description=f"{count} task(s) are past their deadline.",
            tasks=[t.title for t in overdue],
        ))

    urgent = [t for t, days in timed if days is not None and 0 <= days < 1]
    if urgent:
        causes.append(LoadCause(
            cause="Urgent tasks",
            severity="high" if len(urgent) >= 3 else "medium",
            description=f"{len(urgent)} task(s) are due within a day.",
            tasks=[t.title for t in urgent],
        ))

    difficult = [t for t in active if t.difficulty >= HIGH_DIFFICULTY]
    if difficult:
        causes.append(LoadCause(
            cause="High-difficulty tasks",
            severity="high" if len(difficult) >= 2 else "medium",
            description=f"{len(difficult)} task(s) have difficulty {HIGH_DIFFICULTY} or higher.",
            tasks=[t.title for t in difficult],
        ))

    long_tasks = [t for t in active if t.estimated_hours >= LONG_TASK_HOURS]
    if long_tasks:
        causes.append(LoadCause(
            cause="Long tasks",
            severity="high" if len(long_tasks) >= 2 else "medium",
            description=f"{len(long_tasks)} task(s) are estimated at {LONG_TASK_HOURS}+ hours.",
            tasks=[t.title for t in long_tasks],
        ))

    if len(active) >= MANY_TASKS:
        causes.append(LoadCause(
            cause="Too many tasks",
            severity="high" if len(active) >= TOO_MANY_TASKS else "medium",
            description=f"Juggling {len(active)} open tasks at once.",
            tasks=[t.title for t in active[:MAX_LISTED_TASKS]],
        ))

    if load_score >= 4:
        summary = "Load is very high."
    elif load_score >= 3:
        summary = "Load is high."
    else:
        summary = "Load is within a manageable range."

    if causes:
        high_count = sum(1 for c in causes if c.severity == "high")
        if high_count > 0:
            summary += f" {high_count} major contributing factor(s) found."
        else:
            summary += " A few contributing factors found."
    else:
        summary += " No notable contributing factors."

    return LoadReason(main_causes=causes, summary=summary, score=load_score)
