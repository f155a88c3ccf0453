"""Workload scoring.

Converts a student's active tasks into a 1-5 load score. Each task contributes
difficulty weighted by its estimated hours, scaled up as its deadline nears;
the total is then scaled by how many tasks are open at once.
"""

from datetime import datetime

from pbl_dashboard.core.schemas_scoring import LoadBreakdown, LoadLevel
from pbl_dashboard.core.schemas_tasks import Task
from pbl_dashboard.core.scoring import clamp_score, days_until

# Estimated hours at which a task counts with its full difficulty
FULL_WEIGHT_HOURS = 10

# Number of concurrent tasks treated as a normal workload
BASELINE_TASK_COUNT = 3
MAX_TASK_COUNT_MULTIPLIER = 1.5

# Reference maximum: difficulty 5 x time weight 1 x urgency 2.0 x count 1.5
MAX_LOAD = 15

# (days-until-deadline upper bound, multiplier), most urgent first
URGENCY_TIERS = [
    (0, 2.0),  # overdue
    (1, 1.8),
    (3, 1.5),
    (7, 1.2),
]


def active_tasks(tasks: list[Task]) -> list[Task]:
    return [t for t in tasks if t.is_active]


def urgency_multiplier(days_left: float | None) -> float:
    """Multiplier for a task due in ``days_left`` days. No deadline means 1.0."""
    if days_left is None:
        return 1.0
    for threshold, multiplier in URGENCY_TIERS:
        if days_left < threshold:
            return multiplier
    return 1.0


def task_load(task: Task, reference_date: datetime | None = None) -> float:
    """Unnormalized load contributed by one task."""
    time_weight = min(task.estimated_hours / FULL_WEIGHT_HOURS, 1)
    base_load = task.difficulty * time_weight
    return base_load * urgency_multiplier(days_until(task.deadline, reference_date))


def compute_load(tasks: list[Task], reference_date: datetime | None = None) -> float:
    """
    Compute a 1-5 load score from a student's tasks.

    Args:
        tasks: All tasks assigned to the student (completed ones are ignored)
        reference_date: "Now" for deadline distances (defaults to current UTC time)

    Returns:
        Load score in [1, 5] rounded to one decimal; 1.0 with no active tasks
    """
    active = active_tasks(tasks)
    if not active:
        return 1.0

    total_load = sum(task_load(task, reference_date) for task in active)
    task_count_multiplier = min(len(active) / BASELINE_TASK_COUNT, MAX_TASK_COUNT_MULTIPLIER)

    normalized = (total_load * task_count_multiplier / MAX_LOAD) * 4 + 1
    return clamp_score(normalized)


def get_load_level(score: float) -> LoadLevel:
    if score < 2:
        return "low"
    if score < 3:
        return "medium"
    if score < 4:
        return "high"
    return "critical"


def calculate_load_by_category(tasks: list[Task]) -> dict[str, float]:
    """Average difficulty of active tasks per category, in first-seen order."""
    totals: dict[str, list[float]] = {}
    for task in active_tasks(tasks):
        totals.setdefault(task.category, []).append(task.difficulty)

    return {
        category: clamp_score(sum(values) / len(values))
        for category, values in totals.items()
    }


def load_breakdown(tasks: list[Task], reference_date: datetime | None = None) -> LoadBreakdown:
    score = compute_load(tasks, reference_date)
    return LoadBreakdown(
        score=score,
        level=get_load_level(score),
        by_category=calculate_load_by_category(tasks),
    )
