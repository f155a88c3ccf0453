"""Stagnant-project detection: teams whose work has stalled."""

import math
from datetime import datetime

from pbl_dashboard.core.danger import count_overdue
from pbl_dashboard.core.schemas_pm import ProjectStagnation
from pbl_dashboard.core.schemas_students import Student
from pbl_dashboard.core.schemas_tasks import Task, Team, TaskStatus
from pbl_dashboard.core.scoring import days_until, round1

STAGNANT_SCORE = 3
MAX_STAGNATION = 5
LOW_TEAM_MOTIVATION = 2.5


def percent(rate: float) -> int:
    return math.floor(rate * 100 + 0.5)


def average_delay_days(tasks: list[Task], reference_date: datetime | None = None) -> float:
    """Mean days past deadline over in-progress tasks; on-time and undated tasks count as 0."""
    in_progress = [t for t in tasks if t.status == TaskStatus.IN_PROGRESS.value]
    if not in_progress:
        return 0.0
    total = 0.0
    for task in in_progress:
        days_left = days_until(task.deadline, reference_date)
        if days_left is not None:
            total += max(0.0, -days_left)
    return total / len(in_progress)


def stagnation_score(
    completion_rate: float,
    overdue: int,
    total: int,
    avg_delay: float,
    avg_motivation: float,
) -> float:
    score = 0
    if completion_rate < 0.3:
        score += 2
    elif completion_rate < 0.5:
        score += 1

    if overdue > total * 0.3:
        score += 2
    elif overdue > total * 0.1:
        score += 1

    if avg_delay > 7:
        score += 2
    elif avg_delay > 3:
        score += 1

    if avg_motivation < LOW_TEAM_MOTIVATION:
        score += 1

    return float(min(MAX_STAGNATION, score))


def team_stagnation(
    team: Team,
    students: list[Student],
    tasks: list[Task],
    reference_date: datetime | None = None,
) -> ProjectStagnation:
    member_ids = set(team.student_ids)
    members = [s for s in students if s.student_id in member_ids]
    team_tasks = [t for t in tasks if t.assignee_id in member_ids]

    completed = sum(1 for t in team_tasks if not t.is_active)
    completion_rate = completed / len(team_tasks) if team_tasks else 0.0
    overdue = count_overdue(team_tasks, reference_date)
    avg_delay = average_delay_days(team_tasks, reference_date)
    avg_motivation = sum(s.motivation_score for s in members) / len(members) if members else 0.0

    score = stagnation_score(completion_rate, overdue, len(team_tasks), avg_delay, avg_motivation)
    return ProjectStagnation(
        team_id=team.team_id,
        team_name=team.name,
        project_name=team.project_name,
        stagnation_score=round1(score),
        completion_rate=percent(completion_rate),
        overdue_tasks=overdue,
        total_tasks=len(team_tasks),
        avg_delay_days=round1(avg_delay),
        avg_motivation=round1(avg_motivation),
        is_stagnant=score >= STAGNANT_SCORE,
    )


def detect_stagnant_projects(
    teams: list[Team],
    students: list[Student],
    tasks: list[Task],
    reference_date: datetime | None = None,
) -> list[ProjectStagnation]:
    """
    Stagnant teams, most stalled first.

    Teams without members are skipped; an empty roster is not a stalled project.
    """
    student_ids = {s.student_id for s in students}
    stagnant = []
    for team in teams:
        if not student_ids.intersection(team.student_ids):
            continue
        report = team_stagnation(team, students, tasks, reference_date)
        if report.is_stagnant:
            stagnant.append(report)
    stagnant.sort(key=lambda r: r.stagnation_score, reverse=True)
    return stagnant
