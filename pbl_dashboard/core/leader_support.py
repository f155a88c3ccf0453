"""Leader support detection.

Finds each team's leader and scores how much PM support they need, from
the leader's own state and from how the rest of the team is doing.
"""

from datetime import datetime

from pbl_dashboard.core.danger import build_risk_factors, compute_danger, count_overdue
from pbl_dashboard.core.schemas_pm import PRIORITY_RANK, LeaderSupportNeed, Priority
from pbl_dashboard.core.schemas_students import Student
from pbl_dashboard.core.schemas_tasks import Task, Team
from pbl_dashboard.core.scoring import NEUTRAL_SCORE
from pbl_dashboard.core.stagnation import percent

SUPPORT_THRESHOLD = 3
HIGH_PRIORITY_SUPPORT = 6
MEDIUM_PRIORITY_SUPPORT = 4

AT_RISK_MOTIVATION = 2.5
AT_RISK_LOAD = 4
LOW_LEADERSHIP = 2.5

LEADER_SUPPORT_ACTIONS = [
    "Individual support for the leader",
    "Help running a team meeting",
    "Help reviewing task priorities",
    "Help following up with at-risk members",
    "Help planning a redistribution of load",
]


def identify_leader(team: Team, members: list[Student]) -> Student | None:
    """
    Pick the team's leader.

    The explicit ``leader_id`` wins when it names a member; otherwise the
    member with the highest leadership rating, then the first member.
    """
    if team.leader_id:
        for member in members:
            if member.student_id == team.leader_id:
                return member

    rated = [m for m in members if (m.skill_leadership or 0) > 0]
    if rated:
        return max(rated, key=lambda m: m.skill_leadership)

    return members[0] if members else None


def support_priority(support_score: int) -> Priority:
    if support_score >= HIGH_PRIORITY_SUPPORT:
        return "high"
    if support_score >= MEDIUM_PRIORITY_SUPPORT:
        return "medium"
    return "low"


def is_at_risk(student: Student) -> bool:
    return student.motivation_score <= AT_RISK_MOTIVATION or student.load_score >= AT_RISK_LOAD


def assess_leader_support(
    team: Team,
    students: list[Student],
    tasks: list[Task],
    reference_date: datetime | None = None,
) -> LeaderSupportNeed | None:
    """
    Score a team leader's need for support.

    Returns:
        The support need, or None when the team has no members or the
        support score stays below the threshold
    """
    member_ids = set(team.student_ids)
    members = [s for s in students if s.student_id in member_ids]
    leader = identify_leader(team, members)
    if leader is None:
        return None

    team_tasks = [t for t in tasks if t.assignee_id in member_ids]
    leader_tasks = [t for t in team_tasks if t.assignee_id == leader.student_id]
    leader_danger = compute_danger(build_risk_factors(leader, leader_tasks, reference_date))
    at_risk = [s for s in members if is_at_risk(s)]
    overdue = count_overdue(team_tasks, reference_date)
    completed = sum(1 for t in team_tasks if not t.is_active)
    completion_rate = completed / len(team_tasks) if team_tasks else 0.0

    score = 0
    reasons: list[str] = []

    if leader.motivation_score <= 2:
        score += 3
        reasons.append(f"Leader motivation is low ({leader.motivation_score:.1f})")
    elif leader.motivation_score <= 2.5:
        score += 2
        reasons.append(f"Leader motivation is somewhat low ({leader.motivation_score:.1f})")

    if leader.load_score >= 4.5:
        score += 3
        reasons.append(f"Leader load is very high ({leader.load_score:.1f})")
    elif leader.load_score >= 4:
        score += 2
        reasons.append(f"Leader load is high ({leader.load_score:.1f})")

    if leader_danger >= 4:
        score += 2
        reasons.append(f"Leader danger score is high ({leader_danger:.1f})")

    if at_risk:
        score += 2 if len(at_risk) >= len(members) * 0.5 else 1
        reasons.append(f"{len(at_risk)} team member(s) at risk")

    # Teams without tasks are not judged on overdue work or completion
    if overdue:
        score += 2 if overdue >= len(team_tasks) * 0.3 else 1
        reasons.append(f"{overdue} overdue task(s)")

    if team_tasks:
        if completion_rate < 0.3:
            score += 2
            reasons.append(f"Team completion rate is low ({percent(completion_rate)}%)")
        elif completion_rate < 0.5:
            score += 1
            reasons.append(f"Team completion rate is {percent(completion_rate)}%")

    leadership = leader.skill_leadership if leader.skill_leadership is not None else NEUTRAL_SCORE
    if leadership < LOW_LEADERSHIP:
        score += 1
        reasons.append(f"Leadership skill is low ({leadership:.1f})")

    if score < SUPPORT_THRESHOLD:
        return None

    return LeaderSupportNeed(
        leader_id=leader.student_id,
        leader_name=leader.name,
        team_id=team.team_id,
        team_name=team.name,
        project_name=team.project_name,
        support_score=score,
        priority=support_priority(score),
        reasons=reasons,
        leader_motivation=leader.motivation_score,
        leader_load=leader.load_score,
        leader_danger_score=leader_danger,
        danger_students_count=len(at_risk),
        overdue_tasks_count=overdue,
        completion_rate=percent(completion_rate),
        recommended_actions=list(LEADER_SUPPORT_ACTIONS),
    )


def detect_leader_support_needs(
    teams: list[Team],
    students: list[Student],
    tasks: list[Task],
    reference_date: datetime | None = None,
) -> list[LeaderSupportNeed]:
    """Leaders needing support, ordered high, medium, low."""
    needs = [
        need
        for need in (assess_leader_support(team, students, tasks, reference_date) for team in teams)
        if need is not None
    ]
    needs.sort(key=lambda n: PRIORITY_RANK[n.priority], reverse=True)
    return needs
