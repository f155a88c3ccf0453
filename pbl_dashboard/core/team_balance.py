"""Load balance across the members of each team."""

from pbl_dashboard.core.schemas_pm import TeamLoadBalance, TeamMemberLoad
from pbl_dashboard.core.schemas_students import Student
from pbl_dashboard.core.schemas_tasks import Team
from pbl_dashboard.core.scoring import round1


def balance_score(load_variance: float) -> int:
    """1-5, lower means a more uneven spread of load."""
    if load_variance > 2:
        return 1
    if load_variance > 1:
        return 2
    if load_variance > 0.5:
        return 3
    return 5


def team_load_balance(team: Team, students: list[Student]) -> TeamLoadBalance:
    member_ids = set(team.student_ids)
    members = [s for s in students if s.student_id in member_ids]
    loads = [s.load_score for s in members]

    if members:
        avg_motivation = sum(s.motivation_score for s in members) / len(members)
        avg_load = sum(loads) / len(loads)
        variance = sum((load - avg_load) ** 2 for load in loads) / len(loads)
    else:
        avg_motivation = avg_load = variance = 0.0

    return TeamLoadBalance(
        team_id=team.team_id,
        team_name=team.name,
        project_name=team.project_name,
        student_count=len(members),
        avg_motivation=round1(avg_motivation),
        avg_load=round1(avg_load),
        max_load=max(loads, default=0),
        min_load=min(loads, default=0),
        load_variance=round(variance, 2),
        balance_score=balance_score(variance),
        students=[
            TeamMemberLoad(
                student_id=s.student_id,
                name=s.name,
                motivation_score=s.motivation_score,
                load_score=s.load_score,
            )
            for s in members
        ],
    )


def compute_team_load_balance(teams: list[Team], students: list[Student]) -> list[TeamLoadBalance]:
    return [team_load_balance(team, students) for team in teams]
