"""Tests for team load balance."""

import pytest

from pbl_dashboard.core.schemas_students import Student
from pbl_dashboard.core.schemas_tasks import Team
from pbl_dashboard.core.team_balance import balance_score, compute_team_load_balance, team_load_balance


@pytest.mark.parametrize(
    "variance,expected",
    [(0.0, 5), (0.5, 5), (0.51, 3), (1.0, 3), (1.5, 2), (2.0, 2), (2.1, 1)],
)
def test_balance_score(variance, expected):
    assert balance_score(variance) == expected


def test_team_load_balance_statistics():
    team = Team(team_id="t1", name="Alpha", project_name="Garden", student_ids=["a", "b"])
    students = [
        Student(student_id="a", name="A", load_score=2.0, motivation_score=3.0),
        Student(student_id="b", name="B", load_score=4.0, motivation_score=4.0),
        Student(student_id="c", name="C", load_score=5.0, motivation_score=1.0),
    ]

    result = team_load_balance(team, students)

    assert result.student_count == 2
    assert result.avg_load == 3.0
    assert result.avg_motivation == 3.5
    assert result.max_load == 4.0
    assert result.min_load == 2.0
    assert result.load_variance == 1.0
    assert result.balance_score == 3
    assert [s.student_id for s in result.students] == ["a", "b"]


def test_empty_team():
    result = team_load_balance(Team(team_id="t9"), [])
    assert result.student_count == 0
    assert result.avg_load == 0
    assert result.max_load == 0
    assert result.balance_score == 5


def test_compute_team_load_balance_covers_every_team():
    teams = [Team(team_id="t1"), Team(team_id="t2")]
    assert [r.team_id for r in compute_team_load_balance(teams, [])] == ["t1", "t2"]
