"""Tests for interventions, stagnant projects, leader support and rejected suggestions."""

from datetime import datetime, timezone

import pytest

from pbl_dashboard.core.interventions import build_interventions, intervention_priority
from pbl_dashboard.core.leader_support import (
    LEADER_SUPPORT_ACTIONS,
    assess_leader_support,
    detect_leader_support_needs,
    identify_leader,
)
from pbl_dashboard.core.schemas_pm import ReassignmentRejection, ReassignmentSuggestion
from pbl_dashboard.core.schemas_students import Student
from pbl_dashboard.core.schemas_tasks import Task, Team
from pbl_dashboard.core.stagnation import (
    average_delay_days,
    detect_stagnant_projects,
    stagnation_score,
    team_stagnation,
)
from pbl_dashboard.core.task_reassign import without_rejected

REF = datetime(2025, 6, 10, 12, 0, tzinfo=timezone.utc)
PAST = "2025-06-01"
FUTURE = "2099-01-01"


def overdue_tasks(assignee: str, count: int) -> list[Task]:
    return [Task(task_id=f"{assignee}-{i}", assignee_id=assignee, deadline=PAST) for i in range(count)]


# =============================================================================
# Interventions
# =============================================================================


@pytest.mark.parametrize(
    "score,expected",
    [(4.0, "high"), (4.6, "high"), (3.5, "medium"), (3.9, "medium"), (3.0, "low"), (3.4, "low")],
)
def test_intervention_priority(score, expected):
    assert intervention_priority(score) == expected


class TestBuildInterventions:
    def test_only_at_risk_students_ordered_by_priority(self):
        students = [
            Student(student_id="c", name="Cai", motivation_score=1, load_score=4),
            Student(student_id="d", name="Dan", motivation_score=1, load_score=5),
            Student(student_id="b", name="Ben", motivation_score=2, load_score=4),
            Student(student_id="a", name="Aoi", motivation_score=1, load_score=5),
        ]
        tasks = overdue_tasks("c", 1) + overdue_tasks("d", 2) + overdue_tasks("a", 4)

        interventions = build_interventions(students, tasks, reference_date=REF)

        assert [(i.student_id, i.priority) for i in interventions] == [
            ("a", "high"),
            ("d", "medium"),
            ("c", "low"),
        ]
        top = interventions[0]
        assert top.danger_score == 4.1
        assert top.reason == "Danger score: 4.1/5"
        assert top.actions[0].startswith("🔴")
        assert "⏰ 4 task(s) are past their deadline." in top.actions

    def test_no_interventions_for_healthy_students(self):
        students = [Student(student_id="a", motivation_score=4.5, load_score=2)]
        assert build_interventions(students, [], reference_date=REF) == []


# =============================================================================
# Stagnant projects
# =============================================================================


class TestStagnation:
    @pytest.mark.parametrize(
        "completion,overdue,total,delay,motivation,expected",
        [
            (0.2, 4, 10, 8, 2.0, 5.0),
            (0.6, 0, 10, 0, 3.0, 0.0),
            (0.4, 2, 10, 4, 3.0, 3.0),
            (0.0, 0, 0, 0, 3.0, 2.0),
        ],
    )
    def test_stagnation_score(self, completion, overdue, total, delay, motivation, expected):
        assert stagnation_score(completion, overdue, total, delay, motivation) == expected

    def test_average_delay_counts_only_in_progress_tasks(self):
        tasks = [
            Task(task_id="a", status="in_progress", deadline=PAST),
            Task(task_id="b", status="in_progress", deadline=FUTURE),
            Task(task_id="c", status="pending", deadline=PAST),
        ]
        # 9.5 days late plus an on-time task, over two in-progress tasks
        assert average_delay_days(tasks, REF) == pytest.approx(4.75)

    def test_average_delay_without_in_progress_tasks(self):
        assert average_delay_days([Task(task_id="a", deadline=PAST)], REF) == 0.0

    def test_team_stagnation_report(self):
        team = Team(team_id="alpha", name="Alpha", project_name="Garden", student_ids=["s1", "s2"])
        students = [
            Student(student_id="s1", motivation_score=2.0),
            Student(student_id="s2", motivation_score=2.0),
        ]
        tasks = [
            Task(task_id="t1", assignee_id="s1", status="completed"),
            Task(task_id="t2", assignee_id="s2", status="in_progress", deadline=PAST),
            Task(task_id="t3", assignee_id="s2", deadline=FUTURE),
        ]

        report = team_stagnation(team, students, tasks, REF)

        assert report.stagnation_score == 5.0
        assert report.completion_rate == 33
        assert report.overdue_tasks == 1
        assert report.total_tasks == 3
        assert report.avg_delay_days == 9.5
        assert report.avg_motivation == 2.0
        assert report.is_stagnant

    def test_detect_returns_only_stagnant_teams(self):
        teams = [
            Team(team_id="healthy", student_ids=["s3"]),
            Team(team_id="alpha", student_ids=["s1"]),
            Team(team_id="empty", student_ids=[]),
        ]
        students = [
            Student(student_id="s1", motivation_score=2.0),
            Student(student_id="s3", motivation_score=4.0),
        ]
        tasks = [
            Task(task_id="t1", assignee_id="s1", status="in_progress", deadline=PAST),
            Task(task_id="t2", assignee_id="s3", status="completed"),
        ]

        stagnant = detect_stagnant_projects(teams, students, tasks, REF)

        assert [r.team_id for r in stagnant] == ["alpha"]


# =============================================================================
# Leader support
# =============================================================================


class TestIdentifyLeader:
    members = [
        Student(student_id="a", skill_leadership=3.0),
        Student(student_id="b", skill_leadership=4.5),
        Student(student_id="c"),
    ]

    def test_explicit_leader_wins(self):
        assert identify_leader(Team(team_id="t", leader_id="c"), self.members).student_id == "c"

    def test_unknown_leader_id_falls_back_to_leadership_rating(self):
        assert identify_leader(Team(team_id="t", leader_id="ghost"), self.members).student_id == "b"

    def test_first_member_when_nobody_is_rated(self):
        members = [Student(student_id="x"), Student(student_id="y")]
        assert identify_leader(Team(team_id="t"), members).student_id == "x"

    def test_no_members(self):
        assert identify_leader(Team(team_id="t"), []) is None


class TestLeaderSupport:
    def test_struggling_leader_needs_high_priority_support(self):
        team = Team(team_id="alpha", name="Alpha", student_ids=["l", "m"], leader_id="l")
        students = [
            Student(student_id="l", name="Lee", motivation_score=2.0, load_score=4.5, skill_leadership=2.0),
            Student(student_id="m", name="Mio", motivation_score=4.0, load_score=2.0),
        ]
        tasks = overdue_tasks("l", 1) + [Task(task_id="done", assignee_id="m", status="completed")]

        need = assess_leader_support(team, students, tasks, REF)

        assert need is not None
        assert need.leader_id == "l"
        assert need.support_score == 11
        assert need.priority == "high"
        assert need.danger_students_count == 1
        assert need.overdue_tasks_count == 1
        assert need.completion_rate == 50
        assert len(need.reasons) == 5
        assert need.recommended_actions == LEADER_SUPPORT_ACTIONS

    def test_team_without_tasks_is_not_penalised(self):
        team = Team(team_id="beta", student_ids=["l"])
        students = [Student(student_id="l", motivation_score=4.0, load_score=2.0)]

        assert assess_leader_support(team, students, [], REF) is None

    def test_detect_orders_by_priority(self):
        teams = [
            Team(team_id="mild", student_ids=["a", "b"]),
            Team(team_id="severe", student_ids=["c"]),
        ]
        students = [
            Student(student_id="a", motivation_score=2.5, load_score=2.0),
            Student(student_id="b", motivation_score=4.0, load_score=2.0),
            Student(student_id="c", motivation_score=1.5, load_score=4.8),
        ]

        needs = detect_leader_support_needs(teams, students, [], REF)

        # mild: somewhat low motivation (2) + half the team at risk (2) = 4
        assert [(n.team_id, n.priority) for n in needs] == [("severe", "high"), ("mild", "medium")]


# =============================================================================
# Rejected suggestions
# =============================================================================


def suggestion(task_id: str, to_student_id: str) -> ReassignmentSuggestion:
    return ReassignmentSuggestion(
        task_id=task_id,
        task_title=task_id,
        from_student_id="s1",
        from_student_name="Aoi",
        to_student_id=to_student_id,
        to_student_name=to_student_id,
        reason="",
        priority="medium",
        score=70,
    )


def test_without_rejected():
    suggestions = [suggestion("t1", "s2"), suggestion("t2", "s3"), suggestion("t3", "s2")]
    rejections = [
        ReassignmentRejection(task_id="t1", to_student_id="s2", rejected_at="2025-06-10T00:00:00+00:00"),
        ReassignmentRejection(task_id="t2", to_student_id="s9", rejected_at="2025-06-10T00:00:00+00:00"),
        ReassignmentRejection(task_id="t3", rejected_at="2025-06-10T00:00:00+00:00"),
    ]

    assert [s.task_id for s in without_rejected(suggestions, rejections)] == ["t2"]
