"""Pydantic schemas for PM-facing views: skills, reassignments, delays, team health."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

Priority = Literal["high", "medium", "low"]
PRIORITY_RANK: dict[str, int] = {"high": 3, "medium": 2, "low": 1}
AlertPriority = Literal["critical", "high", "medium", "low"]


# ============================================================================
# Skills
# ============================================================================


class SelfAssessment(BaseModel):
    """A student's own rating of one skill."""
    skill: str
    score: float = Field(..., description="1-5")
    confidence: float = Field(3.0, description="1-5 confidence in the rating")
    reason: Optional[str] = None


class SkillBreakdown(BaseModel):
    completion_rate: float
    difficulty_adaptation: float
    speed: float
    mbti_base: float
    self_assessment: Optional[float] = None


class SkillEvaluation(BaseModel):
    scores: dict[str, float]
    confidence: dict[str, float]
    breakdown: dict[str, SkillBreakdown]


# ============================================================================
# Task reassignment
# ============================================================================


class ReassignmentSuggestion(BaseModel):
    task_id: str
    task_title: str
    from_student_id: str
    from_student_name: str
    to_student_id: str
    to_student_name: str
    reason: str
    priority: Priority
    score: int = Field(..., description="0-100 suitability of the new assignee")


class ReassignmentRejection(BaseModel):
    """A suggestion the PM turned down; matching suggestions are hidden."""
    task_id: str
    to_student_id: Optional[str] = Field(None, description="None hides every suggestion for the task")
    reason: Optional[str] = None
    rejected_at: str


# ============================================================================
# Delayed tasks
# ============================================================================


class DelayedTaskAlert(BaseModel):
    task_id: str
    task_title: str
    task_category: str
    assignee_id: str
    assignee_name: str
    deadline: str
    delay_days: int
    status: str
    priority: AlertPriority
    reason: str
    recommended_actions: list[str] = Field(default_factory=list)
    impact_score: float = Field(..., description="1-10")


# ============================================================================
# Team balance
# ============================================================================


class TeamMemberLoad(BaseModel):
    student_id: str
    name: str
    motivation_score: float
    load_score: float


class TeamLoadBalance(BaseModel):
    team_id: str
    team_name: str
    project_name: str
    student_count: int
    avg_motivation: float
    avg_load: float
    max_load: float
    min_load: float
    load_variance: float
    balance_score: int = Field(..., description="1-5, higher is better balanced")
    students: list[TeamMemberLoad] = Field(default_factory=list)


# ============================================================================
# Interventions and team health
# ============================================================================


class Intervention(BaseModel):
    """A student the PM should step in for, with suggested actions."""
    student_id: str
    student_name: str
    danger_score: float
    reason: str
    priority: Priority
    actions: list[str] = Field(default_factory=list)


class ProjectStagnation(BaseModel):
    team_id: str
    team_name: str
    project_name: str
    stagnation_score: float = Field(..., description="0-5, higher means more stalled")
    completion_rate: int = Field(..., description="Percent of team tasks completed")
    overdue_tasks: int
    total_tasks: int
    avg_delay_days: float
    avg_motivation: float
    is_stagnant: bool


class LeaderSupportNeed(BaseModel):
    """A team leader who needs PM support, and why."""
    leader_id: str
    leader_name: str
    team_id: str
    team_name: str
    project_name: str
    support_score: int
    priority: Priority
    reasons: list[str] = Field(default_factory=list)
    leader_motivation: float
    leader_load: float
    leader_danger_score: float
    danger_students_count: int
    overdue_tasks_count: int
    completion_rate: int = Field(..., description="Percent of team tasks completed")
    recommended_actions: list[str] = Field(default_factory=list)
