"""Pydantic schemas for scores, explanations and recommendations."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

LoadLevel = Literal["low", "medium", "high", "critical"]
DangerLevel = Literal["safe", "caution", "warning", "critical"]
Impact = Literal["positive", "negative", "neutral"]
Severity = Literal["high", "medium", "low"]
Tone = Literal["supportive", "motivational", "gentle", "energetic"]


# ============================================================================
# Risk
# ============================================================================


class RiskFactors(BaseModel):
    """Inputs to the danger score, assembled per student at request time."""

    motivation_score: float = Field(..., description="1-5")
    load_score: float = Field(..., description="1-5")
    overdue_tasks: int = Field(0, ge=0, description="Active tasks past their deadline")
    skill_gap: float = Field(0.0, description="0-1 gap between required and held skills")
    recent_activity: float = Field(1.0, description="0-1 recent activity level")
    communication_gap: float = Field(0.0, description="0-1 drop in communication")


# ============================================================================
# Explanations
# ============================================================================


class ReasonFactor(BaseModel):
    """One contributing factor behind a motivation score."""
    factor: str
    impact: Impact
    description: str
    score: float


class MotivationReason(BaseModel):
    factors: list[ReasonFactor] = Field(default_factory=list)
    summary: str
    score: float


class LoadCause(BaseModel):
    """One cause behind a load score, with the task titles involved."""
    cause: str
    severity: Severity
    description: str
    tasks: list[str] = Field(default_factory=list)


class LoadReason(BaseModel):
    main_causes: list[LoadCause] = Field(default_factory=list)
    summary: str
    score: float


class RecentTask(BaseModel):
    title: str
    status: str


class StudentState(BaseModel):
    """Snapshot of a student used to pick encouragement messages."""
    name: str
    motivation_score: float
    load_score: float
    MBTI: str = ""
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    recent_tasks: list[RecentTask] = Field(default_factory=list)


class EncouragementExample(BaseModel):
    situation: str
    message: str
    tone: Tone


class EncouragementExamples(BaseModel):
    examples: list[EncouragementExample] = Field(default_factory=list)


# ============================================================================
# Compatibility
# ============================================================================


class PairCompatibility(BaseModel):
    """Directional compatibility of one student towards another."""
    score: float
    reason: str


class TeamMemberRef(BaseModel):
    student_id: str
    name: str = ""


class TeamCompatibilityMap(BaseModel):
    team_id: str
    team_name: str = ""
    students: list[TeamMemberRef] = Field(default_factory=list)
    compatibility_matrix: list[list[PairCompatibility]] = Field(default_factory=list)


class PartnerRecommendation(BaseModel):
    student_id: str
    name: str = ""
    reason: str
    score: float


class PartnerClassification(BaseModel):
    """Teammates grouped by how well they suit a student."""
    recommended: list[PartnerRecommendation] = Field(default_factory=list)
    avoid: list[PartnerRecommendation] = Field(default_factory=list)
    neutral: list[PartnerRecommendation] = Field(default_factory=list)


class LoadBreakdown(BaseModel):
    score: float
    level: LoadLevel
    by_category: dict[str, float] = Field(default_factory=dict)


class DangerAssessment(BaseModel):
    score: float
    level: DangerLevel
    factors: RiskFactors
    recommendations: list[str] = Field(default_factory=list)
    student_id: Optional[str] = None


class StudentScores(BaseModel):
    """Scores computed live from a student's current tasks and team."""
    motivation_score: float
    load_score: float
    load_level: LoadLevel
    load_by_category: dict[str, float] = Field(default_factory=dict)
