"""Stateless scoring endpoints: callers supply every input in the request body."""

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, Field

from pbl_dashboard.core.danger import assess_danger
from pbl_dashboard.core.load import load_breakdown
from pbl_dashboard.core.load_reason import analyze_load_reason
from pbl_dashboard.core.motivation import compute_motivation, estimate_motivation_from_progress
from pbl_dashboard.core.motivation_reason import generate_motivation_reason
from pbl_dashboard.core.schemas_scoring import (
    DangerAssessment,
    LoadBreakdown,
    LoadReason,
    MotivationReason,
    RiskFactors,
)
from pbl_dashboard.core.schemas_students import StudentProfile, TeamCompatibility
from pbl_dashboard.core.schemas_tasks import Task

router = APIRouter(prefix="/scoring")


# ============================================================================
# Pydantic Models
# ============================================================================


class LoadRequest(BaseModel):
    tasks: list[Task] = Field(default_factory=list)
    reference_date: datetime | None = Field(None, description="Defaults to now (UTC)")


class LoadResponse(BaseModel):
    load: LoadBreakdown
    reason: LoadReason


class MotivationRequest(BaseModel):
    profile: StudentProfile
    tasks: list[Task] = Field(default_factory=list)
    compatibility: TeamCompatibility = Field(default_factory=TeamCompatibility)


class MotivationResponse(BaseModel):
    score: float
    reason: MotivationReason


class ProgressRequest(BaseModel):
    completed: int = Field(0, ge=0)
    in_progress: int = Field(0, ge=0)
    pending: int = Field(0, ge=0)


class ScoreResponse(BaseModel):
    score: float


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/load", response_model=LoadResponse)
async def score_load(body: LoadRequest) -> LoadResponse:
    """Load score, level, per-category load and the main causes."""
    breakdown = load_breakdown(body.tasks, body.reference_date)
    return LoadResponse(
        load=breakdown,
        reason=analyze_load_reason(body.tasks, breakdown.score, body.reference_date),
    )


@router.post("/motivation", response_model=MotivationResponse)
async def score_motivation(body: MotivationRequest) -> MotivationResponse:
    score = compute_motivation(body.profile, body.tasks, body.compatibility)
    return MotivationResponse(
        score=score,
        reason=generate_motivation_reason(body.profile, body.tasks, body.compatibility, score),
    )


@router.post("/motivation/progress", response_model=ScoreResponse)
async def score_motivation_from_progress(body: ProgressRequest) -> ScoreResponse:
    """Rough motivation estimate from task status counts alone."""
    return ScoreResponse(
        score=estimate_motivation_from_progress(body.completed, body.in_progress, body.pending)
    )


@router.post("/danger", response_model=DangerAssessment)
async def score_danger(body: RiskFactors) -> DangerAssessment:
    return assess_danger(body)
