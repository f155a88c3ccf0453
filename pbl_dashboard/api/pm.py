"""API endpoints for the project manager's team-wide views."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel, Field

from pbl_dashboard.core.compatibility import build_compatibility_map
from pbl_dashboard.core.danger import assess_danger, build_risk_factors
from pbl_dashboard.core.delayed_tasks import detect_delayed_tasks
from pbl_dashboard.core.interventions import build_interventions
from pbl_dashboard.core.leader_support import detect_leader_support_needs
from pbl_dashboard.core.logging import get_logger
from pbl_dashboard.core.schemas_pm import (
    DelayedTaskAlert,
    Intervention,
    LeaderSupportNeed,
    ProjectStagnation,
    ReassignmentRejection,
    ReassignmentSuggestion,
    TeamLoadBalance,
)
from pbl_dashboard.core.schemas_scoring import DangerLevel, RiskFactors, TeamCompatibilityMap
from pbl_dashboard.core.schemas_tasks import Task
from pbl_dashboard.core.stagnation import detect_stagnant_projects
from pbl_dashboard.core.student_scores import rescore_students, tasks_by_assignee
from pbl_dashboard.core.task_reassign import suggest_task_reassignments, without_rejected
from pbl_dashboard.core.team_balance import compute_team_load_balance
from pbl_dashboard.db.datastore import Datastore, get_datastore

logger = get_logger(__name__)

router = APIRouter(prefix="/pm")


# ============================================================================
# Pydantic Models
# ============================================================================


class DangerRankingEntry(BaseModel):
    student_id: str
    name: str
    team_id: str
    score: float
    level: DangerLevel
    factors: RiskFactors
    recommendations: list[str]


class ReassignmentRequest(BaseModel):
    """Request body for executing a reassignment."""

    to_student_id: str


class RejectionRequest(BaseModel):
    """Request body for rejecting a reassignment suggestion."""

    to_student_id: Optional[str] = Field(None, description="Suggested assignee; omit to hide every suggestion for the task")
    reason: Optional[str] = None


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/danger-ranking", response_model=list[DangerRankingEntry])
async def get_danger_ranking(store: Datastore = Depends(get_datastore)) -> list[DangerRankingEntry]:
    """Every student's danger assessment, most at risk first."""
    try:
        tasks = await store.get_tasks()
        students = rescore_students(await store.get_students(), tasks)
        grouped = tasks_by_assignee(tasks)
        ranking = []
        for student in students:
            factors = build_risk_factors(student, grouped.get(student.student_id, []))
            assessment = assess_danger(factors, student_id=student.student_id)
            ranking.append(DangerRankingEntry(
                student_id=student.student_id,
                name=student.name,
                team_id=student.team_id,
                score=assessment.score,
                level=assessment.level,
                factors=assessment.factors,
                recommendations=assessment.recommendations,
            ))
    except Exception as e:
        logger.error(f"Error building danger ranking: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e

    ranking.sort(key=lambda entry: entry.score, reverse=True)
    return ranking


@router.get("/interventions", response_model=list[Intervention])
async def get_interventions(store: Datastore = Depends(get_datastore)) -> list[Intervention]:
    """Students with a danger score of 3 or more and the actions to take."""
    try:
        tasks = await store.get_tasks()
        students = rescore_students(await store.get_students(), tasks)
        return build_interventions(students, tasks)
    except Exception as e:
        logger.error(f"Error building interventions: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.get("/stagnant-projects", response_model=list[ProjectStagnation])
async def get_stagnant_projects(store: Datastore = Depends(get_datastore)) -> list[ProjectStagnation]:
    """Teams whose projects have stalled, most stalled first."""
    try:
        tasks = await store.get_tasks()
        students = rescore_students(await store.get_students(), tasks)
        return detect_stagnant_projects(await store.get_teams(), students, tasks)
    except Exception as e:
        logger.error(f"Error detecting stagnant projects: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.get("/leader-support", response_model=list[LeaderSupportNeed])
async def get_leader_support(store: Datastore = Depends(get_datastore)) -> list[LeaderSupportNeed]:
    """Team leaders who need PM support, highest priority first."""
    try:
        tasks = await store.get_tasks()
        students = rescore_students(await store.get_students(), tasks)
        return detect_leader_support_needs(await store.get_teams(), students, tasks)
    except Exception as e:
        logger.error(f"Error detecting leader support needs: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.get("/compatibility-map", response_model=list[TeamCompatibilityMap])
async def get_compatibility_map(store: Datastore = Depends(get_datastore)) -> list[TeamCompatibilityMap]:
    """Pairwise compatibility matrix for each team."""
    try:
        return build_compatibility_map(await store.get_teams(), await store.get_students())
    except Exception as e:
        logger.error(f"Error building compatibility map: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.get("/team-load-balance", response_model=list[TeamLoadBalance])
async def get_team_load_balance(store: Datastore = Depends(get_datastore)) -> list[TeamLoadBalance]:
    """Load spread inside each team."""
    try:
        students = rescore_students(await store.get_students(), await store.get_tasks())
        return compute_team_load_balance(await store.get_teams(), students)
    except Exception as e:
        logger.error(f"Error computing team load balance: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.get("/delayed-tasks", response_model=list[DelayedTaskAlert])
async def get_delayed_tasks(store: Datastore = Depends(get_datastore)) -> list[DelayedTaskAlert]:
    """Open tasks past their deadline, most urgent first."""
    try:
        return detect_delayed_tasks(await store.get_tasks(), await store.get_students())
    except Exception as e:
        logger.error(f"Error detecting delayed tasks: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.get("/task-reassignments", response_model=list[ReassignmentSuggestion])
async def get_task_reassignments(store: Datastore = Depends(get_datastore)) -> list[ReassignmentSuggestion]:
    """Reassignment suggestions across all teams."""
    try:
        tasks = await store.get_tasks()
        students = rescore_students(await store.get_students(), tasks)
        return without_rejected(suggest_task_reassignments(students, tasks), await store.get_rejections())
    except Exception as e:
        logger.error(f"Error suggesting task reassignments: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.post("/task-reassignments/{task_id}/execute", response_model=Task)
async def execute_task_reassignment(
    body: ReassignmentRequest,
    task_id: str = Path(..., description="Task ID"),
    store: Datastore = Depends(get_datastore),
) -> Task:
    """Move a task to a new assignee."""
    if await store.get_student(body.to_student_id) is None:
        raise HTTPException(status_code=404, detail=f"Student {body.to_student_id} not found")

    try:
        task = await store.update_task_assignee(task_id, body.to_student_id)
    except Exception as e:
        logger.error(f"Error reassigning task {task_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e

    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return task


@router.post("/task-reassignments/{task_id}/reject", response_model=ReassignmentRejection)
async def reject_task_reassignment(
    task_id: str = Path(..., description="Task ID"),
    body: Optional[RejectionRequest] = None,
    store: Datastore = Depends(get_datastore),
) -> ReassignmentRejection:
    """Turn down a suggestion so it is no longer offered."""
    body = body or RejectionRequest()
    try:
        return await store.reject_reassignment(task_id, body.to_student_id, body.reason)
    except Exception as e:
        logger.error(f"Error rejecting reassignment of task {task_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e
