"""API endpoints for individual students: scores, explanations, skills."""

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel, Field

from pbl_dashboard.core.compatibility import classify_partners
from pbl_dashboard.core.danger import assess_danger
from pbl_dashboard.core.encouragement import generate_encouragement_examples
from pbl_dashboard.core.load_reason import analyze_load_reason
from pbl_dashboard.core.logging import get_logger
from pbl_dashboard.core.motivation_reason import generate_motivation_reason
from pbl_dashboard.core.schemas_pm import ReassignmentSuggestion, SelfAssessment, SkillEvaluation
from pbl_dashboard.core.schemas_scoring import (
    DangerAssessment,
    EncouragementExamples,
    LoadReason,
    MotivationReason,
    PartnerClassification,
    StudentScores,
)
from pbl_dashboard.core.schemas_students import Student, build_team_compatibility
from pbl_dashboard.core.schemas_tasks import Task
from pbl_dashboard.core.skill_calculator import calculate_skills, skill_field_updates
from pbl_dashboard.core.student_scores import live_risk_factors, rescore_students, score_student, student_state
from pbl_dashboard.core.task_reassign import suggest_task_reassignments, without_rejected
from pbl_dashboard.db.datastore import Datastore, get_datastore

logger = get_logger(__name__)

router = APIRouter(prefix="/students")


# ============================================================================
# Pydantic Models
# ============================================================================


class StudentDetail(BaseModel):
    """A student with assigned tasks and live scores."""

    student: Student
    tasks: list[Task]
    scores: StudentScores


class StudentAnalysis(BaseModel):
    """Explanations and suggestions for one student."""

    student_id: str
    scores: StudentScores
    motivation_reason: MotivationReason
    load_reason: LoadReason
    encouragement: EncouragementExamples
    partners: PartnerClassification


class SkillUpdateRequest(BaseModel):
    """Request body for recalculating a student's skills."""

    self_assessments: list[SelfAssessment] = Field(default_factory=list)
    save: bool = Field(True, description="Persist the calculated skill ratings")


class SkillUpdateResponse(BaseModel):
    student_id: str
    evaluation: SkillEvaluation
    saved: bool


# ============================================================================
# Helpers
# ============================================================================


async def _require_student(store: Datastore, student_id: str) -> Student:
    try:
        student = await store.get_student(student_id)
    except Exception as e:
        logger.error(f"Error loading student {student_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e

    if student is None:
        raise HTTPException(status_code=404, detail=f"Student {student_id} not found")
    return student


async def _load_context(store: Datastore, student_id: str) -> tuple[Student, list[Task], list[Student]]:
    """The student, their tasks and their teammates; 404 when the student is unknown."""
    student = await _require_student(store, student_id)
    try:
        tasks = await store.get_student_tasks(student_id)
        teammates = await store.get_teammates(student)
    except Exception as e:
        logger.error(f"Error loading tasks for {student_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e
    return student, tasks, teammates


# ============================================================================
# Endpoints
# ============================================================================


@router.get("", response_model=list[Student])
async def list_students(store: Datastore = Depends(get_datastore)) -> list[Student]:
    """List every student with their stored scores."""
    try:
        return await store.get_students()
    except Exception as e:
        logger.error(f"Error listing students: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.get("/{student_id}", response_model=StudentDetail)
async def get_student(
    student_id: str = Path(..., description="Student ID"),
    store: Datastore = Depends(get_datastore),
) -> StudentDetail:
    """Get a student with assigned tasks and scores computed from those tasks."""
    student, tasks, teammates = await _load_context(store, student_id)

    return StudentDetail(
        student=student,
        tasks=tasks,
        scores=score_student(student, tasks, teammates),
    )


@router.get("/{student_id}/analysis", response_model=StudentAnalysis)
async def get_student_analysis(
    student_id: str = Path(..., description="Student ID"),
    store: Datastore = Depends(get_datastore),
) -> StudentAnalysis:
    """
    Explain a student's motivation and load.

    Returns:
        Motivation reason, load reason, example encouragement messages and
        teammates grouped by compatibility
    """
    student, tasks, teammates = await _load_context(store, student_id)

    scores = score_student(student, tasks, teammates)
    compatibility = build_team_compatibility(student, teammates)

    return StudentAnalysis(
        student_id=student_id,
        scores=scores,
        motivation_reason=generate_motivation_reason(
            student, tasks, compatibility, scores.motivation_score
        ),
        load_reason=analyze_load_reason(tasks, scores.load_score),
        encouragement=generate_encouragement_examples(student_state(student, tasks, scores)),
        partners=classify_partners(student, teammates),
    )


@router.get("/{student_id}/danger", response_model=DangerAssessment)
async def get_student_danger(
    student_id: str = Path(..., description="Student ID"),
    store: Datastore = Depends(get_datastore),
) -> DangerAssessment:
    """Danger score, level and recommendations for one student."""
    student, tasks, teammates = await _load_context(store, student_id)

    return assess_danger(live_risk_factors(student, tasks, teammates), student_id=student_id)


@router.get("/{student_id}/skills", response_model=SkillEvaluation)
async def get_student_skills(
    student_id: str = Path(..., description="Student ID"),
    store: Datastore = Depends(get_datastore),
) -> SkillEvaluation:
    """Estimate skill ratings from the student's task history."""
    student, tasks, _ = await _load_context(store, student_id)
    return calculate_skills(student, tasks)


@router.post("/{student_id}/skills", response_model=SkillUpdateResponse)
async def update_student_skills(
    body: SkillUpdateRequest,
    student_id: str = Path(..., description="Student ID"),
    store: Datastore = Depends(get_datastore),
) -> SkillUpdateResponse:
    """
    Recalculate skill ratings, folding in self-assessments.

    Args:
        body: Self-assessments and whether to persist the result
        student_id: Student ID

    Returns:
        The evaluation and whether it was saved
    """
    student, tasks, _ = await _load_context(store, student_id)
    evaluation = calculate_skills(student, tasks, body.self_assessments)

    if body.save:
        try:
            await store.update_student(student, skill_field_updates(evaluation))
        except Exception as e:
            logger.error(f"Error saving skills for {student_id}: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=str(e)) from e

    return SkillUpdateResponse(student_id=student_id, evaluation=evaluation, saved=body.save)


@router.get("/{student_id}/task-reassignments", response_model=list[ReassignmentSuggestion])
async def get_student_task_reassignments(
    student_id: str = Path(..., description="Student ID"),
    store: Datastore = Depends(get_datastore),
) -> list[ReassignmentSuggestion]:
    """Reassignment suggestions moving tasks to or from this student."""
    await _require_student(store, student_id)
    try:
        tasks = await store.get_tasks()
        students = rescore_students(await store.get_students(), tasks)
        rejections = await store.get_rejections()
    except Exception as e:
        logger.error(f"Error suggesting task reassignments for {student_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e

    suggestions = without_rejected(suggest_task_reassignments(students, tasks), rejections)
    return [
        s for s in suggestions
        if s.from_student_id == student_id or s.to_student_id == student_id
    ]
