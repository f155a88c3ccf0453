"""API endpoints for tasks and teams."""

from fastapi import APIRouter, Depends, HTTPException, Query

from pbl_dashboard.core.logging import get_logger
from pbl_dashboard.core.schemas_tasks import Task, TaskStatus, Team
from pbl_dashboard.db.datastore import Datastore, get_datastore

logger = get_logger(__name__)

router = APIRouter()


@router.get("/tasks", response_model=list[Task])
async def list_tasks(
    assignee_id: str | None = Query(None, description="Filter by assignee"),
    status: TaskStatus | None = Query(None, description="Filter by status"),
    store: Datastore = Depends(get_datastore),
) -> list[Task]:
    """List tasks, optionally filtered by assignee and status."""
    try:
        tasks = await store.get_tasks()
    except Exception as e:
        logger.error(f"Error listing tasks: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e

    if assignee_id:
        tasks = [t for t in tasks if t.assignee_id == assignee_id]
    if status:
        tasks = [t for t in tasks if t.status == status.value]
    return tasks


@router.get("/teams", response_model=list[Team])
async def list_teams(store: Datastore = Depends(get_datastore)) -> list[Team]:
    try:
        return await store.get_teams()
    except Exception as e:
        logger.error(f"Error listing teams: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e
