"""Airtable sync endpoint."""

import httpx
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from pbl_dashboard.core.logging import get_logger
from pbl_dashboard.db.airtable import AirtableNotConfiguredError
from pbl_dashboard.db.datastore import Datastore, get_datastore

logger = get_logger(__name__)

router = APIRouter(prefix="/airtable")


class SyncResponse(BaseModel):
    success: bool
    students: int
    tasks: int
    teams: int


@router.post("/sync", response_model=SyncResponse)
async def sync_airtable(store: Datastore = Depends(get_datastore)) -> SyncResponse:
    """Pull students, tasks and teams from Airtable into the local data files."""
    try:
        counts = await store.sync_from_airtable()
    except AirtableNotConfiguredError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except httpx.HTTPError as e:
        logger.error(f"Airtable sync failed: {e}", exc_info=True)
        raise HTTPException(status_code=502, detail=f"Airtable error: {e}") from e

    return SyncResponse(success=True, **counts)
