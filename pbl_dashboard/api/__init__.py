"""API router for v1 endpoints."""

from fastapi import APIRouter

from pbl_dashboard.api import airtable, chat, pm, scoring, students, tasks

router = APIRouter()

router.include_router(students.router, tags=["students"])
router.include_router(tasks.router, tags=["tasks"])
router.include_router(pm.router, tags=["pm"])
router.include_router(scoring.router, tags=["scoring"])
router.include_router(chat.router, tags=["chat"])
router.include_router(airtable.router, tags=["airtable"])
