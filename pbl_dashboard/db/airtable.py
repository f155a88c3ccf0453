"""Airtable REST client and record mappers.

Each ``AirtableTable`` is bound to one ``AirtableConfig`` (API key, base ID,
table name) built once from settings; nothing here reads the environment.
"""

from dataclasses import dataclass
from typing import Any

import httpx

from pbl_dashboard.core.logging import get_logger

logger = get_logger(__name__)

AIRTABLE_API_URL = "https://api.airtable.com/v0"

SKILL_FIELD_NAMES = {
    "skill_planning": "Skill Planning",
    "skill_execution": "Skill Execution",
    "skill_coordination": "Skill Coordination",
    "skill_exploration": "Skill Exploration",
    "skill_design": "Skill Design",
    "skill_development": "Skill Development",
    "skill_analysis": "Skill Analysis",
    "skill_documentation": "Skill Documentation",
    "skill_communication": "Skill Communication",
    "skill_leadership": "Skill Leadership",
    "skill_presentation": "Skill Presentation",
    "skill_problem_solving": "Skill Problem Solving",
}

TASK_STATUSES = {"pending", "in_progress", "completed"}


class AirtableNotConfiguredError(RuntimeError):
    """Raised when Airtable is used without an API key or base ID."""


@dataclass(frozen=True)
class AirtableConfig:
    """Connection settings for one Airtable table."""

    api_key: str
    base_id: str
    table_name: str


class AirtableTable:
    """Thin async client for one Airtable table."""

    def __init__(self, config: AirtableConfig, view: str | None = None, timeout: float = 15.0):
        if not config.api_key or not config.base_id:
            raise AirtableNotConfiguredError("Airtable credentials not configured")
        self.config = config
        self.view = view
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{AIRTABLE_API_URL}/{self.config.base_id}/{self.config.table_name}"

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.config.api_key}"}

    async def list_records(self, formula: str | None = None) -> list[dict[str, Any]]:
        """
        Fetch every record in the table, following the pagination offset.

        Args:
            formula: Optional Airtable filterByFormula expression

        Returns:
            Raw records ({"id", "fields", "createdTime"})

        Raises:
            httpx.HTTPStatusError: If Airtable rejects a request
        """
        records: list[dict[str, Any]] = []
        params: dict[str, str] = {}
        if self.view:
            params["view"] = self.view
        if formula:
            params["filterByFormula"] = formula

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            while True:
                response = await client.get(self.url, headers=self.headers, params=params)
                response.raise_for_status()
                data = response.json()
                records.extend(data.get("records", []))

                offset = data.get("offset")
                if not offset:
                    break
                params["offset"] = offset

        logger.info(f"Fetched {len(records)} records from Airtable table '{self.config.table_name}'")
        return records

    async def update_record(self, record_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """
        Patch fields on one record.

        Raises:
            httpx.HTTPStatusError: If Airtable rejects the update
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.patch(
                f"{self.url}/{record_id}",
                headers=self.headers,
                json={"fields": fields},
            )
            response.raise_for_status()
            return response.json()

    async def find_record_id(self, field: str, value: str) -> str | None:
        escaped = value.replace("'", "\\'")
        records = await self.list_records(formula=f"{{{field}}}='{escaped}'")
        return records[0]["id"] if records else None


# ============================================================================
# Record mappers
# ============================================================================


def _first(fields: dict[str, Any], *names: str) -> Any:
    for name in names:
        value = fields.get(name)
        if value not in (None, ""):
            return value
    return None


def parse_number(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return default
    return default


def parse_list(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(v) for v in value if v not in (None, "")]
    if isinstance(value, str) and value.strip():
        return [value.strip()]
    return []


def _parse_status(value: Any) -> str:
    status = str(value or "pending").strip().lower().replace(" ", "_")
    return status if status in TASK_STATUSES else "pending"


def _single_id(value: Any) -> str | None:
    if isinstance(value, list):
        ids = [str(v) for v in value if v not in (None, "")]
    elif isinstance(value, str):
        ids = [v.strip() for v in value.split(",") if v.strip()]
    else:
        ids = []
    # Linked-record fields may list several IDs; the first one wins
    return ids[0] if ids else None


def student_from_fields(record: dict[str, Any]) -> dict[str, Any]:
    """Map an Airtable student record onto Student field names."""
    fields = record.get("fields", {})
    student = {
        "student_id": _first(fields, "student_id", "Student ID") or record.get("id"),
        "name": _first(fields, "name", "Name") or "",
        "MBTI": _first(fields, "MBTI", "mbti") or "",
        "animal_type": _first(fields, "animal_type", "Animal Type") or "",
        "strengths": parse_list(_first(fields, "strengths", "Strengths")),
        "weaknesses": parse_list(_first(fields, "weaknesses", "Weaknesses")),
        "preferred_partners": parse_list(_first(fields, "preferred_partners", "Preferred Partners")),
        "avoided_partners": parse_list(_first(fields, "avoided_partners", "Avoided Partners")),
        "team_id": _first(fields, "team_id", "Team ID") or "",
        "motivation_score": parse_number(_first(fields, "motivation_score", "Motivation Score"), 3),
        "load_score": parse_number(_first(fields, "load_score", "Load Score", "Task Load"), 3),
    }
    for field, title in SKILL_FIELD_NAMES.items():
        student[field] = parse_number(_first(fields, field, title), 3)
    return student


def task_from_fields(record: dict[str, Any]) -> dict[str, Any]:
    """Map an Airtable task record onto Task field names."""
    fields = record.get("fields", {})
    return {
        "task_id": _first(fields, "task_id", "Task ID") or record.get("id"),
        "title": _first(fields, "title", "Title") or "",
        "category": _first(fields, "category", "Category") or "",
        "difficulty": parse_number(_first(fields, "difficulty", "Difficulty"), 3),
        "estimated_hours": parse_number(_first(fields, "estimated_hours", "Estimated Hours"), 0),
        "deadline": _first(fields, "deadline", "Deadline"),
        "start_date": _first(fields, "start_date", "Start Date"),
        "end_date": _first(fields, "end_date", "End Date"),
        "status": _parse_status(_first(fields, "status", "Status")),
        "assignee_id": _single_id(_first(fields, "assignee_id", "Assignee ID", "Assignee")),
    }


def team_from_fields(record: dict[str, Any]) -> dict[str, Any]:
    """Map an Airtable team record onto Team field names."""
    fields = record.get("fields", {})
    return {
        "team_id": _first(fields, "team_id", "Team ID") or record.get("id"),
        "name": _first(fields, "name", "Name") or "",
        "description": _first(fields, "description", "Description") or "",
        "student_ids": parse_list(_first(fields, "student_ids", "Student IDs")),
        "project_name": _first(fields, "project_name", "Project Name") or "",
        "leader_id": _single_id(_first(fields, "leader_id", "Leader ID", "Leader")),
    }
