"""Student, task and team storage.

Records live in JSON files under ``DATA_DIR``:

    students/<name>.json   one student per file (preferred)
    students.json          {"students": [...]} (older layout, read as fallback)
    tasks.json             [...]
    teams.json             [...]
    reassignment_rejections.json   [...] (local only)

When Airtable is configured, reads go to Airtable first and fall back to the
files on any error or timeout.
"""

import asyncio
import json
import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, TypeVar

from pydantic import BaseModel, ValidationError

from pbl_dashboard.core.config import get_settings
from pbl_dashboard.core.logging import get_logger, log_with_context
from pbl_dashboard.core.schemas_pm import ReassignmentRejection
from pbl_dashboard.core.schemas_students import Student
from pbl_dashboard.core.schemas_tasks import Task, TaskStatus, Team
from pbl_dashboard.core.scoring import now_utc
from pbl_dashboard.db.airtable import (
    AirtableNotConfiguredError,
    AirtableTable,
    student_from_fields,
    task_from_fields,
    team_from_fields,
)

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

_UNSAFE_FILENAME_CHARS = re.compile(r'[/\\:*?"<>|]')

REJECTIONS_FILE = "reassignment_rejections.json"


def sanitize_file_name(name: str) -> str:
    """Strip whitespace and characters not allowed in file names."""
    return _UNSAFE_FILENAME_CHARS.sub("", re.sub(r"\s+", "", name)).strip()


def _validate_all(model: type[T], rows: list[dict[str, Any]], source: str) -> list[T]:
    items: list[T] = []
    for row in rows:
        try:
            items.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning(f"Skipping invalid {model.__name__} in {source}: {e.error_count()} error(s)")
    return items


class FileDatastore:
    """JSON-file-backed storage rooted at one data directory."""

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)

    @property
    def students_dir(self) -> Path:
        return self.data_dir / "students"

    def _read_json(self, path: Path) -> Any:
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error reading {path}: {e}")
            return None

    def _write_json(self, path: Path, data: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    # Students

    def load_students(self) -> list[Student]:
        """Load students from students/, falling back to students.json."""
        students: list[Student] = []

        if self.students_dir.is_dir():
            for path in sorted(self.students_dir.glob("*.json")):
                data = self._read_json(path)
                if not isinstance(data, dict) or not data.get("student_id") or not data.get("name"):
                    logger.warning(f"Invalid student data in {path.name}")
                    continue
                students.extend(_validate_all(Student, [data], path.name))
            logger.debug(f"Loaded {len(students)} students from {self.students_dir}")

        if students:
            return students

        data = self._read_json(self.data_dir / "students.json")
        if isinstance(data, dict):
            return _validate_all(Student, data.get("students") or [], "students.json")
        return []

    def save_student(self, student: Student) -> Path:
        file_name = sanitize_file_name(student.name) or sanitize_file_name(student.student_id)
        path = self.students_dir / f"{file_name}.json"
        self._write_json(path, student.model_dump(exclude_none=True))
        return path

    def save_students(self, students: list[Student]) -> None:
        for student in students:
            self.save_student(student)

    # Tasks

    def load_tasks(self) -> list[Task]:
        data = self._read_json(self.data_dir / "tasks.json")
        rows = data.get("tasks", []) if isinstance(data, dict) else data or []
        return _validate_all(Task, rows, "tasks.json")

    def save_tasks(self, tasks: list[Task]) -> None:
        self._write_json(self.data_dir / "tasks.json", [t.model_dump() for t in tasks])

    # Teams

    def load_teams(self) -> list[Team]:
        data = self._read_json(self.data_dir / "teams.json")
        rows = data.get("teams", []) if isinstance(data, dict) else data or []
        return _validate_all(Team, rows, "teams.json")

    def save_teams(self, teams: list[Team]) -> None:
        self._write_json(self.data_dir / "teams.json", [t.model_dump() for t in teams])

    # Rejected reassignment suggestions

    def load_rejections(self) -> list[ReassignmentRejection]:
        data = self._read_json(self.data_dir / REJECTIONS_FILE)
        rows = data if isinstance(data, list) else []
        return _validate_all(ReassignmentRejection, rows, REJECTIONS_FILE)

    def save_rejections(self, rejections: list[ReassignmentRejection]) -> None:
        self._write_json(self.data_dir / REJECTIONS_FILE, [r.model_dump() for r in rejections])


class Datastore:
    """Read-through access to students, tasks and teams."""

    def __init__(
        self,
        files: FileDatastore,
        students_table: AirtableTable | None = None,
        tasks_table: AirtableTable | None = None,
        teams_table: AirtableTable | None = None,
        timeout: float = 2.0,
    ):
        self.files = files
        self.students_table = students_table
        self.tasks_table = tasks_table
        self.teams_table = teams_table
        self.timeout = timeout

    @property
    def airtable_enabled(self) -> bool:
        return self.students_table is not None

    async def _from_airtable(
        self,
        table: AirtableTable,
        mapper: Callable[[dict[str, Any]], dict[str, Any]],
        model: type[T],
    ) -> list[T]:
        records = await table.list_records()
        return _validate_all(model, [mapper(r) for r in records], f"Airtable {table.config.table_name}")

    async def _read(
        self,
        table: AirtableTable | None,
        mapper: Callable[[dict[str, Any]], dict[str, Any]],
        model: type[T],
        fallback: Callable[[], list[T]],
    ) -> list[T]:
        if table is not None:
            try:
                return await asyncio.wait_for(
                    self._from_airtable(table, mapper, model), timeout=self.timeout
                )
            except Exception as e:
                logger.warning(
                    f"Error fetching {model.__name__} records from Airtable, falling back to files: {e!r}"
                )
        return fallback()

    async def get_students(self) -> list[Student]:
        return await self._read(self.students_table, student_from_fields, Student, self.files.load_students)

    async def get_tasks(self) -> list[Task]:
        return await self._read(self.tasks_table, task_from_fields, Task, self.files.load_tasks)

    async def get_teams(self) -> list[Team]:
        return await self._read(self.teams_table, team_from_fields, Team, self.files.load_teams)

    async def get_student(self, student_id: str) -> Student | None:
        students = await self.get_students()
        return next((s for s in students if s.student_id == student_id), None)

    async def get_student_tasks(self, student_id: str) -> list[Task]:
        tasks = await self.get_tasks()
        return [t for t in tasks if t.assignee_id == student_id]

    async def get_teammates(self, student: Student) -> list[Student]:
        return self.teammates_of(student, await self.get_students())

    @staticmethod
    def teammates_of(student: Student, students: list[Student]) -> list[Student]:
        """Other students sharing the student's team_id."""
        if not student.team_id:
            return []
        return [
            s for s in students
            if s.team_id == student.team_id and s.student_id != student.student_id
        ]

    async def update_task_assignee(self, task_id: str, assignee_id: str) -> Task | None:
        """
        Reassign a task in the local files and, when configured, in Airtable.

        The task is looked up through the same read path as ``get_tasks``.
        A task that is not yet completed moves to ``in_progress``.

        Returns:
            The updated task, or None if no task has that ID
        """
        task = next((t for t in await self.get_tasks() if t.task_id == task_id), None)
        if task is None:
            return None

        status = TaskStatus.IN_PROGRESS.value if task.is_active else task.status
        fields = {"assignee_id": assignee_id, "status": status}
        updated = task.model_copy(update=fields)

        local = self.files.load_tasks()
        for i, existing in enumerate(local):
            if existing.task_id == task_id:
                local[i] = updated
                break
        else:
            local.append(updated)
        self.files.save_tasks(local)

        if self.tasks_table is not None:
            record_id = await self.tasks_table.find_record_id("task_id", task_id)
            if record_id:
                await self.tasks_table.update_record(record_id, fields)
            else:
                logger.warning(f"Task {task_id} not found in Airtable; updated local files only")

        log_with_context(
            logger, logging.INFO, f"Reassigned task {task_id}",
            student_id=assignee_id, task_id=task_id, status=status,
        )
        return updated

    async def update_student(self, student: Student, fields: dict[str, Any]) -> Student:
        """
        Apply field updates to a student and persist them.

        The student file is always rewritten; Airtable is patched when configured.
        """
        updated = student.model_copy(update=fields)
        self.files.save_student(updated)

        if self.students_table is not None:
            record_id = await self.students_table.find_record_id("student_id", student.student_id)
            if record_id:
                await self.students_table.update_record(record_id, fields)
            else:
                logger.warning(f"Student {student.student_id} not found in Airtable; updated local files only")

        log_with_context(
            logger, logging.INFO, "Updated student record",
            student_id=student.student_id, fields=",".join(sorted(fields)),
        )
        return updated

    async def get_rejections(self) -> list[ReassignmentRejection]:
        return self.files.load_rejections()

    async def reject_reassignment(
        self,
        task_id: str,
        to_student_id: str | None = None,
        reason: str | None = None,
    ) -> ReassignmentRejection:
        """
        Record a rejected reassignment suggestion.

        A later rejection for the same task and target replaces the earlier one.
        """
        rejection = ReassignmentRejection(
            task_id=task_id,
            to_student_id=to_student_id,
            reason=reason,
            rejected_at=now_utc().isoformat(),
        )
        rejections = [
            r for r in self.files.load_rejections()
            if (r.task_id, r.to_student_id) != (task_id, to_student_id)
        ]
        rejections.append(rejection)
        self.files.save_rejections(rejections)

        log_with_context(
            logger, logging.INFO, f"Rejected reassignment of task {task_id}",
            student_id=to_student_id, task_id=task_id, reason=reason,
        )
        return rejection

    async def sync_from_airtable(self) -> dict[str, int]:
        """
        Copy all Airtable records into the local files.

        Raises:
            AirtableNotConfiguredError: If Airtable is not configured
            httpx.HTTPStatusError: If Airtable rejects a request
        """
        if self.students_table is None or self.tasks_table is None or self.teams_table is None:
            raise AirtableNotConfiguredError("Airtable credentials not configured")

        students = await self._from_airtable(self.students_table, student_from_fields, Student)
        tasks = await self._from_airtable(self.tasks_table, task_from_fields, Task)
        teams = await self._from_airtable(self.teams_table, team_from_fields, Team)

        self.files.save_students(students)
        self.files.save_tasks(tasks)
        self.files.save_teams(teams)

        counts = {"students": len(students), "tasks": len(tasks), "teams": len(teams)}
        logger.info(f"Synced Airtable to {self.files.data_dir}: {counts}")
        return counts


@lru_cache(maxsize=1)
def get_datastore() -> Datastore:
    """
    Get the process-wide datastore (cached singleton).

    Airtable tables are attached only when credentials are configured.
    """
    settings = get_settings()
    tables: dict[str, AirtableTable | None] = {}
    for key, table_name in (
        ("students_table", settings.AIRTABLE_STUDENTS_TABLE),
        ("tasks_table", settings.AIRTABLE_TASKS_TABLE),
        ("teams_table", settings.AIRTABLE_TEAMS_TABLE),
    ):
        config = settings.airtable_config(table_name)
        tables[key] = AirtableTable(config, view=settings.AIRTABLE_VIEW) if config else None

    return Datastore(
        FileDatastore(settings.DATA_DIR),
        timeout=settings.AIRTABLE_TIMEOUT_SECONDS,
        **tables,
    )
