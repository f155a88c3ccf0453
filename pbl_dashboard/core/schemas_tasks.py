"""Pydantic schemas for tasks and teams."""

from enum import Enum
from typing import Optional

from dateutil.parser import isoparse
from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# Enums
# ============================================================================


class TaskStatus(str, Enum):
    """Status of a task in its lifecycle."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskCategory(str, Enum):
    """Work categories a task can belong to. Each maps to one skill rating."""
    PLANNING = "planning"
    EXECUTION = "execution"
    COORDINATION = "coordination"
    EXPLORATION = "exploration"
    DESIGN = "design"
    DEVELOPMENT = "development"
    ANALYSIS = "analysis"
    DOCUMENTATION = "documentation"
    COMMUNICATION = "communication"
    LEADERSHIP = "leadership"
    PRESENTATION = "presentation"
    PROBLEM_SOLVING = "problem-solving"


# ============================================================================
# Task Schemas
# ============================================================================


class Task(BaseModel):
    """A unit of project work assigned to one student."""

    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    task_id: str
    title: str = ""
    difficulty: float = Field(3, description="Difficulty on a 1-5 scale")
    estimated_hours: float = Field(0, description="Estimated effort in hours")
    deadline: Optional[str] = Field(None, description="ISO-8601 date or datetime")
    status: TaskStatus = TaskStatus.PENDING.value
    category: str = ""
    assignee_id: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @field_validator("deadline", "start_date", "end_date")
    @classmethod
    def iso_date_or_none(cls, v: Optional[str]) -> Optional[str]:
        """Reject dates the scoring engine cannot parse; blank means unset."""
        if v is None or not v.strip():
            return None
        try:
            isoparse(v)
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Invalid ISO-8601 date: {v!r}") from e
        return v

    @property
    def is_active(self) -> bool:
        return self.status != TaskStatus.COMPLETED.value


class Team(BaseModel):
    """A project team."""

    model_config = ConfigDict(extra="ignore")

    team_id: str
    name: str = ""
    description: str = ""
    student_ids: list[str] = Field(default_factory=list)
    project_name: str = ""
    leader_id: Optional[str] = None
