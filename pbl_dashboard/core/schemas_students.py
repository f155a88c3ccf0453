"""Pydantic schemas for students and their team relationships."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StudentProfile(BaseModel):
    """Attributes of a student that feed the scoring engine.

    Skill ratings are 1-5 and optional; an unset rating falls back to the
    legacy ``strengths`` list and then to a neutral default.
    """

    model_config = ConfigDict(extra="ignore")

    student_id: str
    MBTI: str = ""

    skill_planning: Optional[float] = None
    skill_execution: Optional[float] = None
    skill_coordination: Optional[float] = None
    skill_exploration: Optional[float] = None
    skill_design: Optional[float] = None
    skill_development: Optional[float] = None
    skill_analysis: Optional[float] = None
    skill_documentation: Optional[float] = None
    skill_communication: Optional[float] = None
    skill_leadership: Optional[float] = None
    skill_presentation: Optional[float] = None
    skill_problem_solving: Optional[float] = None

    # Legacy free-text aptitude lists
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)

    preferred_partners: list[str] = Field(default_factory=list)
    avoided_partners: list[str] = Field(default_factory=list)


class Student(StudentProfile):
    """A student record as stored in the datastore."""

    name: str = ""
    animal_type: str = ""
    team_id: str = ""
    motivation_score: float = 3.0
    load_score: float = 3.0


class TeamCompatibility(BaseModel):
    """A student's view of their current team, built per request."""

    partner_ids: list[str] = Field(default_factory=list)
    preferred_partners: list[str] = Field(default_factory=list)
    avoided_partners: list[str] = Field(default_factory=list)

    @property
    def preferred_count(self) -> int:
        preferred = set(self.preferred_partners)
        return sum(1 for pid in self.partner_ids if pid in preferred)

    @property
    def avoided_count(self) -> int:
        avoided = set(self.avoided_partners)
        return sum(1 for pid in self.partner_ids if pid in avoided)


def build_team_compatibility(
    student: StudentProfile, teammates: list[StudentProfile]
) -> TeamCompatibility:
    """Combine team membership with the student's own partner preferences."""
    return TeamCompatibility(
        partner_ids=[m.student_id for m in teammates if m.student_id != student.student_id],
        preferred_partners=list(student.preferred_partners),
        avoided_partners=list(student.avoided_partners),
    )
