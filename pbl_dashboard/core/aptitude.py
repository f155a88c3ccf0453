"""Per-category aptitude lookup.

A student's aptitude for a task category can come from two places: the
structured 1-5 skill ratings, or the older free-text ``strengths`` list.
Each source is a provider that either answers with a value or returns None;
``AptitudeChain`` asks them in order and falls back to a neutral default.
"""

from __future__ import annotations

from typing import Protocol

from pbl_dashboard.core.schemas_students import StudentProfile

DEFAULT_APTITUDE = 3.0
LEGACY_STRENGTH_APTITUDE = 4.0

# Ratings at or above this count as a strength
STRENGTH_THRESHOLD = 3.5
# Ratings below this count as a weakness
WEAKNESS_THRESHOLD = 3.0

# Categories whose skill rating is consulted when scoring motivation
CATEGORY_SKILL_FIELDS: dict[str, str] = {
    "planning": "skill_planning",
    "execution": "skill_execution",
    "coordination": "skill_coordination",
    "exploration": "skill_exploration",
    "design": "skill_design",
    "development": "skill_development",
    "analysis": "skill_analysis",
    "documentation": "skill_documentation",
}


class AptitudeProvider(Protocol):
    def aptitude(self, category: str) -> float | None:
        ...

    def strengths(self) -> list[str]:
        ...

    def weaknesses(self) -> list[str]:
        ...


class SkillTableAptitude:
    """Structured skill ratings keyed through CATEGORY_SKILL_FIELDS."""

    def __init__(self, profile: StudentProfile):
        self.profile = profile

    def aptitude(self, category: str) -> float | None:
        field = CATEGORY_SKILL_FIELDS.get(category)
        if field is None:
            return None
        return getattr(self.profile, field)

    def _rated(self) -> list[tuple[str, float]]:
        rated = []
        for category, field in CATEGORY_SKILL_FIELDS.items():
            value = getattr(self.profile, field)
            if value is not None:
                rated.append((category, value))
        return rated

    def strengths(self) -> list[str]:
        return [c for c, v in self._rated() if v >= STRENGTH_THRESHOLD]

    def weaknesses(self) -> list[str]:
        return [c for c, v in self._rated() if v < WEAKNESS_THRESHOLD]


class LegacyStrengthsAptitude:
    """Free-text strengths/weaknesses lists from older student records."""

    def __init__(self, profile: StudentProfile):
        self.profile = profile

    def aptitude(self, category: str) -> float | None:
        if category in self.profile.strengths:
            return LEGACY_STRENGTH_APTITUDE
        return None

    def strengths(self) -> list[str]:
        return list(self.profile.strengths)

    def weaknesses(self) -> list[str]:
        return list(self.profile.weaknesses)


class AptitudeChain:
    """Ask providers in order; first non-None answer wins."""

    def __init__(self, providers: list[AptitudeProvider], default: float = DEFAULT_APTITUDE):
        self.providers = providers
        self.default = default

    def aptitude(self, category: str) -> float:
        for provider in self.providers:
            value = provider.aptitude(category)
            if value is not None:
                return value
        return self.default

    def is_strength(self, category: str) -> bool:
        return self.aptitude(category) >= STRENGTH_THRESHOLD

    def strengths(self) -> list[str]:
        for provider in self.providers:
            labels = provider.strengths()
            if labels:
                return labels
        return []

    def weaknesses(self) -> list[str]:
        for provider in self.providers:
            labels = provider.weaknesses()
            if labels:
                return labels
        return []


def aptitude_for(profile: StudentProfile) -> AptitudeChain:
    """Standard lookup: skill ratings, then legacy strengths, then 3.0."""
    return AptitudeChain([SkillTableAptitude(profile), LegacyStrengthsAptitude(profile)])
