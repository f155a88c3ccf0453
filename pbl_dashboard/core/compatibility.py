"""Pairwise team compatibility.

Scores are directional: ``pair_compatibility(a, b)`` uses ``a``'s partner
preferences towards ``b``, so the matrix is not necessarily symmetric.
"""

from pbl_dashboard.core.schemas_scoring import (
    PairCompatibility,
    PartnerClassification,
    PartnerRecommendation,
    TeamCompatibilityMap,
    TeamMemberRef,
)
from pbl_dashboard.core.schemas_students import Student
from pbl_dashboard.core.schemas_tasks import Team
from pbl_dashboard.core.scoring import clamp_score

BASE_PAIR_SCORE = 3.0
PREFERRED_BONUS = 2.0
AVOIDED_PENALTY = 2.0
SHARED_TRAIT_BONUS = 0.5

SAME_PERSON_REASON = "same person"


def pair_compatibility(a: Student, b: Student) -> PairCompatibility:
    """Compatibility of ``a`` towards ``b``; 0 with reason "same person" on the diagonal."""
    if a.student_id == b.student_id:
        return PairCompatibility(score=0, reason=SAME_PERSON_REASON)

    score = BASE_PAIR_SCORE
    reasons: list[str] = []

    if b.student_id in a.preferred_partners:
        score += PREFERRED_BONUS
        reasons.append("good match")

    if b.student_id in a.avoided_partners:
        score -= AVOIDED_PENALTY
        reasons.append("needs attention")

    mbti_a = a.MBTI.upper()
    mbti_b = b.MBTI.upper()

    # Same extraversion/introversion
    if mbti_a[:1] in ("E", "I") and mbti_a[:1] == mbti_b[:1]:
        score += SHARED_TRAIT_BONUS

    # Same judging/perceiving
    if mbti_a[-1:] in ("J", "P") and mbti_a[-1:] == mbti_b[-1:]:
        score += SHARED_TRAIT_BONUS

    return PairCompatibility(score=clamp_score(score), reason=", ".join(reasons) or "neutral")


def compatibility_matrix(members: list[Student]) -> list[list[PairCompatibility]]:
    return [[pair_compatibility(row, col) for col in members] for row in members]


def build_compatibility_map(teams: list[Team], students: list[Student]) -> list[TeamCompatibilityMap]:
    """Per-team compatibility matrices, members in datastore order."""
    result = []
    for team in teams:
        member_ids = set(team.student_ids)
        members = [s for s in students if s.student_id in member_ids]
        result.append(TeamCompatibilityMap(
            team_id=team.team_id,
            team_name=team.name,
            students=[TeamMemberRef(student_id=s.student_id, name=s.name) for s in members],
            compatibility_matrix=compatibility_matrix(members),
        ))
    return result


def classify_partners(student: Student, teammates: list[Student]) -> PartnerClassification:
    """Split teammates into recommended, avoid and neutral groups."""
    classification = PartnerClassification()
    preferred = set(student.preferred_partners)
    avoided = set(student.avoided_partners)

    for mate in teammates:
        if mate.student_id == student.student_id:
            continue
        if mate.student_id in avoided:
            classification.avoid.append(PartnerRecommendation(
                student_id=mate.student_id, name=mate.name, reason="needs attention", score=2,
            ))
        elif mate.student_id in preferred:
            classification.recommended.append(PartnerRecommendation(
                student_id=mate.student_id, name=mate.name, reason="good match", score=5,
            ))
        else:
            classification.neutral.append(PartnerRecommendation(
                student_id=mate.student_id, name=mate.name, reason="no concerns", score=3,
            ))

    return classification
