"""Suggested check-in messages a PM can send to a student."""

from pbl_dashboard.core.schemas_scoring import (
    EncouragementExample,
    EncouragementExamples,
    StudentState,
)
from pbl_dashboard.core.schemas_tasks import TaskStatus


def _skills_phrase(labels: list[str]) -> str:
    return " and ".join(labels) if labels else "your"


def generate_encouragement_examples(student: StudentState) -> EncouragementExamples:
    """Pick example messages for the student's current motivation and load."""
    examples: list[EncouragementExample] = []
    name = student.name
    low_motivation = student.motivation_score <= 2
    high_load = student.load_score >= 4

    if low_motivation:
        if high_load:
            examples.append(EncouragementExample(
                situation="Low motivation, high load",
                message=(
                    f"{name}, you seem really busy lately. Are you pushing yourself too hard? "
                    "Let's look at your task priorities together and find ways to lighten the load."
                ),
                tone="supportive",
            ))
        else:
            examples.append(EncouragementExample(
                situation="Low motivation",
                message=(
                    f"{name}, how are things going lately? If anything is bothering you, "
                    f"feel free to talk to me anytime. Your {_skills_phrase(student.strengths)} "
                    "skills matter to the team."
                ),
                tone="gentle",
            ))

        completed = [t for t in student.recent_tasks if t.status == TaskStatus.COMPLETED.value]
        if completed:
            examples.append(EncouragementExample(
                situation="Acknowledge progress",
                message=f"{name}, great work finishing {completed[0].title}! You're making steady progress.",
                tone="supportive",
            ))

    if high_load and not low_motivation:
        examples.append(EncouragementExample(
            situation="High load",
            message=(
                f"{name}, are you overdoing it? You can always talk to your teammates "
                "and share tasks. Your health comes first."
            ),
            tone="supportive",
        ))

    if student.motivation_score >= 4:
        examples.append(EncouragementExample(
            situation="High motivation",
            message=(
                f"{name}, thanks for always diving in! It would be great to see you take on "
                f"even more in {_skills_phrase(student.strengths)} work."
            ),
            tone="energetic",
        ))

    mbti = student.MBTI.upper()
    if mbti.startswith("I"):
        examples.append(EncouragementExample(
            situation="Personality-aware",
            message=(
                f"{name}, make sure you keep time to focus on your own. "
                "If you need a quieter place to work, I can help arrange it."
            ),
            tone="gentle",
        ))
    elif mbti.startswith("E"):
        examples.append(EncouragementExample(
            situation="Personality-aware",
            message=(
                f"{name}, you're very active in the team. Keep collaborating "
                "with the others as you move forward!"
            ),
            tone="energetic",
        ))

    if student.weaknesses:
        examples.append(EncouragementExample(
            situation="Growth support",
            message=(
                f"{name}, if you'd like support with {student.weaknesses[0]}, "
                "just let me know. Let's grow together."
            ),
            tone="supportive",
        ))

    if not examples:
        examples.append(EncouragementExample(
            situation="General check-in",
            message=f"{name}, thanks for your work. Reach out anytime if something comes up.",
            tone="supportive",
        ))

    return EncouragementExamples(examples=examples)
