"""
Content sources - where the loader gets the four parts of a bundle.

ContentSource is the pluggable boundary (a file reader, an API client,
a test double). CurriculumContentSource builds everything from the
curriculum definition itself: hand-written overview and section text
where the YAML has it, generated text and count-driven exercises and
quiz questions otherwise.
"""

import re
from typing import Protocol

from orbitlearn.schemas import (
    CodeExample,
    Exercise,
    ExerciseCheck,
    GroupDefinition,
    GroupOverview,
    QuizDefinition,
    QuizQuestion,
    Section,
    SectionContent,
)


class ContentSource(Protocol):
    async def fetch_overview(self, group: GroupDefinition) -> GroupOverview: ...

    async def fetch_section(self, group: GroupDefinition, section_id: str) -> Section: ...

    async def fetch_exercises(self, group: GroupDefinition) -> list[Exercise]: ...

    async def fetch_quiz(self, group: GroupDefinition) -> QuizDefinition: ...


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def format_section_title(section_id: str) -> str:
    """'asyncAwait' -> 'Async Await'"""
    spaced = re.sub(r"([A-Z])", r" \1", section_id).strip()
    return spaced[:1].upper() + spaced[1:]


def exercise_difficulty(number: int, total: int) -> str:
    ratio = number / total
    if ratio <= 0.4:
        return "easy"
    if ratio <= 0.7:
        return "medium"
    return "hard"


def question_difficulty(number: int, total: int) -> str:
    ratio = number / total
    if ratio <= 0.3:
        return "easy"
    if ratio <= 0.6:
        return "medium"
    return "hard"


QUESTION_POINTS = {"easy": 5, "medium": 10, "hard": 15}


def question_points(number: int, total: int) -> int:
    return QUESTION_POINTS[question_difficulty(number, total)]


# -----------------------------------------------------------------------------
# Default source
# -----------------------------------------------------------------------------

class CurriculumContentSource:
    """Generate bundle content from the curriculum definition."""

    passing_score = 80
    options_per_question = 4

    async def fetch_overview(self, group: GroupDefinition) -> GroupOverview:
        spec = group.overview
        if spec is None:
            return GroupOverview(
                title=group.display_title,
                description=f"Learn the core ideas of {group.display_title}",
                estimated_time="3-4 hours",
                difficulty="Intermediate",
            )
        return GroupOverview(
            title=spec.title,
            description=spec.description,
            learning_objectives=tuple(spec.learning_objectives),
            prerequisites=tuple(spec.prerequisites),
            estimated_time=spec.estimated_time,
            difficulty=spec.difficulty,
        )

    async def fetch_section(self, group: GroupDefinition, section_id: str) -> Section:
        template = group.section_content.get(section_id)
        if template is not None:
            description = template.content
            examples = tuple(template.examples)
        else:
            description = f"Learn about {section_id} in {group.id}"
            examples = (f"// {section_id} example\nconsole.log('{section_id}');",)

        return Section(
            id=section_id,
            title=format_section_title(section_id),
            content=SectionContent(
                description=description,
                examples=examples,
                explanation=(
                    f"This section covers the important aspects of {section_id}. "
                    "You'll learn practical techniques and common pitfalls."
                ),
            ),
            code_examples=(
                CodeExample(
                    title=f"{section_id} Example",
                    code=f"// {group.id} - {section_id}\nconsole.log('Learning {section_id}');",
                    explanation=f"Basic example demonstrating {section_id}",
                ),
                CodeExample(
                    title=f"Advanced {section_id}",
                    code=f"// Advanced {section_id} example\nfunction demo_{section_id}() {{\n  // Implementation here\n}}",
                    explanation=f"More complex example of {section_id}",
                ),
            ),
            key_points=(
                f"{section_id} is fundamental to {group.id}",
                f"Understanding {section_id} improves code quality",
                f"Practice {section_id} with real examples",
                f"Apply {section_id} in practical projects",
            ),
        )

    async def fetch_exercises(self, group: GroupDefinition) -> list[Exercise]:
        total = group.exercises
        title = group.display_title
        return [
            Exercise(
                id=f"{group.id}-exercise-{i}",
                title=f"{title} Exercise {i}",
                description=f"Practice {group.id} concepts with this hands-on exercise.",
                difficulty=exercise_difficulty(i, total),
                instructions=f"Complete the {group.id} exercise by implementing the required functionality.",
                starter_code=f"// {group.id} Exercise {i}\n// Write your solution here",
                solution=f"// Solution for {group.id} Exercise {i}\nconsole.log('Exercise completed');",
                hints=(
                    f"Remember the key concepts of {group.id}",
                    "Break the problem into smaller steps",
                    "Test your solution with different inputs",
                ),
                test_cases=(
                    ExerciseCheck(
                        input=f"// Test input {i}",
                        expected=f"// Expected output {i}",
                        description=f"Test case {i} for {group.id}",
                    ),
                ),
            )
            for i in range(1, total + 1)
        ]

    async def fetch_quiz(self, group: GroupDefinition) -> QuizDefinition:
        total = group.quiz.questions
        topics = group.question_topics or ["apply the concept"]
        questions = tuple(
            QuizQuestion(
                id=f"{group.id}-q{i}",
                question=f"What is the correct way to {topics[(i - 1) % len(topics)]}?",
                options=tuple(
                    f"Option {letter} for {group.id} question {i}"
                    for letter in "ABCD"[:self.options_per_question]
                ),
                correct_answer=0,
                explanation=f"The correct answer demonstrates proper {group.id} usage.",
                difficulty=question_difficulty(i, total),
                points=question_points(i, total),
            )
            for i in range(1, total + 1)
        )
        return QuizDefinition(
            id=f"{group.id}-quiz",
            title=f"{group.display_title} Quiz",
            description=f"Test your knowledge of {group.id} concepts",
            questions=questions,
            time_limit=group.quiz.time_limit,
            passing_score=self.passing_score,
            total_points=sum(q.points for q in questions),
        )
