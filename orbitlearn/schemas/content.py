"""
Content bundle schemas for OrbitLearn.

Defines the frozen Pydantic models the content loader hands out:
- Overview, sections and code examples
- Exercises with hints and test cases
- Quiz definition and questions
- ConceptBundle (the assembled payload for one group)

Bundles are shared between callers and kept in the loader cache, so
every model is frozen and sequences are tuples.
"""

from pydantic import BaseModel, ConfigDict
from typing import Literal


Difficulty = Literal["easy", "medium", "hard"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class GroupOverview(_Frozen):
    title: str
    description: str
    learning_objectives: tuple[str, ...] = ()
    prerequisites: tuple[str, ...] = ()
    estimated_time: str
    difficulty: str


# -----------------------------------------------------------------------------
# Sections
# -----------------------------------------------------------------------------

class CodeExample(_Frozen):
    title: str
    code: str
    explanation: str


class SectionContent(_Frozen):
    description: str
    examples: tuple[str, ...] = ()
    explanation: str


class Section(_Frozen):
    id: str
    title: str
    content: SectionContent
    code_examples: tuple[CodeExample, ...] = ()
    key_points: tuple[str, ...] = ()


# -----------------------------------------------------------------------------
# Exercises and quiz
# -----------------------------------------------------------------------------

class ExerciseCheck(_Frozen):
    input: str
    expected: str
    description: str


class Exercise(_Frozen):
    id: str
    title: str
    description: str
    difficulty: Difficulty
    instructions: str
    starter_code: str
    solution: str
    hints: tuple[str, ...] = ()
    test_cases: tuple[ExerciseCheck, ...] = ()


class QuizQuestion(_Frozen):
    id: str
    question: str
    type: str = "multiple-choice"
    options: tuple[str, ...]
    correct_answer: int
    explanation: str
    difficulty: Difficulty
    points: int


class QuizDefinition(_Frozen):
    id: str
    title: str
    description: str
    questions: tuple[QuizQuestion, ...] = ()
    time_limit: int
    passing_score: float
    total_points: int


class GroupStructure(_Frozen):
    """Counts the bundle was assembled from."""
    sections: tuple[str, ...]
    exercises: int
    quiz_questions: int
    quiz_time_limit: int


class ConceptBundle(_Frozen):
    id: str
    overview: GroupOverview
    sections: tuple[Section, ...]
    exercises: tuple[Exercise, ...]
    quiz: QuizDefinition
    structure: GroupStructure
    loaded_at: str
