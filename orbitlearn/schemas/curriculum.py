"""
Curriculum schemas for OrbitLearn.

Defines Pydantic models for the static curriculum configuration:
- Group definitions (prerequisites, item counts, sections, quiz size)
- Overview and section templates used by the content source
- Reward rules for XP and achievements
"""

from pydantic import BaseModel, Field, model_validator
from typing import Literal, Optional


# -----------------------------------------------------------------------------
# Content templates
# -----------------------------------------------------------------------------


class QuizSpec(BaseModel):
    questions: int = Field(..., ge=0)
    time_limit: int = Field(300, ge=0)  # seconds


class OverviewSpec(BaseModel):
    title: str
    description: str = ""
    learning_objectives: list[str] = []
    prerequisites: list[str] = []  # human-readable names, not group ids
    estimated_time: str = "3-4 hours"
    difficulty: str = "Intermediate"


class SectionTemplate(BaseModel):
    """Hand-written text for one section; sections without one get generated text."""
    content: str
    examples: list[str] = []


# -----------------------------------------------------------------------------
# Groups
# -----------------------------------------------------------------------------


class GroupDefinition(BaseModel):
    """
    One gated content group ("planet").

    Prerequisites are group IDs. A group unlocks once every prerequisite
    has at least one completed item.
    """
    id: str = Field(..., min_length=1)
    title: Optional[str] = None
    prerequisites: list[str] = []
    item_count: int = Field(..., ge=0)
    sections: list[str] = []
    exercises: int = Field(0, ge=0)
    quiz: QuizSpec = QuizSpec(questions=0)
    overview: Optional[OverviewSpec] = None
    section_content: dict[str, SectionTemplate] = {}
    question_topics: list[str] = []

    @property
    def display_title(self) -> str:
        if self.title:
            return self.title
        return self.id[:1].upper() + self.id[1:]


class RewardRules(BaseModel):
    item_xp: int = Field(100, ge=0)
    unlock_xp: int = Field(50, ge=0)
    perfect_quiz_xp: int = Field(200, ge=0)
    quiz_pass_percent: float = Field(80, ge=0, le=100)


ItemMatching = Literal["prefix", "delimited"]


class Curriculum(BaseModel):
    """
    Static dependency graph plus content definitions.

    `groups` keeps declaration order; unlocks that happen in the same pass
    are applied in this order.
    """
    start_group: str = "basics"
    item_matching: ItemMatching = "prefix"
    rewards: RewardRules = RewardRules()
    groups: list[GroupDefinition] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_references(self):
        seen: set[str] = set()
        for group in self.groups:
            if group.id in seen:
                raise ValueError(f"Duplicate group id: {group.id}")
            seen.add(group.id)

        for group in self.groups:
            for prerequisite in group.prerequisites:
                if prerequisite not in seen:
                    raise ValueError(
                        f"Group '{group.id}' has unknown prerequisite '{prerequisite}'"
                    )

        if self.start_group not in seen:
            raise ValueError(f"Start group '{self.start_group}' is not defined")
        return self

    @property
    def group_ids(self) -> list[str]:
        return [group.id for group in self.groups]

    @property
    def total_item_count(self) -> int:
        return sum(group.item_count for group in self.groups)

    def get(self, group_id: str) -> Optional[GroupDefinition]:
        for group in self.groups:
            if group.id == group_id:
                return group
        return None

    def __contains__(self, group_id: object) -> bool:
        return any(group.id == group_id for group in self.groups)
