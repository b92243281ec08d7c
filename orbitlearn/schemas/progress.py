"""
Progress tracking schemas for OrbitLearn.

Defines Pydantic models for the persisted learner document:
- User profile (level, XP)
- Group/item progress
- Achievements, settings, stats and quiz state
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Optional
from datetime import datetime
from enum import Enum


XP_PER_LEVEL = 1000
EXPORT_VERSION = "1.0"


def _now() -> str:
    return datetime.now().isoformat()


class ProgressEvent(str, Enum):
    """Event names delivered to progress listeners."""
    PROGRESS = "progress"
    ITEM_COMPLETED = "itemCompleted"
    GROUP_UNLOCKED = "groupUnlocked"
    CURRENT_GROUP_CHANGED = "currentGroupChanged"
    XP_GAINED = "xpGained"
    LEVEL_UP = "levelUp"
    ACHIEVEMENT_EARNED = "achievementEarned"
    PROGRESS_RESET = "progressReset"
    SETTINGS_UPDATED = "settingsUpdated"
    DATA_IMPORTED = "dataImported"
    QUIZ_COMPLETED = "quizCompleted"
    STUDY_TIME_ADDED = "studyTimeAdded"


class UserProfile(BaseModel):
    name: str = "Space Explorer"
    level: int = Field(1, ge=1)
    total_xp: int = Field(0, ge=0)
    join_date: str = Field(default_factory=_now)


class ProgressState(BaseModel):
    has_seen_welcome: bool = False
    unlocked_groups: list[str] = []
    completed_items: list[str] = []  # order only matters for export
    current_group: Optional[str] = None
    overall_progress: int = Field(0, ge=0, le=100)

    @field_validator("unlocked_groups", "completed_items")
    @classmethod
    def _drop_duplicates(cls, values: list[str]) -> list[str]:
        # set semantics, first occurrence wins
        return list(dict.fromkeys(values))


class Achievement(BaseModel):
    id: str = Field(..., min_length=1)
    title: str
    description: str = ""
    timestamp: str = Field(default_factory=_now)
    xp_reward: int = 0


class LearnerSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    theme: str = "galaxy"
    sound_enabled: bool = True
    animations_enabled: bool = True
    difficulty: str = "normal"


class LearnerStats(BaseModel):
    groups_explored: int = Field(0, ge=0)
    items_completed: int = Field(0, ge=0)
    quizzes_completed: int = Field(0, ge=0)
    total_time_spent: int = Field(0, ge=0)  # minutes
    streak_days: int = Field(0, ge=0)
    last_visit: str = Field(default_factory=_now)


class QuizState(BaseModel):
    current_question_index: int = 0
    score: int = 0
    answers: list[Any] = []
    time_spent: int = 0


class LearnerState(BaseModel):
    """The single persisted document: {user, progress, achievements, settings, stats, quiz}."""
    user: UserProfile = Field(default_factory=UserProfile)
    progress: ProgressState = Field(default_factory=ProgressState)
    achievements: list[Achievement] = []
    settings: LearnerSettings = Field(default_factory=LearnerSettings)
    stats: LearnerStats = Field(default_factory=LearnerStats)
    quiz: QuizState = Field(default_factory=QuizState)


IMPORT_REQUIRED_KEYS = ("user", "progress", "stats")


def default_learner_state(start_group: str) -> LearnerState:
    """Seeded state for a new learner: only the start group is unlocked."""
    return LearnerState(
        progress=ProgressState(
            unlocked_groups=[start_group],
            current_group=start_group,
        ),
    )
