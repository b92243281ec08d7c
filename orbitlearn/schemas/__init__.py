"""
OrbitLearn Schemas - Pydantic models for the learning platform.

This module exports all schema classes for:
- Curriculum: group definitions, prerequisite graph, reward rules
- Progress: learner state, achievements, settings, stats, events
- Content: assembled group bundles (overview, sections, exercises, quiz)
"""

# Curriculum schemas
from .curriculum import (
    QuizSpec,
    OverviewSpec,
    SectionTemplate,
    GroupDefinition,
    RewardRules,
    ItemMatching,
    Curriculum,
)

# Progress schemas
from .progress import (
    ProgressEvent,
    UserProfile,
    ProgressState,
    Achievement,
    LearnerSettings,
    LearnerStats,
    QuizState,
    LearnerState,
    XP_PER_LEVEL,
    EXPORT_VERSION,
    IMPORT_REQUIRED_KEYS,
    default_learner_state,
)

# Content schemas
from .content import (
    Difficulty,
    GroupOverview,
    CodeExample,
    SectionContent,
    Section,
    ExerciseCheck,
    Exercise,
    QuizQuestion,
    QuizDefinition,
    GroupStructure,
    ConceptBundle,
)

__all__ = [
    # Curriculum
    "QuizSpec",
    "OverviewSpec",
    "SectionTemplate",
    "GroupDefinition",
    "RewardRules",
    "ItemMatching",
    "Curriculum",
    # Progress
    "ProgressEvent",
    "UserProfile",
    "ProgressState",
    "Achievement",
    "LearnerSettings",
    "LearnerStats",
    "QuizState",
    "LearnerState",
    "XP_PER_LEVEL",
    "EXPORT_VERSION",
    "IMPORT_REQUIRED_KEYS",
    "default_learner_state",
    # Content
    "Difficulty",
    "GroupOverview",
    "CodeExample",
    "SectionContent",
    "Section",
    "ExerciseCheck",
    "Exercise",
    "QuizQuestion",
    "QuizDefinition",
    "GroupStructure",
    "ConceptBundle",
]
