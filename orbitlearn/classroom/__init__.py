"""
OrbitLearn Classroom - Runtime components for progress and content.

This module provides:
- ProgressStore: Learner state with unlocks, XP and achievements
- ContentLoader: Cached, single-flight loading of group bundles
- Navigator: Group availability, learning paths and recommendations
- Storage backends: memory, JSON file, SQLite
"""

from .errors import (
    OrbitLearnError,
    StorageError,
    CurriculumError,
    UnknownGroupError,
    AssemblyFailure,
    ImportValidationError,
    ListenerError,
)

from .storage import (
    KeyValueStorage,
    MemoryStorage,
    JsonFileStorage,
    SQLiteStorage,
    DEFAULT_DATA_DIR,
    DEFAULT_PROGRESS_DB,
    DEFAULT_PROGRESS_JSON,
)

from .events import EventBus

from .progress import (
    ProgressStore,
    DEFAULT_STORAGE_KEY,
)

from .content_source import (
    ContentSource,
    CurriculumContentSource,
)

from .loader import (
    ContentLoader,
    CacheStats,
    SearchResult,
)

from .navigator import (
    Navigator,
    GroupAvailability,
    NavigationGroup,
)

__all__ = [
    # Errors
    "OrbitLearnError",
    "StorageError",
    "CurriculumError",
    "UnknownGroupError",
    "AssemblyFailure",
    "ImportValidationError",
    "ListenerError",
    # Storage
    "KeyValueStorage",
    "MemoryStorage",
    "JsonFileStorage",
    "SQLiteStorage",
    "DEFAULT_DATA_DIR",
    "DEFAULT_PROGRESS_DB",
    "DEFAULT_PROGRESS_JSON",
    # Progress
    "EventBus",
    "ProgressStore",
    "DEFAULT_STORAGE_KEY",
    # Loader
    "ContentSource",
    "CurriculumContentSource",
    "ContentLoader",
    "CacheStats",
    "SearchResult",
    # Navigator
    "Navigator",
    "GroupAvailability",
    "NavigationGroup",
]
