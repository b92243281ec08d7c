"""
ProgressStore - Single source of truth for learner progress.

Owns the LearnerState document ({user, progress, achievements, settings,
stats, quiz}) and enforces its invariants:
- Completing an item or unlocking a group happens at most once
- Level always equals floor(total_xp / 1000) + 1
- An achievement ID is recorded at most once

Every mutation runs mutate -> recompute -> persist -> notify. Operations
that call each other (complete_item -> add_xp -> unlock_group) share one
mutation scope: the state is saved once when the outermost call finishes,
then the queued events are delivered in the order they were raised.
"""

import json
import logging
import threading
from collections.abc import Mapping
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Iterable, Optional, Union

from pydantic import ValidationError

from orbitlearn.schemas import (
    Achievement,
    Curriculum,
    EXPORT_VERSION,
    IMPORT_REQUIRED_KEYS,
    LearnerSettings,
    LearnerState,
    LearnerStats,
    ProgressEvent,
    ProgressState,
    QuizState,
    UserProfile,
    default_learner_state,
)

from .achievements import (
    compute_level,
    explorer_achievement,
    level_achievement,
    perfect_quiz_achievement,
    should_award_level_achievement,
)
from .errors import ImportValidationError, StorageError, UnknownGroupError
from .events import EventBus, Listener
from .storage import KeyValueStorage, MemoryStorage
from .unlocks import items_in_group, resolve_unlocks


logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "orbitlearn-state"


def merge_over_defaults(base: dict[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge a saved document over a base document, section by section.

    Keys unknown to the base are dropped; dict sections are merged one
    level deep so fields added in newer versions keep their defaults.
    """
    merged = dict(base)
    for key, value in overlay.items():
        if key not in base:
            continue
        if isinstance(base[key], dict) and isinstance(value, Mapping):
            merged[key] = {**base[key], **value}
        else:
            merged[key] = value
    return merged


class ProgressStore:
    """
    Learner progress with unlocks, XP, achievements and listeners.

    Thread-safe: all mutations hold one re-entrant lock owned by the store.
    """

    def __init__(
        self,
        curriculum: Curriculum,
        storage: Optional[KeyValueStorage] = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
        bus: Optional[EventBus] = None,
        autoload: bool = True,
    ):
        """
        Initialize progress store.

        Args:
            curriculum: Static dependency graph and reward rules
            storage: Key-value backend (default: in-memory)
            storage_key: Key the state document is saved under
            bus: Event bus for listeners (default: a private bus)
            autoload: Load saved state immediately
        """
        self.curriculum = curriculum
        self.storage = storage if storage is not None else MemoryStorage()
        self.storage_key = storage_key
        self.bus = bus if bus is not None else EventBus()
        self._lock = threading.RLock()
        self._depth = 0
        self._pending: list[tuple[str, Any]] = []
        self._state = self._defaults()
        if autoload:
            self.load()

    def _defaults(self) -> LearnerState:
        return default_learner_state(self.curriculum.start_group)

    # -------------------------------------------------------------------------
    # Mutation scope
    # -------------------------------------------------------------------------

    @contextmanager
    def _mutation(self):
        """
        Group nested mutations into one save and one notification batch.

        Nothing is saved or delivered if no event was raised (no-op call).
        """
        with self._lock:
            self._depth += 1
            try:
                yield
            except BaseException:
                self._depth -= 1
                if self._depth == 0:
                    self._pending.clear()
                raise
            self._depth -= 1
            if self._depth > 0 or not self._pending:
                return
            self.save()
            events, self._pending = self._pending, []
            deliveries = [
                (event, payload, self._state.model_copy(deep=True))
                for event, payload in events
            ]

        for event, payload, snapshot in deliveries:
            self.bus.publish(event, payload, snapshot)

    def _emit(self, event: ProgressEvent, payload: Any = None):
        self._pending.append((event.value, payload))

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> bool:
        """
        Load saved state and merge it over the defaults.

        Never raises: on any failure the current (default) state is kept.

        Returns:
            True if a saved document was applied
        """
        try:
            raw = self.storage.get(self.storage_key)
        except (StorageError, OSError) as e:
            logger.warning(f"Failed to load progress from storage, using defaults: {e}")
            return False
        if raw is None:
            return False

        try:
            saved = json.loads(raw)
            if not isinstance(saved, dict):
                raise ValueError("saved progress is not a JSON object")
            state = LearnerState.model_validate(
                merge_over_defaults(self._defaults().model_dump(), saved)
            )
        except ValueError as e:  # includes JSONDecodeError and ValidationError
            logger.warning(f"Saved progress is invalid, using defaults: {e}")
            return False

        with self._lock:
            self._state = state
            self._normalize()
            self._recalculate_overall_progress()
        logger.info("Progress loaded from storage")
        return True

    def save(self) -> bool:
        """
        Persist the current state.

        Returns:
            False if the backend failed (the error is logged, not raised)
        """
        with self._lock:
            document = self._state.model_dump_json()
        try:
            self.storage.set(self.storage_key, document)
        except (StorageError, OSError) as e:
            logger.warning(f"Failed to save progress: {e}")
            return False
        logger.debug("Progress saved")
        return True

    def _normalize(self):
        user = self._state.user
        user.level = compute_level(user.total_xp)

    def _recalculate_overall_progress(self):
        total = self.curriculum.total_item_count
        completed = len(self._state.progress.completed_items)
        if total <= 0:
            percent = 0
        else:
            # half-up rounding, capped for items outside the counted total
            percent = min(100, int(completed * 100 / total + 0.5))
        self._state.progress.overall_progress = percent

    # -------------------------------------------------------------------------
    # Read accessors
    # -------------------------------------------------------------------------

    def get_state(self) -> LearnerState:
        with self._lock:
            return self._state.model_copy(deep=True)

    def get_progress(self) -> ProgressState:
        with self._lock:
            return self._state.progress.model_copy(deep=True)

    def get_user(self) -> UserProfile:
        with self._lock:
            return self._state.user.model_copy()

    def get_stats(self) -> LearnerStats:
        with self._lock:
            return self._state.stats.model_copy()

    def get_settings(self) -> LearnerSettings:
        with self._lock:
            return self._state.settings.model_copy(deep=True)

    def get_achievements(self) -> list[Achievement]:
        with self._lock:
            return [a.model_copy() for a in self._state.achievements]

    def is_group_unlocked(self, group_id: str) -> bool:
        with self._lock:
            return group_id in self._state.progress.unlocked_groups

    def is_item_completed(self, item_id: str) -> bool:
        with self._lock:
            return item_id in self._state.progress.completed_items

    def completed_items_in_group(self, group_id: str) -> list[str]:
        with self._lock:
            return items_in_group(
                group_id,
                self._state.progress.completed_items,
                self.curriculum.item_matching,
            )

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def add_listener(
        self,
        callback: Listener,
        events: Optional[Iterable[Union[str, ProgressEvent]]] = None,
    ) -> Callable[[], None]:
        """
        Subscribe to progress events.

        The callback receives (event_name, payload, state_snapshot).

        Returns:
            Function removing exactly this subscription
        """
        return self.bus.subscribe(callback, events)

    # -------------------------------------------------------------------------
    # Progress mutations
    # -------------------------------------------------------------------------

    def update_progress(self, updates: Optional[Mapping[str, Any]] = None, **fields: Any):
        """
        Shallow-merge fields into the progress section.

        Raises:
            pydantic.ValidationError: If the merged progress is invalid
        """
        changes = {**(updates or {}), **fields}
        with self._mutation():
            merged = {**self._state.progress.model_dump(), **changes}
            self._state.progress = ProgressState.model_validate(merged)
            self._recalculate_overall_progress()
            self._emit(ProgressEvent.PROGRESS, self._state.progress.model_copy(deep=True))

    def complete_item(self, item_id: str) -> bool:
        """
        Mark an item completed, award XP and unlock qualifying groups.

        Returns:
            False if the item was already completed (nothing changes)
        """
        with self._mutation():
            progress = self._state.progress
            if item_id in progress.completed_items:
                return False

            progress.completed_items.append(item_id)
            self._state.stats.items_completed += 1
            self.add_xp(self.curriculum.rewards.item_xp)

            newly_unlocked = resolve_unlocks(
                self.curriculum,
                progress.unlocked_groups,
                progress.completed_items,
            )
            for group_id in newly_unlocked:
                self.unlock_group(group_id)

            self._recalculate_overall_progress()
            self._emit(ProgressEvent.ITEM_COMPLETED, item_id)

        logger.info(f"Item completed: {item_id}")
        return True

    def unlock_group(self, group_id: str) -> bool:
        """
        Unlock a group, award the unlock bonus and its explorer achievement.

        Returns:
            False if the group was already unlocked

        Raises:
            UnknownGroupError: If the group is not in the curriculum
        """
        group = self.curriculum.get(group_id)
        if group is None:
            raise UnknownGroupError(group_id)

        with self._mutation():
            progress = self._state.progress
            if group_id in progress.unlocked_groups:
                return False

            progress.unlocked_groups.append(group_id)
            self._state.stats.groups_explored += 1
            bonus = self.curriculum.rewards.unlock_xp
            self.add_xp(bonus)
            self.add_achievement(explorer_achievement(group_id, group.display_title, bonus))
            self._emit(ProgressEvent.GROUP_UNLOCKED, group_id)

        logger.info(f"Group unlocked: {group_id}")
        return True

    def set_current_group(self, group_id: Optional[str]):
        if group_id is not None and group_id not in self.curriculum:
            raise UnknownGroupError(group_id)
        with self._mutation():
            self._state.progress.current_group = group_id
            self._emit(ProgressEvent.CURRENT_GROUP_CHANGED, group_id)

    # -------------------------------------------------------------------------
    # XP and achievements
    # -------------------------------------------------------------------------

    def add_xp(self, amount: int) -> int:
        """
        Add XP and level up when a 1000-XP boundary is crossed.

        Returns:
            The user's level after the change
        """
        if amount < 0:
            raise ValueError(f"XP amount cannot be negative: {amount}")

        with self._mutation():
            user = self._state.user
            old_level = user.level
            user.total_xp += amount
            new_level = compute_level(user.total_xp)

            if should_award_level_achievement(old_level, new_level):
                user.level = new_level
                self.add_achievement(level_achievement(new_level))
                self._emit(ProgressEvent.LEVEL_UP, new_level)
                logger.info(f"Level up: {old_level} -> {new_level}")

            self._emit(ProgressEvent.XP_GAINED, amount)
            return user.level

    def add_achievement(self, achievement: Achievement) -> bool:
        """
        Record an achievement once per ID.

        Returns:
            True if it was new
        """
        with self._mutation():
            if any(a.id == achievement.id for a in self._state.achievements):
                return False
            self._state.achievements.append(achievement.model_copy())
            self._emit(ProgressEvent.ACHIEVEMENT_EARNED, achievement.model_copy())

        logger.info(f"Achievement earned: {achievement.title}")
        return True

    # -------------------------------------------------------------------------
    # Quiz, settings, stats
    # -------------------------------------------------------------------------

    def complete_quiz(self, group_id: str, score: int, total_questions: int) -> bool:
        """
        Record a finished quiz.

        A passing score completes the "<group>-quiz" item; a perfect score
        earns the perfect-quiz achievement and its XP once.

        Returns:
            True if the quiz was passed
        """
        if total_questions <= 0:
            raise ValueError(f"total_questions must be positive: {total_questions}")
        if not 0 <= score <= total_questions:
            raise ValueError(f"score {score} is outside 0..{total_questions}")

        rules = self.curriculum.rewards
        percentage = score / total_questions * 100
        passed = percentage >= rules.quiz_pass_percent

        with self._mutation():
            self._state.stats.quizzes_completed += 1
            if passed:
                self.complete_item(f"{group_id}-quiz")
            if score == total_questions:
                earned = self.add_achievement(
                    perfect_quiz_achievement(group_id, rules.perfect_quiz_xp)
                )
                if earned:
                    self.add_xp(rules.perfect_quiz_xp)
            self._emit(ProgressEvent.QUIZ_COMPLETED, {
                "group_id": group_id,
                "score": score,
                "total_questions": total_questions,
            })
        return passed

    def update_settings(self, updates: Optional[Mapping[str, Any]] = None, **fields: Any):
        changes = {**(updates or {}), **fields}
        with self._mutation():
            merged = {**self._state.settings.model_dump(), **changes}
            self._state.settings = LearnerSettings.model_validate(merged)
            self._emit(ProgressEvent.SETTINGS_UPDATED, self._state.settings.model_dump())

    def add_study_time(self, minutes: int):
        """Add study time (minutes) to the running total."""
        if minutes < 0:
            raise ValueError(f"minutes cannot be negative: {minutes}")
        with self._mutation():
            stats = self._state.stats
            stats.total_time_spent += minutes
            stats.last_visit = datetime.now().isoformat()
            self._emit(ProgressEvent.STUDY_TIME_ADDED, minutes)

    # -------------------------------------------------------------------------
    # Reset, export, import
    # -------------------------------------------------------------------------

    def reset_progress(self):
        """
        Reset progress, XP/level, completion counters, quiz state and
        achievements in one step. Name, join date and settings are kept.
        """
        with self._mutation():
            state = self._state
            state.progress = self._defaults().progress
            state.user.total_xp = 0
            state.user.level = 1
            state.stats.groups_explored = 0
            state.stats.items_completed = 0
            state.stats.quizzes_completed = 0
            state.achievements = []
            state.quiz = QuizState()
            self._emit(ProgressEvent.PROGRESS_RESET)
        logger.info("Progress reset")

    def export_data(self) -> dict[str, Any]:
        """Persisted document plus exported_at and version."""
        with self._lock:
            data = self._state.model_dump(mode="json")
        data["exported_at"] = datetime.now().isoformat()
        data["version"] = EXPORT_VERSION
        return data

    def export_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.export_data(), indent=indent, ensure_ascii=False)

    def import_data(self, document: Union[str, bytes, Mapping[str, Any]]):
        """
        Replace learner data with an exported document.

        The document is merged over the current state section by section.

        Raises:
            ImportValidationError: If the document is malformed; the
                current state is left untouched
        """
        if isinstance(document, (str, bytes)):
            try:
                data = json.loads(document)
            except json.JSONDecodeError as e:
                raise ImportValidationError(f"Import is not valid JSON: {e}") from e
        else:
            data = document

        if not isinstance(data, Mapping):
            raise ImportValidationError("Import must be a JSON object")
        missing = [key for key in IMPORT_REQUIRED_KEYS if not isinstance(data.get(key), Mapping)]
        if missing:
            raise ImportValidationError(f"Import is missing required sections: {', '.join(missing)}")

        # nothing is mutated until validation passes
        with self._mutation():
            merged = merge_over_defaults(self._state.model_dump(), data)
            try:
                imported = LearnerState.model_validate(merged)
            except ValidationError as e:
                raise ImportValidationError(f"Invalid import data: {e}") from e

            self._state = imported
            self._normalize()
            self._recalculate_overall_progress()
            self._emit(ProgressEvent.DATA_IMPORTED)

        logger.info("User data imported")
