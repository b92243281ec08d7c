"""
Navigator - Group availability, learning paths and recommendations.

Provides:
- Group availability based on progress and prerequisites
- Learning path (prerequisite closure) for a group
- Next/recommended group
- Curriculum tree with status for sidebars and maps
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from orbitlearn.schemas import GroupDefinition

from .graph import learning_path
from .progress import ProgressStore
from .unlocks import missing_prerequisites


class GroupAvailability(str, Enum):
    """Group availability status for UI display."""
    LOCKED = "locked"           # Not unlocked yet
    AVAILABLE = "available"     # Unlocked, nothing completed
    IN_PROGRESS = "in_progress" # Some items completed
    COMPLETED = "completed"     # item_count items completed


@dataclass
class NavigationGroup:
    """Group with navigation metadata."""
    group: GroupDefinition
    availability: GroupAvailability
    is_current: bool
    completed_count: int
    total_count: int
    missing_prerequisites: list[str]  # IDs of unmet prerequisites


class Navigator:
    """
    Navigate the curriculum using the progress store's unlock state.
    """

    def __init__(self, progress: ProgressStore):
        self.progress = progress
        self.curriculum = progress.curriculum

    # -------------------------------------------------------------------------
    # Availability Checking
    # -------------------------------------------------------------------------

    def get_group_availability(self, group_id: str) -> tuple[GroupAvailability, list[str]]:
        """
        Check group availability.

        Returns:
            Tuple of (availability status, list of missing prerequisite IDs)
        """
        group = self.curriculum.get(group_id)
        if group is None:
            return GroupAvailability.LOCKED, []

        state = self.progress.get_progress()
        if group_id not in state.unlocked_groups:
            missing = missing_prerequisites(
                group, state.completed_items, self.curriculum.item_matching
            )
            return GroupAvailability.LOCKED, missing

        done = len(self.progress.completed_items_in_group(group_id))
        if group.item_count and done >= group.item_count:
            return GroupAvailability.COMPLETED, []
        if done:
            return GroupAvailability.IN_PROGRESS, []
        return GroupAvailability.AVAILABLE, []

    def is_group_available(self, group_id: str) -> bool:
        availability, _ = self.get_group_availability(group_id)
        return availability != GroupAvailability.LOCKED

    def get_available_groups(self) -> list[GroupDefinition]:
        return [g for g in self.curriculum.groups if self.is_group_available(g.id)]

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def get_learning_path(self, group_id: str) -> list[str]:
        """Groups to go through to reach group_id, prerequisites first."""
        return learning_path(self.curriculum, group_id)

    def get_next_group(self) -> Optional[str]:
        """First unlocked group (declaration order) with no completed items."""
        for group in self.curriculum.groups:
            if not self.progress.is_group_unlocked(group.id):
                continue
            if not self.progress.completed_items_in_group(group.id):
                return group.id
        return None

    def get_recommended_group_id(self) -> str:
        """
        Get the recommended group for the learner.

        Priority:
        1. Current group if in progress
        2. Next untouched unlocked group
        3. Start group
        """
        current_id = self.progress.get_progress().current_group
        if current_id:
            availability, _ = self.get_group_availability(current_id)
            if availability == GroupAvailability.IN_PROGRESS:
                return current_id

        return self.get_next_group() or self.curriculum.start_group

    # -------------------------------------------------------------------------
    # Curriculum Tree
    # -------------------------------------------------------------------------

    def get_navigation_tree(self) -> list[NavigationGroup]:
        current_id = self.progress.get_progress().current_group
        tree = []
        for group in self.curriculum.groups:
            availability, missing = self.get_group_availability(group.id)
            tree.append(NavigationGroup(
                group=group,
                availability=availability,
                is_current=group.id == current_id,
                completed_count=len(self.progress.completed_items_in_group(group.id)),
                total_count=group.item_count,
                missing_prerequisites=missing,
            ))
        return tree

    def get_progress_summary(self) -> dict:
        """Get progress summary for display."""
        state = self.progress.get_state()
        tree = self.get_navigation_tree()
        return {
            "level": state.user.level,
            "total_xp": state.user.total_xp,
            "overall_progress": state.progress.overall_progress,
            "unlocked": len(state.progress.unlocked_groups),
            "total_groups": len(self.curriculum.groups),
            "achievements": len(state.achievements),
            "groups": [
                {
                    "id": node.group.id,
                    "title": node.group.display_title,
                    "availability": node.availability.value,
                    "completed": node.completed_count,
                    "total": node.total_count,
                }
                for node in tree
            ],
            "current_group_id": state.progress.current_group,
            "recommended_group_id": self.get_recommended_group_id(),
        }
