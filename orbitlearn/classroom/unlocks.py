"""
Unlock resolver - decide which groups a learner's completions open up.

An item belongs to a group when its ID starts with the group ID
("dom-selectors" belongs to "dom"). With item_matching="delimited" the
match also requires the "-" separator, so "domx-1" no longer counts
toward "dom".
"""

from typing import Iterable

from orbitlearn.schemas import Curriculum, GroupDefinition
from orbitlearn.schemas.curriculum import ItemMatching


def item_in_group(item_id: str, group_id: str, matching: ItemMatching = "prefix") -> bool:
    if matching == "delimited":
        return item_id.startswith(f"{group_id}-")
    return item_id.startswith(group_id)


def items_in_group(
    group_id: str,
    completed_items: Iterable[str],
    matching: ItemMatching = "prefix",
) -> list[str]:
    return [item for item in completed_items if item_in_group(item, group_id, matching)]


def group_started(
    group_id: str,
    completed_items: Iterable[str],
    matching: ItemMatching = "prefix",
) -> bool:
    """True once at least one completed item belongs to the group."""
    return any(item_in_group(item, group_id, matching) for item in completed_items)


def missing_prerequisites(
    group: GroupDefinition,
    completed_items: Iterable[str],
    matching: ItemMatching = "prefix",
) -> list[str]:
    """Prerequisite group IDs without any completed item, in declared order."""
    completed = list(completed_items)
    return [
        prereq for prereq in group.prerequisites
        if not group_started(prereq, completed, matching)
    ]


def prerequisites_met(
    group: GroupDefinition,
    completed_items: Iterable[str],
    matching: ItemMatching = "prefix",
) -> bool:
    return not missing_prerequisites(group, completed_items, matching)


def resolve_unlocks(
    curriculum: Curriculum,
    unlocked_groups: Iterable[str],
    completed_items: Iterable[str],
) -> list[str]:
    """
    Evaluate the whole graph and return every newly unlockable group.

    Args:
        curriculum: Static dependency graph
        unlocked_groups: Groups already unlocked (skipped)
        completed_items: All completed item IDs

    Returns:
        Group IDs in curriculum declaration order
    """
    unlocked = set(unlocked_groups)
    completed = list(completed_items)
    return [
        group.id for group in curriculum.groups
        if group.id not in unlocked
        and prerequisites_met(group, completed, curriculum.item_matching)
    ]
