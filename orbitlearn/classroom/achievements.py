"""
XP and achievement rules.

Stateless helpers used by the progress store: level from XP and the
one-time achievement records it hands out.
"""

from datetime import datetime

from orbitlearn.schemas import Achievement, XP_PER_LEVEL


def compute_level(xp: int) -> int:
    """Level for a cumulative XP total: floor(xp / 1000) + 1."""
    if xp < 0:
        raise ValueError(f"XP cannot be negative: {xp}")
    return xp // XP_PER_LEVEL + 1


def should_award_level_achievement(old_level: int, new_level: int) -> bool:
    return new_level > old_level


def xp_to_next_level(xp: int) -> int:
    """XP still needed to reach the next level."""
    return compute_level(xp) * XP_PER_LEVEL - xp


def level_achievement(level: int) -> Achievement:
    return Achievement(
        id=f"level-{level}",
        title=f"Level {level}",
        description=f"Reached level {level}",
        timestamp=datetime.now().isoformat(),
        xp_reward=0,
    )


def explorer_achievement(group_id: str, title: str, xp_reward: int) -> Achievement:
    """Recorded the first time a group is unlocked."""
    return Achievement(
        id=f"group-{group_id}",
        title=f"{title} Explorer",
        description=f"Unlocked the {group_id} group",
        timestamp=datetime.now().isoformat(),
        xp_reward=xp_reward,
    )


def perfect_quiz_achievement(group_id: str, xp_reward: int) -> Achievement:
    return Achievement(
        id=f"perfect-{group_id}",
        title="Perfect Score",
        description=f"Got 100% on the {group_id} quiz",
        timestamp=datetime.now().isoformat(),
        xp_reward=xp_reward,
    )
