"""XP and achievement rule tests."""

import pytest

from orbitlearn.classroom.achievements import (
    compute_level,
    explorer_achievement,
    level_achievement,
    perfect_quiz_achievement,
    should_award_level_achievement,
    xp_to_next_level,
)


class TestLevels:
    """Test level computation."""

    def test_compute_level(self):
        assert compute_level(0) == 1
        assert compute_level(999) == 1
        assert compute_level(1000) == 2
        assert compute_level(2500) == 3

    def test_negative_xp_rejected(self):
        with pytest.raises(ValueError):
            compute_level(-1)

    def test_should_award(self):
        assert should_award_level_achievement(1, 2)
        assert not should_award_level_achievement(2, 2)
        assert not should_award_level_achievement(3, 2)

    def test_xp_to_next_level(self):
        assert xp_to_next_level(0) == 1000
        assert xp_to_next_level(999) == 1
        assert xp_to_next_level(1000) == 1000


class TestAchievementFactories:
    """Test achievement records."""

    def test_level_achievement(self):
        achievement = level_achievement(3)
        assert achievement.id == "level-3"
        assert achievement.xp_reward == 0

    def test_explorer_achievement(self):
        achievement = explorer_achievement("dom", "DOM", 50)
        assert achievement.id == "group-dom"
        assert achievement.title == "DOM Explorer"
        assert achievement.xp_reward == 50

    def test_perfect_quiz_achievement(self):
        achievement = perfect_quiz_achievement("basics", 200)
        assert achievement.id == "perfect-basics"
        assert achievement.xp_reward == 200
