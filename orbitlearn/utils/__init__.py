"""OrbitLearn utilities."""

from .curriculum_loader import (
    load_curriculum,
    parse_curriculum,
    get_available_curricula,
    DEFAULT_CURRICULUM_PATH,
)

__all__ = [
    "load_curriculum",
    "parse_curriculum",
    "get_available_curricula",
    "DEFAULT_CURRICULUM_PATH",
]
