"""OrbitLearn - progress tracking and content loading for a gated learning galaxy."""

__version__ = "0.1.0"
