"""
Runtime configuration for OrbitLearn.

Settings come from environment variables (a .env file in the working
directory is loaded first):

    ORBITLEARN_DATA_DIR      directory for progress files (~/.orbitlearn)
    ORBITLEARN_STORAGE       memory | json | sqlite (sqlite)
    ORBITLEARN_STORAGE_KEY   key of the progress document (orbitlearn-state)
    ORBITLEARN_CURRICULUM    curriculum YAML path (bundled curriculum)
    ORBITLEARN_PRELOAD       comma-separated groups to preload (basics,dom)
    ORBITLEARN_LOG_LEVEL     logging level (INFO)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from orbitlearn.classroom.progress import DEFAULT_STORAGE_KEY
from orbitlearn.classroom.storage import DEFAULT_DATA_DIR


STORAGE_BACKENDS = ("memory", "json", "sqlite")
DEFAULT_PRELOAD = ("basics", "dom")


@dataclass
class AppConfig:
    data_dir: Path = DEFAULT_DATA_DIR
    storage: str = "sqlite"
    storage_key: str = DEFAULT_STORAGE_KEY
    curriculum_path: Optional[Path] = None  # None: bundled curriculum
    preload: list[str] = field(default_factory=lambda: list(DEFAULT_PRELOAD))
    log_level: str = "INFO"

    def __post_init__(self):
        if self.storage not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unknown storage backend '{self.storage}' "
                f"(expected one of: {', '.join(STORAGE_BACKENDS)})"
            )

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "AppConfig":
        """Build config from the environment, after loading a .env file."""
        load_dotenv(env_file or Path.cwd() / ".env")

        curriculum = os.getenv("ORBITLEARN_CURRICULUM")
        preload = os.getenv("ORBITLEARN_PRELOAD")
        return cls(
            data_dir=Path(os.getenv("ORBITLEARN_DATA_DIR", str(DEFAULT_DATA_DIR))).expanduser(),
            storage=os.getenv("ORBITLEARN_STORAGE", "sqlite").strip().lower(),
            storage_key=os.getenv("ORBITLEARN_STORAGE_KEY", DEFAULT_STORAGE_KEY),
            curriculum_path=Path(curriculum).expanduser() if curriculum else None,
            preload=(
                [g.strip() for g in preload.split(",") if g.strip()]
                if preload is not None else list(DEFAULT_PRELOAD)
            ),
            log_level=os.getenv("ORBITLEARN_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO"):
    """Set up root logging; the level is applied even if handlers already exist."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )
    logging.getLogger().setLevel(numeric_level)
