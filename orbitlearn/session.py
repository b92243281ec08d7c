"""
Session wiring - build one progress store and one content loader per app.

    classroom = create_classroom()            # config from the environment
    await classroom.start()                   # preload configured groups
    classroom.store.complete_item("basics-1")
"""

import logging
from dataclasses import dataclass
from typing import Optional

from orbitlearn.classroom import (
    ContentLoader,
    ContentSource,
    JsonFileStorage,
    KeyValueStorage,
    MemoryStorage,
    Navigator,
    ProgressStore,
    SQLiteStorage,
)
from orbitlearn.config import AppConfig, configure_logging
from orbitlearn.schemas import Curriculum
from orbitlearn.utils import load_curriculum


logger = logging.getLogger(__name__)


@dataclass
class Classroom:
    config: AppConfig
    curriculum: Curriculum
    store: ProgressStore
    loader: ContentLoader
    navigator: Navigator

    async def start(self) -> list[str]:
        """Preload the configured groups; returns the IDs that loaded."""
        known = [g for g in self.config.preload if g in self.curriculum]
        skipped = sorted(set(self.config.preload) - set(known))
        if skipped:
            logger.warning(f"Skipping unknown preload groups: {', '.join(skipped)}")
        if not known:
            return []
        return await self.loader.preload(known)


def create_storage(config: AppConfig) -> KeyValueStorage:
    if config.storage == "memory":
        return MemoryStorage()
    if config.storage == "json":
        return JsonFileStorage(config.data_dir / "progress.json")
    return SQLiteStorage(config.data_dir / "progress.db")


def create_classroom(
    config: Optional[AppConfig] = None,
    storage: Optional[KeyValueStorage] = None,
    source: Optional[ContentSource] = None,
    curriculum: Optional[Curriculum] = None,
) -> Classroom:
    """
    Build the application's components.

    Args:
        config: Settings (default: AppConfig.from_env())
        storage: Storage backend (default: chosen by config.storage)
        source: Content source for the loader (default: curriculum-generated)
        curriculum: Pre-loaded curriculum (default: config.curriculum_path)
    """
    config = config or AppConfig.from_env()
    configure_logging(config.log_level)
    if curriculum is None:
        curriculum = load_curriculum(config.curriculum_path)
    if storage is None:
        storage = create_storage(config)

    store = ProgressStore(curriculum, storage=storage, storage_key=config.storage_key)
    loader = ContentLoader(curriculum, source=source)
    logger.info(
        f"Classroom ready: {len(curriculum.groups)} groups, "
        f"storage={type(storage).__name__}"
    )
    return Classroom(
        config=config,
        curriculum=curriculum,
        store=store,
        loader=loader,
        navigator=Navigator(store),
    )
