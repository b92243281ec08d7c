"""
ContentLoader - Assemble and cache content bundles per group.

Provides:
- load_group: overview, sections, exercises and quiz fetched concurrently
- A bundle cache (filled on success, cleared only on request)
- Single-flight loading: concurrent requests for one group share one
  assembly task and receive the same bundle object
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional

from orbitlearn.schemas import (
    ConceptBundle,
    Curriculum,
    EXPORT_VERSION,
    GroupDefinition,
    GroupStructure,
)

from .content_source import ContentSource, CurriculumContentSource, format_section_title
from .errors import AssemblyFailure, UnknownGroupError


logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    cached_count: int
    in_flight_count: int
    keys: list[str]


@dataclass
class SearchResult:
    id: str
    title: str
    type: str  # "group" or "section"
    group_id: str


class ContentLoader:
    """
    Load group bundles through a ContentSource.

    The cache and in-flight registry are only touched between awaits, so
    the check-and-register step in load_group is atomic on the event loop.
    """

    def __init__(self, curriculum: Curriculum, source: Optional[ContentSource] = None):
        """
        Initialize loader.

        Args:
            curriculum: Group definitions (unknown IDs are rejected)
            source: Content source (default: generated from the curriculum)
        """
        self.curriculum = curriculum
        self.source = source if source is not None else CurriculumContentSource()
        self._cache: dict[str, ConceptBundle] = {}
        self._in_flight: dict[str, asyncio.Task] = {}

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def load_group(self, group_id: str) -> ConceptBundle:
        """
        Return the bundle for a group, assembling it at most once at a time.

        Raises:
            UnknownGroupError: If the group is not in the curriculum
            AssemblyFailure: If any part of the bundle failed to load
        """
        cached = self._cache.get(group_id)
        if cached is not None:
            return cached

        task = self._in_flight.get(group_id)
        if task is None:
            group = self.curriculum.get(group_id)
            if group is None:
                raise UnknownGroupError(group_id)
            task = asyncio.ensure_future(self._run(group))
            self._in_flight[group_id] = task
            logger.debug(f"Assembling group {group_id}")

        # shield: a cancelled caller must not cancel the shared assembly
        return await asyncio.shield(task)

    async def _run(self, group: GroupDefinition) -> ConceptBundle:
        try:
            bundle = await self._assemble(group)
        except Exception as e:
            logger.error(f"Failed to load group {group.id}: {e}")
            raise AssemblyFailure(group.id, str(e)) from e
        finally:
            if self._in_flight.get(group.id) is asyncio.current_task():
                del self._in_flight[group.id]

        self._cache[group.id] = bundle
        logger.info(f"Group loaded: {group.id}")
        return bundle

    async def _assemble(self, group: GroupDefinition) -> ConceptBundle:
        overview, sections, exercises, quiz = await asyncio.gather(
            self.source.fetch_overview(group),
            self._load_sections(group),
            self.source.fetch_exercises(group),
            self.source.fetch_quiz(group),
        )
        return ConceptBundle(
            id=group.id,
            overview=overview,
            sections=tuple(sections),
            exercises=tuple(exercises),
            quiz=quiz,
            structure=GroupStructure(
                sections=tuple(group.sections),
                exercises=group.exercises,
                quiz_questions=group.quiz.questions,
                quiz_time_limit=group.quiz.time_limit,
            ),
            loaded_at=datetime.now().isoformat(),
        )

    async def _load_sections(self, group: GroupDefinition) -> list:
        return await asyncio.gather(
            *(self.source.fetch_section(group, section_id) for section_id in group.sections)
        )

    async def preload(self, group_ids: Iterable[str]) -> list[str]:
        """
        Load several groups concurrently, logging failures instead of raising.

        Returns:
            IDs that loaded successfully
        """
        ids = list(group_ids)
        results = await asyncio.gather(
            *(self.load_group(group_id) for group_id in ids),
            return_exceptions=True,
        )
        loaded = []
        for group_id, result in zip(ids, results):
            if isinstance(result, BaseException):
                logger.warning(f"Failed to preload {group_id}: {result}")
            else:
                loaded.append(group_id)
        logger.info(f"Preloaded {len(loaded)}/{len(ids)} groups")
        return loaded

    # -------------------------------------------------------------------------
    # Cache
    # -------------------------------------------------------------------------

    def is_cached(self, group_id: str) -> bool:
        return group_id in self._cache

    def get_cached(self, group_id: str) -> Optional[ConceptBundle]:
        return self._cache.get(group_id)

    def clear_cache(self, group_ids: Optional[Iterable[str]] = None):
        """
        Drop cached bundles (all of them, or only the given IDs).

        In-flight assemblies are not affected.
        """
        if group_ids is None:
            self._cache.clear()
            logger.info("Content cache cleared")
            return
        ids = list(group_ids)
        for group_id in ids:
            self._cache.pop(group_id, None)
        logger.info(f"Content cache cleared for: {', '.join(ids)}")

    def get_cache_stats(self) -> CacheStats:
        return CacheStats(
            cached_count=len(self._cache),
            in_flight_count=len(self._in_flight),
            keys=list(self._cache.keys()),
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_requirements(self, group_id: str) -> Optional[dict[str, Any]]:
        """Section, exercise and question counts for a group (None if unknown)."""
        group = self.curriculum.get(group_id)
        if group is None:
            return None
        return {
            "sections": len(group.sections),
            "exercises": group.exercises,
            "quiz_questions": group.quiz.questions,
            "estimated_minutes": group.quiz.time_limit / 60,
        }

    def search(self, keyword: str) -> list[SearchResult]:
        """Case-insensitive match on group IDs and section IDs."""
        term = keyword.lower()
        results = []
        for group in self.curriculum.groups:
            if term in group.id.lower():
                results.append(SearchResult(
                    id=group.id,
                    title=format_section_title(group.id),
                    type="group",
                    group_id=group.id,
                ))
            for section_id in group.sections:
                if term in section_id.lower():
                    results.append(SearchResult(
                        id=f"{group.id}-{section_id}",
                        title=format_section_title(section_id),
                        type="section",
                        group_id=group.id,
                    ))
        return results

    async def export_bundle(self, group_id: str) -> dict[str, Any]:
        """Bundle as a JSON-ready dict with exported_at and version."""
        bundle = await self.load_group(group_id)
        return {
            "group": bundle.model_dump(mode="json"),
            "exported_at": datetime.now().isoformat(),
            "version": EXPORT_VERSION,
        }
