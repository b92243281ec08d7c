"""
Content loader tests.

Covers single-flight assembly, the bundle cache, failure handling and
the generated curriculum content.
"""

import asyncio

import pytest

from conftest import make_curriculum

from orbitlearn.classroom import (
    AssemblyFailure,
    ContentLoader,
    CurriculumContentSource,
    UnknownGroupError,
)
from orbitlearn.classroom.content_source import (
    exercise_difficulty,
    format_section_title,
    question_difficulty,
    question_points,
)


class CountingSource(CurriculumContentSource):
    """Curriculum source that counts assemblies and can be held open or failed."""

    def __init__(self):
        self.overview_calls = 0
        self.section_calls = 0
        self.release = asyncio.Event()
        self.release.set()
        self.fail_sections: set[str] = set()

    async def fetch_overview(self, group):
        self.overview_calls += 1
        await self.release.wait()
        return await super().fetch_overview(group)

    async def fetch_section(self, group, section_id):
        self.section_calls += 1
        await asyncio.sleep(0)
        if section_id in self.fail_sections:
            raise IOError(f"section {section_id} unavailable")
        return await super().fetch_section(group, section_id)


@pytest.fixture
def curriculum():
    return make_curriculum({"basics": [], "dom": ["basics"], "events": ["dom"]})


@pytest.fixture
def source():
    return CountingSource()


@pytest.fixture
def loader(curriculum, source):
    return ContentLoader(curriculum, source=source)


class TestSingleFlight:
    """Test that concurrent loads share one assembly."""

    @pytest.mark.asyncio
    async def test_concurrent_loads_share_assembly(self, loader, source):
        source.release.clear()
        tasks = [asyncio.ensure_future(loader.load_group("basics")) for _ in range(3)]
        await asyncio.sleep(0)

        assert loader.get_cache_stats().in_flight_count == 1
        source.release.set()
        bundles = await asyncio.gather(*tasks)

        assert source.overview_calls == 1
        assert bundles[0] is bundles[1] is bundles[2]
        assert loader.get_cache_stats().in_flight_count == 0

    @pytest.mark.asyncio
    async def test_different_groups_load_separately(self, loader, source):
        basics, dom = await asyncio.gather(loader.load_group("basics"), loader.load_group("dom"))
        assert basics.id == "basics"
        assert dom.id == "dom"
        assert source.overview_calls == 2

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_cancel_assembly(self, loader, source):
        source.release.clear()
        first = asyncio.ensure_future(loader.load_group("basics"))
        second = asyncio.ensure_future(loader.load_group("basics"))
        await asyncio.sleep(0)

        first.cancel()
        source.release.set()
        bundle = await second

        assert bundle.id == "basics"
        assert loader.is_cached("basics")


class TestCache:
    """Test cache behaviour."""

    @pytest.mark.asyncio
    async def test_cached_bundle_reused(self, loader, source):
        first = await loader.load_group("basics")
        second = await loader.load_group("basics")
        assert first is second
        assert source.overview_calls == 1
        assert loader.get_cached("basics") is first

    @pytest.mark.asyncio
    async def test_clear_cache_forces_reassembly(self, loader, source):
        first = await loader.load_group("basics")
        loader.clear_cache(["basics"])
        assert not loader.is_cached("basics")

        second = await loader.load_group("basics")
        assert second is not first
        assert source.overview_calls == 2

    @pytest.mark.asyncio
    async def test_clear_all(self, loader):
        await loader.preload(["basics", "dom"])
        loader.clear_cache()
        assert loader.get_cache_stats().cached_count == 0

    @pytest.mark.asyncio
    async def test_clear_cache_leaves_in_flight(self, loader, source):
        source.release.clear()
        first = asyncio.ensure_future(loader.load_group("basics"))
        await asyncio.sleep(0)

        loader.clear_cache()
        second = asyncio.ensure_future(loader.load_group("basics"))
        source.release.set()

        assert await first is await second
        assert source.overview_calls == 1

    @pytest.mark.asyncio
    async def test_cache_stats(self, loader):
        await loader.load_group("dom")
        stats = loader.get_cache_stats()
        assert stats.cached_count == 1
        assert stats.in_flight_count == 0
        assert stats.keys == ["dom"]


class TestFailures:
    """Test unknown groups and failed sub-tasks."""

    @pytest.mark.asyncio
    async def test_unknown_group(self, loader):
        with pytest.raises(UnknownGroupError):
            await loader.load_group("canvas")
        stats = loader.get_cache_stats()
        assert stats.cached_count == 0
        assert stats.in_flight_count == 0

    @pytest.mark.asyncio
    async def test_failed_section_fails_bundle(self, loader, source):
        source.fail_sections = {"practice"}
        with pytest.raises(AssemblyFailure) as exc_info:
            await loader.load_group("basics")

        assert exc_info.value.group_id == "basics"
        assert isinstance(exc_info.value.__cause__, OSError)
        assert not loader.is_cached("basics")
        assert loader.get_cache_stats().in_flight_count == 0

    @pytest.mark.asyncio
    async def test_all_waiters_see_failure(self, loader, source):
        source.fail_sections = {"intro"}
        results = await asyncio.gather(
            loader.load_group("basics"),
            loader.load_group("basics"),
            return_exceptions=True,
        )
        assert all(isinstance(r, AssemblyFailure) for r in results)

    @pytest.mark.asyncio
    async def test_retry_after_failure(self, loader, source):
        source.fail_sections = {"intro"}
        with pytest.raises(AssemblyFailure):
            await loader.load_group("basics")

        source.fail_sections = set()
        bundle = await loader.load_group("basics")
        assert bundle.id == "basics"
        assert loader.is_cached("basics")

    @pytest.mark.asyncio
    async def test_preload_skips_failures(self, loader, source):
        source.fail_sections = {"intro"}
        loaded = await loader.preload(["basics", "canvas"])
        assert loaded == []

        source.fail_sections = set()
        assert await loader.preload(["basics", "dom", "canvas"]) == ["basics", "dom"]


class TestBundleContent:
    """Test the bundle assembled from the curriculum."""

    @pytest.mark.asyncio
    async def test_bundle_structure(self, loader):
        bundle = await loader.load_group("dom")
        assert [s.id for s in bundle.sections] == ["intro", "practice"]
        assert [e.id for e in bundle.exercises] == ["dom-exercise-1", "dom-exercise-2"]
        assert bundle.quiz.id == "dom-quiz"
        assert [q.id for q in bundle.quiz.questions] == ["dom-q1", "dom-q2", "dom-q3"]
        assert bundle.structure.quiz_time_limit == 120
        assert bundle.overview.title == "Dom"

    @pytest.mark.asyncio
    async def test_quiz_points(self, loader):
        bundle = await loader.load_group("basics")
        # 3 questions: ratios 0.33, 0.67, 1.0 -> medium, hard, hard
        assert [q.points for q in bundle.quiz.questions] == [10, 15, 15]
        assert bundle.quiz.total_points == 40
        assert bundle.quiz.passing_score == 80

    @pytest.mark.asyncio
    async def test_export_bundle(self, loader):
        exported = await loader.export_bundle("basics")
        assert exported["group"]["id"] == "basics"
        assert exported["version"] == "1.0"
        assert "exported_at" in exported

    def test_difficulty_tiers(self):
        assert [exercise_difficulty(i, 5) for i in range(1, 6)] == [
            "easy", "easy", "medium", "hard", "hard"
        ]
        assert [question_difficulty(i, 10) for i in (3, 4, 6, 7)] == [
            "easy", "medium", "medium", "hard"
        ]
        assert question_points(1, 10) == 5

    def test_format_section_title(self):
        assert format_section_title("asyncAwait") == "Async Await"
        assert format_section_title("variables") == "Variables"


class TestQueries:
    """Test synchronous curriculum queries."""

    def test_get_requirements(self, loader):
        requirements = loader.get_requirements("basics")
        assert requirements == {
            "sections": 2,
            "exercises": 2,
            "quiz_questions": 3,
            "estimated_minutes": 2.0,
        }
        assert loader.get_requirements("canvas") is None

    def test_search(self, loader):
        results = loader.search("PRACT")
        assert {r.group_id for r in results} == {"basics", "dom", "events"}
        assert all(r.type == "section" for r in results)
        assert results[0].title == "Practice"

        groups = loader.search("dom")
        assert [(r.id, r.type) for r in groups] == [("dom", "group")]
