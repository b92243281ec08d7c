"""Shared fixtures: small curricula and in-memory stores."""

import pytest

from orbitlearn.classroom import MemoryStorage, ProgressStore
from orbitlearn.schemas import Curriculum


def make_curriculum(graph: dict, item_counts: dict | None = None, **kwargs) -> Curriculum:
    """Curriculum from {group_id: [prerequisites]} in declaration order."""
    item_counts = item_counts or {}
    return Curriculum(
        groups=[
            {
                "id": group_id,
                "prerequisites": prereqs,
                "item_count": item_counts.get(group_id, 3),
                "sections": ["intro", "practice"],
                "exercises": 2,
                "quiz": {"questions": 3, "time_limit": 120},
            }
            for group_id, prereqs in graph.items()
        ],
        **kwargs,
    )


@pytest.fixture
def chain_curriculum():
    """basics -> dom -> events"""
    return make_curriculum({"basics": [], "dom": ["basics"], "events": ["dom"]})


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(chain_curriculum, storage):
    return ProgressStore(chain_curriculum, storage=storage)


@pytest.fixture
def recorded(store):
    """List of (event, payload) tuples delivered to a listener on `store`."""
    events = []
    store.add_listener(lambda event, payload, state: events.append((event, payload)))
    return events
