"""
Dependency graph checks and ordering for a curriculum.

Builds a networkx DiGraph with an edge prerequisite -> dependent and uses
it for cycle detection, topological ordering and learning paths.
"""

import logging

import networkx as nx

from orbitlearn.schemas import Curriculum

from .errors import CurriculumError, UnknownGroupError


logger = logging.getLogger(__name__)


def build_dependency_graph(curriculum: Curriculum) -> nx.DiGraph:
    G = nx.DiGraph()
    for group in curriculum.groups:
        G.add_node(group.id, item_count=group.item_count)
    for group in curriculum.groups:
        for prerequisite in group.prerequisites:
            G.add_edge(prerequisite, group.id)
    return G


def find_cycle(curriculum: Curriculum) -> list[str]:
    """Return one prerequisite cycle as a node list, or [] if the graph is acyclic."""
    G = build_dependency_graph(curriculum)
    try:
        cycle = nx.find_cycle(G)
    except nx.NetworkXNoCycle:
        return []
    return [u for u, _ in cycle] + [cycle[0][0]]


def find_prefix_collisions(curriculum: Curriculum) -> list[tuple[str, str]]:
    """
    Pairs (short, long) where one group ID is a prefix of another.

    Under prefix matching, items of the longer group also count toward
    the shorter one.
    """
    ids = curriculum.group_ids
    return [
        (short, long)
        for short in ids
        for long in ids
        if short != long and long.startswith(short)
    ]


def validate_curriculum(curriculum: Curriculum) -> Curriculum:
    """
    Reject cyclic curricula and report ambiguous group IDs.

    Raises:
        CurriculumError: If the prerequisite graph has a cycle
    """
    cycle = find_cycle(curriculum)
    if cycle:
        raise CurriculumError(f"Circular group dependency detected: {' -> '.join(cycle)}")

    if curriculum.item_matching == "prefix":
        for short, long in find_prefix_collisions(curriculum):
            logger.warning(
                f"Group id '{short}' is a prefix of '{long}': "
                f"'{long}' items also count toward '{short}'"
            )
    return curriculum


def topological_order(curriculum: Curriculum) -> list[str]:
    """All groups in dependency order, ties broken by declaration order."""
    position = {gid: idx for idx, gid in enumerate(curriculum.group_ids)}
    G = build_dependency_graph(curriculum)
    try:
        return list(nx.lexicographical_topological_sort(G, key=position.__getitem__))
    except nx.NetworkXUnfeasible as e:
        raise CurriculumError("Curriculum graph has cycles") from e


def learning_path(curriculum: Curriculum, group_id: str) -> list[str]:
    """
    Every group needed to reach group_id, prerequisites first.

    Raises:
        UnknownGroupError: If group_id is not in the curriculum
    """
    if group_id not in curriculum:
        raise UnknownGroupError(group_id)
    G = build_dependency_graph(curriculum)
    needed = nx.ancestors(G, group_id) | {group_id}
    return [gid for gid in topological_order(curriculum) if gid in needed]
