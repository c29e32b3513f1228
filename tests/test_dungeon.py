import random
import re

import pytest

from dungeonpaths.dungeon import (
    BOSS_ARENA,
    START,
    InvalidSizeError,
    PathGraphBuilder,
    build_graph,
    find_orphans,
    predecessors,
    reachable_from,
    unreachable_from,
)
from dungeonpaths.evaluation import layer_depths

POSITION_NAME = re.compile(r"^pos_\d+_\d+$")


def test_size_one_connects_start_to_boss():
    assert build_graph(1, random.Random(0)) == {START: [BOSS_ARENA], BOSS_ARENA: []}


def test_size_two_is_a_single_hop():
    assert build_graph(2, random.Random(0)) == {START: [BOSS_ARENA], BOSS_ARENA: []}


@pytest.mark.parametrize("size", [0, -4, 2.5, "3", True, None])
def test_invalid_size_is_rejected(size):
    with pytest.raises(InvalidSizeError):
        build_graph(size, random.Random(0))


def test_invalid_size_is_a_value_error():
    assert issubclass(InvalidSizeError, ValueError)


@pytest.mark.parametrize("size", range(1, 13))
@pytest.mark.parametrize("seed", [0, 1, 7, 42])
def test_graph_invariants(size, seed):
    graph = build_graph(size, random.Random(seed))

    assert START in graph
    assert graph[START]
    assert graph[BOSS_ARENA] == []
    for position, successors in graph.items():
        if position != BOSS_ARENA:
            assert successors, position
        assert len(successors) == len(set(successors))
        assert START not in successors
        for successor in successors:
            assert successor in graph
        if position not in (START, BOSS_ARENA):
            assert POSITION_NAME.match(position)

    assert find_orphans(graph) == []
    assert reachable_from(graph, [START]) == set(graph)
    assert unreachable_from(graph, BOSS_ARENA) == []

    # Every edge moves strictly deeper, so no walk can return to a position.
    depths = layer_depths(graph)
    assert set(depths) == set(graph)
    for position, successors in graph.items():
        for successor in successors:
            assert depths[successor] > depths[position], (position, successor)


def test_three_way_branching_shape(max_branching_rng):
    graph = PathGraphBuilder(max_branching_rng).build(5)

    assert graph[START] == ["pos_1_0", "pos_1_1", "pos_1_2"]
    assert graph["pos_1_0"] == ["pos_2_0", "pos_2_1", "pos_2_2"]
    assert graph["pos_1_2"] == ["pos_2_6", "pos_2_7", "pos_2_8"]
    # Halfway through convergence each position keeps a single successor.
    assert graph["pos_2_4"] == ["pos_3_4"]
    assert graph["pos_3_8"] == [BOSS_ARENA]
    assert len(graph) == 1 + 3 + 9 + 9 + 1


def test_convergence_layer_collapses_into_boss():
    graph = build_graph(3, random.Random(5))
    first_layer = graph[START]
    assert 1 <= len(first_layer) <= 3
    for position in first_layer:
        assert graph[position] == [BOSS_ARENA]


def test_same_seed_builds_same_graph():
    assert build_graph(9, random.Random(99)) == build_graph(9, random.Random(99))


def test_insertion_order_follows_depth():
    graph = build_graph(8, random.Random(3))
    order = list(graph)
    assert order[0] == START
    assert order[-1] == BOSS_ARENA
    depths = [int(position.split("_")[1]) for position in order[1:-1]]
    assert depths == sorted(depths)


def test_predecessors_and_orphans():
    graph = {START: ["a"], "a": [BOSS_ARENA], "b": [BOSS_ARENA], BOSS_ARENA: []}
    assert predecessors(graph)[BOSS_ARENA] == ["a", "b"]
    assert find_orphans(graph) == ["b"]
    assert unreachable_from({START: ["a"], "a": [], BOSS_ARENA: []}, BOSS_ARENA) == [START, "a"]
