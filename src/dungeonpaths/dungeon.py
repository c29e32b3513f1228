from __future__ import annotations

import logging
import math
import random
from collections import deque
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

logger = logging.getLogger(__name__)

START = "start"
BOSS_ARENA = "boss_arena"

Position = str
PathGraph = Dict[Position, List[Position]]


class InvalidSizeError(ValueError):
    pass


class PathGraphBuilder:
    """Builds a branch-then-converge path graph from ``start`` to ``boss_arena``.

    Positions are created depth by depth. Up to the convergence point every
    frontier position branches into one to three new positions; afterwards the
    branching factor shrinks with depth and the final layer collapses into the
    boss arena.
    """

    _MAX_BRANCHING = 3

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._random = rng if rng is not None else random.Random()

    def build(self, size: int) -> PathGraph:
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise InvalidSizeError(f"size must be an integer >= 1, got {size!r}.")

        paths: PathGraph = {START: []}

        def link(source: Position, target: Position) -> None:
            successors = paths.setdefault(source, [])
            if target not in successors:
                successors.append(target)
            paths.setdefault(target, [])

        convergence_point = math.ceil(size / 2)
        frontier: List[Position] = [START]

        for depth in range(convergence_point - 1):
            next_frontier: List[Position] = []
            for position in frontier:
                branches = self._random.randint(1, self._MAX_BRANCHING)
                for _ in range(branches):
                    next_position = f"pos_{depth + 1}_{len(next_frontier)}"
                    next_frontier.append(next_position)
                    link(position, next_position)
            frontier = next_frontier

        remaining_steps = size - convergence_point
        if remaining_steps == 0:
            for position in frontier:
                link(position, BOSS_ARENA)
        else:
            for depth in range(convergence_point, size):
                converge_ratio = (depth - convergence_point + 1) / remaining_steps
                num_next = max(1, math.floor(self._MAX_BRANCHING * (1 - converge_ratio)))
                final_layer = depth == size - 1
                next_frontier = []
                next_index = 0
                for position in frontier:
                    for _ in range(num_next):
                        next_position = BOSS_ARENA if final_layer else f"pos_{depth}_{next_index}"
                        next_index += 1
                        link(position, next_position)
                        if next_position not in next_frontier:
                            next_frontier.append(next_position)
                frontier = next_frontier

        logger.debug(
            "Built path graph: size=%d convergence_point=%d positions=%d",
            size,
            convergence_point,
            len(paths),
        )
        return paths


def build_graph(size: int, rng: Optional[random.Random] = None) -> PathGraph:
    return PathGraphBuilder(rng).build(size)


def spawnable_positions(graph: Mapping[Position, Sequence[Position]]) -> List[Position]:
    return [position for position in graph if position not in (START, BOSS_ARENA)]


def predecessors(graph: Mapping[Position, Sequence[Position]]) -> Dict[Position, List[Position]]:
    incoming: Dict[Position, List[Position]] = {position: [] for position in graph}
    for source, successors in graph.items():
        for target in successors:
            incoming.setdefault(target, []).append(source)
    return incoming


def find_orphans(graph: Mapping[Position, Sequence[Position]]) -> List[Position]:
    """Positions other than ``start`` that no edge leads into."""
    incoming = predecessors(graph)
    return [position for position, sources in incoming.items() if position != START and not sources]


def reachable_from(graph: Mapping[Position, Sequence[Position]], sources: Iterable[Position]) -> Set[Position]:
    seen: Set[Position] = set()
    queue = deque(sources)
    while queue:
        position = queue.popleft()
        if position in seen:
            continue
        seen.add(position)
        queue.extend(graph.get(position, ()))
    return seen


def unreachable_from(graph: Mapping[Position, Sequence[Position]], target: Position) -> List[Position]:
    """Positions with no walk leading to ``target``."""
    incoming = predecessors(graph)
    can_reach = reachable_from(incoming, [target])
    return [position for position in graph if position not in can_reach]
