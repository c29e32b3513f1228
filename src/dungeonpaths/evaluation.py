from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Sequence

from .dungeon import BOSS_ARENA, START, Position, spawnable_positions
from .generator import DungeonLayout


@dataclass
class LayoutMetrics:
    position_count: int
    depth: int
    max_width: int
    branching_factor: float
    enemy_presence: float
    item_presence: float


def layer_depths(graph: Mapping[Position, Sequence[Position]]) -> Dict[Position, int]:
    """Longest hop count from ``start`` to each position."""
    depths: Dict[Position, int] = {START: 0}
    # Positions are inserted in creation order, so every edge points forward.
    for position in graph:
        if position not in depths:
            continue
        for successor in graph[position]:
            candidate = depths[position] + 1
            if candidate > depths.get(successor, -1):
                depths[successor] = candidate
    return depths


def summarize_layout(layout: DungeonLayout) -> LayoutMetrics:
    graph = layout.paths
    depths = layer_depths(graph)

    widths: Dict[int, int] = {}
    for depth in depths.values():
        widths[depth] = widths.get(depth, 0) + 1

    sources = [position for position in graph if position != BOSS_ARENA]
    out_degree = sum(len(graph[position]) for position in sources)
    branching_factor = out_degree / max(len(sources), 1)

    candidates = spawnable_positions(graph)
    total = max(len(candidates), 1)
    enemy_positions = {pos for positions in layout.enemies.values() for pos in positions if pos != BOSS_ARENA}
    item_positions = {pos for positions in layout.items.values() for pos in positions}

    return LayoutMetrics(
        position_count=len(graph),
        depth=depths.get(BOSS_ARENA, 0),
        max_width=max(widths.values()) if widths else 0,
        branching_factor=branching_factor,
        enemy_presence=len(enemy_positions) / total,
        item_presence=len(item_positions) / total,
    )
