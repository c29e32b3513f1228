from __future__ import annotations

import logging
import random
from typing import Dict, List, MutableSet, Optional, Sequence, Set, Union

from .config import SpawnProfile, get_spawn_profile
from .dungeon import BOSS_ARENA, PathGraph, Position, spawnable_positions

logger = logging.getLogger(__name__)

EncounterMap = Dict[str, List[Position]]
ItemMap = Dict[str, List[Position]]


def _resolve_profile(difficulty: Union[str, SpawnProfile]) -> SpawnProfile:
    if isinstance(difficulty, SpawnProfile):
        return difficulty
    return get_spawn_profile(difficulty)


class ContentPopulator:
    """Places enemies and items on the positions of a finished path graph."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._random = rng if rng is not None else random.Random()

    def place_enemies(
        self,
        graph: PathGraph,
        difficulty: Union[str, SpawnProfile],
        normal_ids: Sequence[str],
        boss_ids: Sequence[str],
    ) -> EncounterMap:
        profile = _resolve_profile(difficulty)
        normal_ids = list(normal_ids)
        boss_ids = list(boss_ids)
        enemies: EncounterMap = {}

        for position in spawnable_positions(graph):
            roll = self._random.random()
            if roll < profile.enemy_rate and normal_ids:
                enemy_id = self._random.choice(normal_ids)
                enemies.setdefault(enemy_id, []).append(position)

        if boss_ids:
            boss_id = self._random.choice(boss_ids)
            enemies[boss_id] = [BOSS_ARENA]
        else:
            logger.debug("Boss catalog is empty; %s left unguarded.", BOSS_ARENA)
        return enemies

    def place_items(
        self,
        graph: PathGraph,
        difficulty: Union[str, SpawnProfile],
        item_ids: Sequence[str],
        occupied: MutableSet[Position],
    ) -> ItemMap:
        profile = _resolve_profile(difficulty)
        item_ids = list(item_ids)
        items: ItemMap = {}

        for position in spawnable_positions(graph):
            if position in occupied:
                continue
            roll = self._random.random()
            if roll < profile.item_rate and item_ids:
                item_id = self._random.choice(item_ids)
                items.setdefault(item_id, []).append(position)
                occupied.add(position)
        return items


def place_enemies(
    graph: PathGraph,
    difficulty: Union[str, SpawnProfile],
    normal_ids: Sequence[str],
    boss_ids: Sequence[str],
    rng: Optional[random.Random] = None,
) -> EncounterMap:
    return ContentPopulator(rng).place_enemies(graph, difficulty, normal_ids, boss_ids)


def place_items(
    graph: PathGraph,
    difficulty: Union[str, SpawnProfile],
    item_ids: Sequence[str],
    occupied: MutableSet[Position],
    rng: Optional[random.Random] = None,
) -> ItemMap:
    return ContentPopulator(rng).place_items(graph, difficulty, item_ids, occupied)


def occupied_positions(placements: Dict[str, List[Position]]) -> Set[Position]:
    return {position for positions in placements.values() for position in positions}
