from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .config import get_spawn_profile
from .content import ContentPopulator, EncounterMap, ItemMap, occupied_positions
from .dungeon import InvalidSizeError, PathGraph, PathGraphBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationRequest:
    size: int
    difficulty: str
    normal_enemy_ids: Sequence[str] = ()
    boss_enemy_ids: Sequence[str] = ()
    item_ids: Sequence[str] = ()
    seed: Optional[str] = None

    def validate(self) -> None:
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 1:
            raise InvalidSizeError(f"size must be an integer >= 1, got {self.size!r}.")
        get_spawn_profile(self.difficulty)


@dataclass
class DungeonLayout:
    seed: str
    size: int
    difficulty: str
    paths: PathGraph
    enemies: EncounterMap = field(default_factory=dict)
    items: ItemMap = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "seed": self.seed,
            "size": self.size,
            "difficulty": self.difficulty,
            "paths": {position: list(successors) for position, successors in self.paths.items()},
            "enemies": {enemy_id: list(positions) for enemy_id, positions in self.enemies.items()},
            "items": {item_id: list(positions) for item_id, positions in self.items.items()},
        }


def generate_dungeon(request: GenerationRequest, rng: Optional[random.Random] = None) -> DungeonLayout:
    """Build the path graph for ``request`` and populate it.

    Enemies are placed first; the positions they occupy are excluded from item
    placement. Pass a seeded ``random.Random`` to replay a layout exactly; the
    request's ``seed`` is only a label stored with the result.
    """
    request.validate()
    rng = rng if rng is not None else random.Random()
    seed = request.seed or str(uuid.uuid4())
    profile = get_spawn_profile(request.difficulty)

    paths = PathGraphBuilder(rng).build(request.size)
    populator = ContentPopulator(rng)
    enemies = populator.place_enemies(paths, profile, request.normal_enemy_ids, request.boss_enemy_ids)
    occupied = occupied_positions(enemies)
    items = populator.place_items(paths, profile, request.item_ids, occupied)

    logger.debug(
        "Generated dungeon seed=%s size=%d difficulty=%s positions=%d enemies=%d items=%d",
        seed,
        request.size,
        request.difficulty,
        len(paths),
        _placement_count(enemies),
        _placement_count(items),
    )
    return DungeonLayout(
        seed=seed,
        size=request.size,
        difficulty=request.difficulty,
        paths=paths,
        enemies=enemies,
        items=items,
    )


def _placement_count(placements: Dict[str, List[str]]) -> int:
    return sum(len(positions) for positions in placements.values())
