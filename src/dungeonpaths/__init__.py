"""Procedural dungeon path graphs populated with difficulty-driven encounters."""

from .config import DIFFICULTY_PROFILES, SpawnProfile, UnknownDifficultyError, get_spawn_profile, load_config
from .content import ContentPopulator, place_enemies, place_items
from .dungeon import BOSS_ARENA, START, InvalidSizeError, PathGraphBuilder, build_graph
from .generator import DungeonLayout, GenerationRequest, generate_dungeon

__all__ = [
    "BOSS_ARENA",
    "ContentPopulator",
    "DIFFICULTY_PROFILES",
    "DungeonLayout",
    "GenerationRequest",
    "InvalidSizeError",
    "PathGraphBuilder",
    "START",
    "SpawnProfile",
    "UnknownDifficultyError",
    "build_graph",
    "generate_dungeon",
    "get_spawn_profile",
    "load_config",
    "place_enemies",
    "place_items",
]
