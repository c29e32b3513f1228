from __future__ import annotations

import argparse
import json
import logging
import random
from pathlib import Path

from .catalog import CatalogProvider
from .config import DIFFICULTIES, Config, load_config
from .dungeon import BOSS_ARENA, START
from .evaluation import layer_depths, summarize_layout
from .generator import DungeonLayout, GenerationRequest, generate_dungeon

logger = logging.getLogger(__name__)


def _render_ascii(layout: DungeonLayout) -> str:
    depths = layer_depths(layout.paths)
    layers: dict[int, list[str]] = {}
    for position, depth in depths.items():
        layers.setdefault(depth, []).append(position)

    enemy_at = {pos: enemy_id for enemy_id, positions in layout.enemies.items() for pos in positions}
    item_at = {pos: item_id for item_id, positions in layout.items.items() for pos in positions}

    lines = [f"Dungeon {layout.seed} (size {layout.size}, {layout.difficulty})"]
    for depth in sorted(layers):
        lines.append(f"{depth:3d} | " + "  ".join(layers[depth]))

    for position in layout.paths:
        if position == START:
            continue
        details = []
        if position in enemy_at:
            kind = "Boss" if position == BOSS_ARENA else "Enemy"
            details.append(f"{kind} {enemy_at[position]}")
        if position in item_at:
            details.append(f"Item {item_at[position]}")
        successors = layout.paths[position]
        if successors:
            details.append("-> " + ", ".join(successors))
        lines.append(f"\n{position}")
        lines.extend(f" - {detail}" for detail in details)
    return "\n".join(lines)


def build_request(
    config: Config,
    size: int | None,
    difficulty: str | None,
    seed: str | None,
    offline: bool = False,
) -> GenerationRequest:
    catalogs = CatalogProvider(config).load(offline=offline)
    return GenerationRequest(
        size=size if size is not None else config.generation.default_size,
        difficulty=difficulty or config.generation.default_difficulty,
        normal_enemy_ids=catalogs.normal_enemy_ids,
        boss_enemy_ids=catalogs.boss_enemy_ids,
        item_ids=catalogs.item_ids,
        seed=seed,
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate a dungeon path graph with enemies and items.")
    parser.add_argument("--config", type=Path, default=Path("config/default_config.toml"),
                        help="Path to config file.")
    parser.add_argument("--size", type=int, default=None,
                        help="Number of steps from start to the boss arena.")
    parser.add_argument("--difficulty", choices=DIFFICULTIES, default=None,
                        help="Spawn difficulty; defaults to the configured one.")
    parser.add_argument("--seed", default=None,
                        help="Label stored with the generated dungeon.")
    parser.add_argument("--rng-seed", type=int, default=None,
                        help="Seed the random source to replay a layout.")
    parser.add_argument("--offline", action="store_true",
                        help="Skip the registries and use the fallback catalogs.")
    parser.add_argument("--format", choices=("json", "ascii"), default="json",
                        help="Choose the output format.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.size is not None and not 1 <= args.size <= config.generation.max_size:
        parser.error(f"--size must be between 1 and {config.generation.max_size}")

    request = build_request(config, args.size, args.difficulty, args.seed, offline=args.offline)
    layout = generate_dungeon(request, random.Random(args.rng_seed))

    if args.format == "json":
        payload = layout.to_dict()
        metrics = summarize_layout(layout)
        payload["evaluation"] = {
            "position_count": metrics.position_count,
            "depth": metrics.depth,
            "max_width": metrics.max_width,
            "branching_factor": metrics.branching_factor,
            "enemy_presence": metrics.enemy_presence,
            "item_presence": metrics.item_presence,
        }
        print(json.dumps(payload, indent=2))
    else:
        print(_render_ascii(layout))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
