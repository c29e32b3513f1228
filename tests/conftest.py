import random
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]


class MaxBranchingRandom(random.Random):
    """Always branches three ways so graph shapes are fully predictable."""

    def randint(self, a, b):
        return b


@pytest.fixture
def max_branching_rng():
    return MaxBranchingRandom(1234)


@pytest.fixture
def default_config_path():
    return REPO_ROOT / "config" / "default_config.toml"


@pytest.fixture
def offline_config_path(tmp_path):
    path = tmp_path / "offline.toml"
    path.write_text(
        """
[generation]
default_size = 6
max_size = 12
default_difficulty = "easy"

[fallback]
normal_enemy_ids = ["1", "2", "3", "4", "5", "6", "7", "8", "9", "10"]
boss_enemy_ids = ["27", "67"]
item_ids = ["a", "b", "c"]
""",
        encoding="utf-8",
    )
    return path
