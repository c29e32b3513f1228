from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Sequence

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for 3.10
    import tomli as tomllib  # type: ignore[no-redef]


@dataclass(frozen=True)
class SpawnProfile:
    enemy_rate: float
    item_rate: float

    def __post_init__(self) -> None:
        for name in ("enemy_rate", "item_rate"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ValueError(f"{name} must be in (0, 1], got {value!r}.")


DIFFICULTIES = ("easy", "medium", "hard")

DIFFICULTY_PROFILES: Mapping[str, SpawnProfile] = MappingProxyType(
    {
        "easy": SpawnProfile(enemy_rate=0.6, item_rate=0.3),
        "medium": SpawnProfile(enemy_rate=0.7, item_rate=0.2),
        "hard": SpawnProfile(enemy_rate=0.8, item_rate=0.1),
    }
)


class UnknownDifficultyError(ValueError):
    pass


def get_spawn_profile(difficulty: str) -> SpawnProfile:
    profile = DIFFICULTY_PROFILES.get(difficulty)
    if profile is None:
        choices = ", ".join(DIFFICULTIES)
        raise UnknownDifficultyError(f"Unknown difficulty '{difficulty}', expected one of: {choices}.")
    return profile


@dataclass(frozen=True)
class Catalogs:
    normal_enemy_ids: Sequence[str] = ()
    boss_enemy_ids: Sequence[str] = ()
    item_ids: Sequence[str] = ()


@dataclass(frozen=True)
class RegistryConfig:
    url: str
    timeout: float = 5.0


@dataclass(frozen=True)
class RegistriesConfig:
    enemies: Optional[RegistryConfig] = None
    items: Optional[RegistryConfig] = None


@dataclass(frozen=True)
class GenerationConfig:
    default_size: int = 10
    max_size: int = 20
    default_difficulty: str = "medium"


@dataclass(frozen=True)
class Config:
    generation: GenerationConfig
    registries: RegistriesConfig
    fallback: Catalogs = field(default_factory=Catalogs)


def _parse_id_list(section: Mapping[str, Any], key: str) -> List[str]:
    raw = section.get(key, [])
    if isinstance(raw, (str, int)):
        raw = [raw]
    if not isinstance(raw, list):
        raise ValueError(f"fallback.{key} must be a list of identifiers.")
    return [str(value) for value in raw]


def _parse_registry(name: str, raw: Any) -> Optional[RegistryConfig]:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise ValueError(f"[registries.{name}] must be a table.")
    url = str(raw.get("url", "")).strip()
    if not url:
        return None
    timeout = float(raw.get("timeout", 5))
    if timeout <= 0:
        raise ValueError(f"registries.{name}.timeout must be positive.")
    return RegistryConfig(url=url, timeout=timeout)


def _parse_generation(raw: Any) -> GenerationConfig:
    if raw is None:
        return GenerationConfig()
    if not isinstance(raw, Mapping):
        raise ValueError("[generation] must be a table if provided.")
    default_size = int(raw.get("default_size", 10))
    max_size = int(raw.get("max_size", 20))
    if default_size < 1 or max_size < 1:
        raise ValueError("generation sizes must be >= 1.")
    if default_size > max_size:
        raise ValueError("generation.default_size cannot exceed generation.max_size.")
    default_difficulty = str(raw.get("default_difficulty", "medium")).strip()
    # Validates the name against the static table.
    get_spawn_profile(default_difficulty)
    return GenerationConfig(
        default_size=default_size,
        max_size=max_size,
        default_difficulty=default_difficulty,
    )


def load_config(path: str | Path) -> Config:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open("rb") as handle:
        raw = tomllib.load(handle)

    generation = _parse_generation(raw.get("generation"))

    registries_raw = raw.get("registries", {})
    if not isinstance(registries_raw, Mapping):
        raise ValueError("[registries] must be a table if provided.")
    registries = RegistriesConfig(
        enemies=_parse_registry("enemies", registries_raw.get("enemies")),
        items=_parse_registry("items", registries_raw.get("items")),
    )

    fallback_raw = raw.get("fallback", {})
    if not isinstance(fallback_raw, Mapping):
        raise ValueError("[fallback] must be a table if provided.")
    fallback = Catalogs(
        normal_enemy_ids=tuple(_parse_id_list(fallback_raw, "normal_enemy_ids")),
        boss_enemy_ids=tuple(_parse_id_list(fallback_raw, "boss_enemy_ids")),
        item_ids=tuple(_parse_id_list(fallback_raw, "item_ids")),
    )

    return Config(generation=generation, registries=registries, fallback=fallback)
