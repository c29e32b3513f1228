from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

from .config import Catalogs, Config, RegistryConfig

logger = logging.getLogger(__name__)


class CatalogError(RuntimeError):
    pass


class RegistryClient:
    def __init__(self, config: RegistryConfig) -> None:
        self._url = config.url
        self._timeout = config.timeout

    @property
    def url(self) -> str:
        return self._url

    def fetch(self) -> List[Dict[str, Any]]:
        try:
            response = requests.get(self._url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise CatalogError(f"Registry request to {self._url} failed: {exc}") from exc
        if response.status_code >= 400:
            raise CatalogError(f"Registry {self._url} returned status {response.status_code}: {response.text}")
        try:
            data = response.json()
        except ValueError as exc:
            raise CatalogError(f"Malformed response from registry {self._url}: {response.text}") from exc
        if not isinstance(data, list):
            logger.warning("Registry %s did not return a list; treating it as empty.", self._url)
            return []
        return [record for record in data if isinstance(record, dict) and "id" in record]


class CatalogProvider:
    """Collects enemy and item identifiers for a generation request.

    Each registry is queried independently. When a registry is unreachable,
    answers with an error, or is not configured at all, the fixed fallback
    catalog from the configuration is used for that registry instead.
    """

    def __init__(self, config: Config) -> None:
        self._fallback = config.fallback
        self._enemy_client = RegistryClient(config.registries.enemies) if config.registries.enemies else None
        self._item_client = RegistryClient(config.registries.items) if config.registries.items else None

    def load(self, offline: bool = False) -> Catalogs:
        normal_ids, boss_ids = self._load_enemies(None if offline else self._enemy_client)
        item_ids = self._load_items(None if offline else self._item_client)
        logger.info(
            "Catalogs ready: %d normal enemies, %d bosses, %d items",
            len(normal_ids),
            len(boss_ids),
            len(item_ids),
        )
        return Catalogs(normal_enemy_ids=normal_ids, boss_enemy_ids=boss_ids, item_ids=item_ids)

    def _load_enemies(self, client: Optional[RegistryClient]) -> Tuple[Sequence[str], Sequence[str]]:
        fallback = (tuple(self._fallback.normal_enemy_ids), tuple(self._fallback.boss_enemy_ids))
        if client is None:
            return fallback
        try:
            records = client.fetch()
        except CatalogError as exc:
            logger.warning("Enemy registry unavailable, using fallback catalog: %s", exc)
            return fallback
        normal_ids = tuple(str(record["id"]) for record in records if not record.get("isBoss"))
        boss_ids = tuple(str(record["id"]) for record in records if record.get("isBoss"))
        logger.debug("Fetched %d enemies from %s", len(records), client.url)
        return normal_ids, boss_ids

    def _load_items(self, client: Optional[RegistryClient]) -> Sequence[str]:
        if client is None:
            return tuple(self._fallback.item_ids)
        try:
            records = client.fetch()
        except CatalogError as exc:
            logger.warning("Item registry unavailable, using fallback catalog: %s", exc)
            return tuple(self._fallback.item_ids)
        logger.debug("Fetched %d items from %s", len(records), client.url)
        return tuple(str(record["id"]) for record in records)
