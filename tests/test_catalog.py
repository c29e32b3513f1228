import pytest
import requests

from dungeonpaths import catalog
from dungeonpaths.catalog import CatalogError, CatalogProvider, RegistryClient
from dungeonpaths.config import (
    Catalogs,
    Config,
    GenerationConfig,
    RegistriesConfig,
    RegistryConfig,
)

ENEMY_URL = "http://enemies.test/brainrots"
ITEM_URL = "http://items.test/items"

FALLBACK = Catalogs(
    normal_enemy_ids=("1", "2"),
    boss_enemy_ids=("27",),
    item_ids=("1", "2", "3"),
)


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=""):
        self._payload = payload
        self.status_code = status_code
        self.text = text

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def config():
    return Config(
        generation=GenerationConfig(),
        registries=RegistriesConfig(
            enemies=RegistryConfig(url=ENEMY_URL, timeout=2.0),
            items=RegistryConfig(url=ITEM_URL, timeout=2.0),
        ),
        fallback=FALLBACK,
    )


@pytest.fixture
def responses(monkeypatch):
    routes = {}
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        result = routes[url]
        if isinstance(result, Exception):
            raise result
        return result

    monkeypatch.setattr(catalog.requests, "get", fake_get)
    return routes, calls


def test_registry_catalogs_are_split_by_boss_flag(config, responses):
    routes, calls = responses
    routes[ENEMY_URL] = FakeResponse(
        [
            {"id": 1, "name": "Enemy1", "isBoss": False},
            {"id": "2", "name": "Enemy2"},
            {"id": 27, "name": "Boss", "isBoss": True},
        ]
    )
    routes[ITEM_URL] = FakeResponse([{"id": "item1"}, {"id": "item2"}, {"name": "no id"}])

    catalogs = CatalogProvider(config).load()

    assert catalogs.normal_enemy_ids == ("1", "2")
    assert catalogs.boss_enemy_ids == ("27",)
    assert catalogs.item_ids == ("item1", "item2")
    assert calls == [(ENEMY_URL, 2.0), (ITEM_URL, 2.0)]


def test_unreachable_registry_falls_back(config, responses, caplog):
    routes, _ = responses
    routes[ENEMY_URL] = requests.ConnectionError("refused")
    routes[ITEM_URL] = FakeResponse([{"id": "item1"}])

    catalogs = CatalogProvider(config).load()

    assert catalogs.normal_enemy_ids == FALLBACK.normal_enemy_ids
    assert catalogs.boss_enemy_ids == FALLBACK.boss_enemy_ids
    assert catalogs.item_ids == ("item1",)
    assert "Enemy registry unavailable" in caplog.text


def test_error_status_falls_back(config, responses):
    routes, _ = responses
    routes[ENEMY_URL] = FakeResponse([], status_code=200)
    routes[ITEM_URL] = FakeResponse(None, status_code=503, text="down")

    catalogs = CatalogProvider(config).load()

    assert catalogs.normal_enemy_ids == ()
    assert catalogs.boss_enemy_ids == ()
    assert catalogs.item_ids == FALLBACK.item_ids


def test_offline_skips_registries(config, responses):
    _, calls = responses
    catalogs = CatalogProvider(config).load(offline=True)
    assert catalogs == Catalogs(
        normal_enemy_ids=FALLBACK.normal_enemy_ids,
        boss_enemy_ids=FALLBACK.boss_enemy_ids,
        item_ids=FALLBACK.item_ids,
    )
    assert calls == []


def test_unconfigured_registries_use_fallback(responses):
    _, calls = responses
    config = Config(generation=GenerationConfig(), registries=RegistriesConfig(), fallback=FALLBACK)
    assert CatalogProvider(config).load().item_ids == FALLBACK.item_ids
    assert calls == []


def test_client_rejects_malformed_json(responses):
    routes, _ = responses
    routes[ITEM_URL] = FakeResponse(ValueError("bad json"), text="<html>")
    with pytest.raises(CatalogError):
        RegistryClient(RegistryConfig(url=ITEM_URL)).fetch()


def test_client_treats_non_list_as_empty(responses):
    routes, _ = responses
    routes[ITEM_URL] = FakeResponse({"items": []})
    assert RegistryClient(RegistryConfig(url=ITEM_URL)).fetch() == []
