"""Tests for cache module."""

from pathlib import Path

import pytest

from gw2_lookup.cache import ITEM_TTL, PRICE_TTL, WIKI_TTL, CacheClient


@pytest.fixture
def cache_client(tmp_path: Path) -> CacheClient:
    return CacheClient(tmp_path / "test_cache")


def test_cache_client_creates_directory(tmp_path: Path):
    test_cache_dir = tmp_path / "test_cache"

    CacheClient(test_cache_dir)

    assert test_cache_dir.exists()


def test_api_item_cache_roundtrip(cache_client: CacheClient):
    item_data = {
        "id": 123,
        "name": "Test Item",
        "type": "Weapon",
        "rarity": "Exotic",
        "level": 80,
    }

    cache_client.set_api_item(123, item_data)
    result = cache_client.get_api_item(123)

    assert result == item_data


def test_api_item_cache_miss(cache_client: CacheClient):
    result = cache_client.get_api_item(999999)

    assert result is None


def test_api_recipe_cache_roundtrip(cache_client: CacheClient):
    recipe_data = {
        "id": 456,
        "type": "Refinement",
        "output_item_id": 123,
        "output_item_count": 1,
        "min_rating": 400,
        "disciplines": ["Weaponsmith"],
        "ingredients": [{"item_id": 789, "count": 5}],
    }

    cache_client.set_api_recipe(456, recipe_data)
    result = cache_client.get_api_recipe(456)

    assert result == recipe_data


def test_api_recipes_search_cache_roundtrip(cache_client: CacheClient):
    recipe_ids = [1, 2, 3, 4, 5]

    cache_client.set_api_recipes_search(123, recipe_ids)
    result = cache_client.get_api_recipes_search(123)

    assert result == recipe_ids


def test_wiki_page_cache_roundtrip(cache_client: CacheClient):
    wikitext = "{{Infobox currency\n| id = 19976\n}}"

    cache_client.set_wiki_page("Mystic Coin", wikitext)
    result = cache_client.get_wiki_page("Mystic Coin")

    assert result == wikitext


def test_wiki_search_cache_keyed_by_limit(cache_client: CacheClient):
    results = [
        {
            "title": "Mystic Coin",
            "snippet": "",
            "pageid": 1,
            "wordcount": 10,
            "size": 100,
            "timestamp": "",
        }
    ]

    cache_client.set_wiki_search("mystic coin", 1, results)

    assert cache_client.get_wiki_search("mystic coin", 1) == results
    assert cache_client.get_wiki_search("mystic coin", 5) is None


def test_entries_expire(cache_client: CacheClient):
    cache_client.set_wiki_page("Page", "content")
    cache_client.set_api_item(1, {"id": 1})
    cache_client.set_api_price(1, {"id": 1})

    _, wiki_expiry = cache_client._cache.get("wiki:page:Page", expire_time=True)
    _, item_expiry = cache_client._cache.get("api:item:1", expire_time=True)
    _, price_expiry = cache_client._cache.get("api:price:1", expire_time=True)

    assert wiki_expiry is not None
    assert item_expiry is not None
    assert price_expiry is not None
    assert price_expiry < item_expiry
    assert PRICE_TTL < ITEM_TTL == WIKI_TTL


def test_clear_cache_by_tag(cache_client: CacheClient):
    item_data = {
        "id": 1,
        "name": "API Item",
        "type": "Weapon",
        "rarity": "Fine",
        "level": 1,
    }
    cache_client.set_api_item(1, item_data)
    cache_client.set_wiki_page("Wiki Page", "content")

    cache_client.clear_cache(["api"])

    assert cache_client.get_api_item(1) is None
    assert cache_client.get_wiki_page("Wiki Page") == "content"


def test_clear_cache_all(cache_client: CacheClient):
    item_data = {
        "id": 1,
        "name": "API Item",
        "type": "Weapon",
        "rarity": "Fine",
        "level": 1,
    }
    cache_client.set_api_item(1, item_data)
    cache_client.set_wiki_page("Wiki Page", "content")

    cache_client.clear_cache()

    assert cache_client.get_api_item(1) is None
    assert cache_client.get_wiki_page("Wiki Page") is None
