"""
Cache layer for GW2 API and wiki data using diskcache.

Provides persistent caching across invocations to minimize API calls and
wiki fetches. Every entry carries a TTL; nothing checks freshness beyond
expiry. Entries are tagged (api, wiki) for selective clearing.
"""

from pathlib import Path

from diskcache import Cache as DiskCache

from gw2_lookup.types import GW2Item, GW2Price, GW2Recipe, WikiSearchResult

WIKI_TTL = 86400
ITEM_TTL = 86400
RECIPE_TTL = 86400
PRICE_TTL = 5 * 60


class CacheClient:
    def __init__(self, cache_dir: Path):
        self._cache_dir = cache_dir
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        self._cache = DiskCache(str(self._cache_dir))

    def get_wiki_search(self, query: str, limit: int) -> list[WikiSearchResult] | None:
        return self._cache.get(f"wiki:search:{limit}:{query}")

    def set_wiki_search(self, query: str, limit: int, results: list[WikiSearchResult]) -> None:
        self._cache.set(f"wiki:search:{limit}:{query}", results, expire=WIKI_TTL, tag="wiki")

    def get_wiki_page(self, title: str) -> str | None:
        return self._cache.get(f"wiki:page:{title}")

    def set_wiki_page(self, title: str, wikitext: str) -> None:
        self._cache.set(f"wiki:page:{title}", wikitext, expire=WIKI_TTL, tag="wiki")

    def get_api_item(self, item_id: int) -> GW2Item | None:
        return self._cache.get(f"api:item:{item_id}")

    def set_api_item(self, item_id: int, data: GW2Item) -> None:
        self._cache.set(f"api:item:{item_id}", data, expire=ITEM_TTL, tag="api")

    def get_api_recipe(self, recipe_id: int) -> GW2Recipe | None:
        return self._cache.get(f"api:recipe:{recipe_id}")

    def set_api_recipe(self, recipe_id: int, data: GW2Recipe) -> None:
        self._cache.set(f"api:recipe:{recipe_id}", data, expire=RECIPE_TTL, tag="api")

    def get_api_recipes_search(self, item_id: int) -> list[int] | None:
        return self._cache.get(f"api:recipes_search:{item_id}")

    def set_api_recipes_search(self, item_id: int, recipe_ids: list[int]) -> None:
        self._cache.set(
            f"api:recipes_search:{item_id}", recipe_ids, expire=RECIPE_TTL, tag="api"
        )

    def get_api_price(self, item_id: int) -> GW2Price | None:
        return self._cache.get(f"api:price:{item_id}")

    def set_api_price(self, item_id: int, data: GW2Price) -> None:
        self._cache.set(f"api:price:{item_id}", data, expire=PRICE_TTL, tag="api")

    def clear_cache(self, tags: list[str] | None = None) -> None:
        if tags:
            for tag in tags:
                self._cache.evict(tag)
        else:
            self._cache.clear()
