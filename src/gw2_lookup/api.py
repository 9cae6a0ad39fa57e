"""
GW2 API client for fetching item, recipe and trading post data.

Wraps the official GW2 API (api.guildwars2.com/v2) with caching and
error handling. Game data is cached for a day, prices for a few minutes.
"""

import logging
import re
from pathlib import Path
from typing import Any

import httpx
import yaml

from gw2_lookup.cache import CacheClient
from gw2_lookup.config import get_settings
from gw2_lookup.exceptions import APIError
from gw2_lookup.types import GW2Item, GW2Price, GW2Recipe

log = logging.getLogger(__name__)

_BASE_URL = "https://api.guildwars2.com/v2"
_MAX_IDS_PER_REQUEST = 200


def _get(path: str, what: str, params: dict[str, Any] | None = None) -> Any:
    settings = get_settings()
    try:
        response = httpx.get(
            f"{_BASE_URL}{path}",
            params=params,
            headers={"User-Agent": settings.user_agent},
            timeout=settings.api_timeout,
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise APIError(f"Failed to fetch {what}: HTTP {e.response.status_code}") from e
    except httpx.RequestError as e:
        raise APIError(f"Network error fetching {what}: {e}") from e

    try:
        return response.json()
    except (ValueError, TypeError) as e:
        raise APIError(f"Invalid JSON response for {what}") from e


def _check_ids(ids: list[int], kind: str) -> None:
    invalid = [i for i in ids if i <= 0]
    if invalid:
        raise APIError(f"Invalid {kind} ID: {invalid[0]}")
    if len(ids) > _MAX_IDS_PER_REQUEST:
        raise APIError(f"Bulk fetch limited to {_MAX_IDS_PER_REQUEST} IDs, got {len(ids)}")


def _ids_param(ids: list[int]) -> str:
    return ",".join(str(i) for i in ids)


def get_items(item_ids: list[int], cache: CacheClient) -> dict[int, GW2Item]:
    _check_ids(item_ids, "item")

    items: dict[int, GW2Item] = {}
    missing: list[int] = []
    for item_id in dict.fromkeys(item_ids):
        cached = cache.get_api_item(item_id)
        if cached is not None:
            items[item_id] = cached
        else:
            missing.append(item_id)

    if not missing:
        log.info("Items %s: using cached API data", item_ids)
        return items

    log.info("Items %s: fetching from GW2 API", missing)
    fetched: list[GW2Item] = _get("/items", f"items {missing}", {"ids": _ids_param(missing)})
    for item in fetched:
        cache.set_api_item(item["id"], item)
        items[item["id"]] = item
    return items


def get_recipes(recipe_ids: list[int], cache: CacheClient) -> list[GW2Recipe]:
    _check_ids(recipe_ids, "recipe")

    recipes: dict[int, GW2Recipe] = {}
    missing: list[int] = []
    for recipe_id in dict.fromkeys(recipe_ids):
        cached = cache.get_api_recipe(recipe_id)
        if cached is not None:
            recipes[recipe_id] = cached
        else:
            missing.append(recipe_id)

    if missing:
        log.info("Recipes %s: fetching from GW2 API", missing)
        fetched: list[GW2Recipe] = _get(
            "/recipes", f"recipes {missing}", {"ids": _ids_param(missing)}
        )
        for recipe in fetched:
            cache.set_api_recipe(recipe["id"], recipe)
            recipes[recipe["id"]] = recipe
    else:
        log.info("Recipes %s: using cached API data", recipe_ids)

    return [recipes[r] for r in dict.fromkeys(recipe_ids) if r in recipes]


def search_recipes_by_output(item_id: int, cache: CacheClient) -> list[int]:
    if item_id <= 0:
        raise APIError(f"Invalid item ID: {item_id}")

    cached = cache.get_api_recipes_search(item_id)
    if cached is not None:
        log.info("Recipe search for item %d: using cached data", item_id)
        return cached

    log.info("Recipe search for item %d: fetching from GW2 API", item_id)
    recipe_ids: list[int] = _get(
        "/recipes/search", f"recipes for item {item_id}", {"output": item_id}
    )
    cache.set_api_recipes_search(item_id, recipe_ids)
    return recipe_ids


def get_prices(item_ids: list[int], cache: CacheClient) -> list[GW2Price]:
    _check_ids(item_ids, "item")

    prices: dict[int, GW2Price] = {}
    missing: list[int] = []
    for item_id in dict.fromkeys(item_ids):
        cached = cache.get_api_price(item_id)
        if cached is not None:
            prices[item_id] = cached
        else:
            missing.append(item_id)

    if missing:
        log.info("Prices %s: fetching from GW2 API", missing)
        try:
            fetched: list[GW2Price] = _get(
                "/commerce/prices", f"prices {missing}", {"ids": _ids_param(missing)}
            )
        except APIError as e:
            # the API answers 404 when none of the items are tradeable
            cause = e.__cause__
            if not (
                isinstance(cause, httpx.HTTPStatusError) and cause.response.status_code == 404
            ):
                raise
            log.info("Prices %s: not tradeable", missing)
            fetched = []
        for price in fetched:
            cache.set_api_price(price["id"], price)
            prices[price["id"]] = price

    return [prices[i] for i in dict.fromkeys(item_ids) if i in prices]


def clean_name(name: str) -> str:
    return re.sub(r"\s+", " ", name).strip()


def load_name_overrides(path: Path) -> dict[str, int]:
    if not path.exists():
        return {}

    try:
        with path.open() as f:
            overrides: dict[str, int] = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise APIError(f"Invalid name override file {path}: {e}") from e

    if not isinstance(overrides, dict):
        raise APIError(f"Name override file {path} must be a mapping of name to item ID")

    try:
        resolved = {clean_name(str(name)): int(item_id) for name, item_id in overrides.items()}
    except (TypeError, ValueError) as e:
        raise APIError(f"Name override file {path} has a non-numeric item ID: {e}") from e

    log.info("Loaded %d item name override(s) from %s", len(resolved), path)
    return resolved
