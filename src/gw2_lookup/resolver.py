"""
Name resolution: turn a human-readable item name into GW2 IDs.

The wiki is the name index. A name is searched on the wiki, the top-ranked
page's wikitext is fetched, and the item ID is read from the page infobox.
Recipe IDs come from the page's ``{{Recipe}}`` templates, falling back to the
GW2 API's recipe search by output item when the page lists none.

The core resolvers take their collaborators (wiki search, page fetch,
recipe search) as plain callables; the ``*_by_name`` helpers bind them to
the real clients through a ``CacheClient``.
"""

import logging
import re
from functools import partial

from gw2_lookup import api, wiki
from gw2_lookup.cache import CacheClient
from gw2_lookup.exceptions import (
    APIError,
    InvalidIDFieldError,
    ItemIDError,
    MissingIDFieldError,
    MissingInfoboxError,
    NotFoundError,
    PageNotFoundError,
)
from gw2_lookup.models import EnrichedRecipe, Ingredient, ItemRecipes
from gw2_lookup.types import (
    GW2Item,
    GW2Price,
    PageWikitextFn,
    RecipeSearchFn,
    ResolvedItem,
    SearchFn,
)
from gw2_lookup.wikitext import extract_infobox, extract_recipes

log = logging.getLogger(__name__)

# Only the top-ranked page is ever inspected.
SEARCH_LIMIT = 1

_ID_RE = re.compile(r"[0-9]+")


def _parse_id(value: str | None) -> int | None:
    if value is None or not _ID_RE.fullmatch(value):
        return None
    return int(value)


def find_top_page(name: str, search: SearchFn, page_wikitext: PageWikitextFn) -> tuple[str, str]:
    results = search(api.clean_name(name), SEARCH_LIMIT)
    if not results:
        raise NotFoundError(name, "no wiki search results")

    title = results[0]["title"]
    log.debug("Top wiki result for '%s': '%s'", name, title)
    try:
        return title, page_wikitext(title)
    except PageNotFoundError as e:
        raise NotFoundError(name, str(e)) from e


def extract_item_id(title: str, wikitext: str) -> int:
    infobox = extract_infobox(wikitext)
    if infobox is None:
        raise MissingInfoboxError(title)

    value = infobox.fields.get("id")
    if value is None:
        raise MissingIDFieldError(title)

    item_id = _parse_id(value)
    if item_id is None:
        raise InvalidIDFieldError(title, value)
    return item_id


def extract_recipe_ids(recipes: list[dict[str, str]]) -> list[int]:
    recipe_ids = []
    for recipe in recipes:
        recipe_id = _parse_id(recipe.get("id"))
        if recipe_id is None:
            log.debug("Skipping recipe without a usable id: %s", recipe)
            continue
        recipe_ids.append(recipe_id)
    return recipe_ids


def resolve_item_id(
    name: str,
    search: SearchFn,
    page_wikitext: PageWikitextFn,
    overrides: dict[str, int] | None = None,
) -> ResolvedItem:
    cleaned = api.clean_name(name)
    if not cleaned:
        raise NotFoundError(name, "name is empty")

    if overrides and cleaned in overrides:
        log.info("Resolved '%s' to item %d via override", cleaned, overrides[cleaned])
        return ResolvedItem(title=cleaned, id=overrides[cleaned])

    title, wikitext = find_top_page(name, search, page_wikitext)
    try:
        item_id = extract_item_id(title, wikitext)
    except ItemIDError as e:
        raise NotFoundError(name, str(e)) from e

    log.info("Resolved '%s' to item %d (wiki page '%s')", name, item_id, title)
    return ResolvedItem(title=title, id=item_id)


def _search_by_output(
    name: str, item_id: int, search_recipes_by_output: RecipeSearchFn
) -> list[int]:
    recipe_ids = search_recipes_by_output(item_id)
    if not recipe_ids:
        raise NotFoundError(name, f"no recipes produce item {item_id}")
    return recipe_ids


def _lookup_recipes(
    name: str,
    search: SearchFn,
    page_wikitext: PageWikitextFn,
    search_recipes_by_output: RecipeSearchFn,
    overrides: dict[str, int] | None = None,
) -> tuple[str, int | None, list[int]]:
    cleaned = api.clean_name(name)
    if not cleaned:
        raise NotFoundError(name, "name is empty")

    if overrides and cleaned in overrides:
        item_id = overrides[cleaned]
        log.info("Resolved '%s' to item %d via override", cleaned, item_id)
        return cleaned, item_id, _search_by_output(name, item_id, search_recipes_by_output)

    title, wikitext = find_top_page(name, search, page_wikitext)
    recipe_ids = extract_recipe_ids(extract_recipes(wikitext))
    if recipe_ids:
        log.info("Found %d recipe(s) for '%s' on wiki page '%s'", len(recipe_ids), name, title)
        try:
            return title, extract_item_id(title, wikitext), recipe_ids
        except ItemIDError:
            return title, None, recipe_ids

    try:
        item_id = extract_item_id(title, wikitext)
    except ItemIDError as e:
        raise NotFoundError(name, f"no recipes on wiki page and {e}") from e

    log.warning(
        "No recipes on wiki page '%s'; searching GW2 API for recipes producing item %d",
        title,
        item_id,
    )
    return title, item_id, _search_by_output(name, item_id, search_recipes_by_output)


def resolve_recipe_ids(
    name: str,
    search: SearchFn,
    page_wikitext: PageWikitextFn,
    search_recipes_by_output: RecipeSearchFn,
    overrides: dict[str, int] | None = None,
) -> list[int]:
    """
    Resolve a name to the IDs of recipes that produce it.

    A name pinned in ``overrides`` skips the wiki and goes straight to the
    GW2 API recipe search for the pinned item.
    """
    _, _, recipe_ids = _lookup_recipes(
        name, search, page_wikitext, search_recipes_by_output, overrides
    )
    return recipe_ids


def wiki_collaborators(cache: CacheClient) -> tuple[SearchFn, PageWikitextFn]:
    return partial(wiki.search, cache=cache), partial(wiki.get_page_wikitext, cache=cache)


def get_item_by_name(
    name: str, cache: CacheClient, overrides: dict[str, int] | None = None
) -> GW2Item:
    search, page_wikitext = wiki_collaborators(cache)
    resolved = resolve_item_id(name, search, page_wikitext, overrides)

    items = api.get_items([resolved.id], cache=cache)
    item = items.get(resolved.id)
    if item is None:
        raise NotFoundError(name, f"item {resolved.id} not found in GW2 API")
    return item


def get_price_by_name(
    name: str, cache: CacheClient, overrides: dict[str, int] | None = None
) -> GW2Price:
    search, page_wikitext = wiki_collaborators(cache)
    resolved = resolve_item_id(name, search, page_wikitext, overrides)

    prices = api.get_prices([resolved.id], cache=cache)
    if not prices:
        raise NotFoundError(name, f"no trading post data for item {resolved.id}")
    return prices[0]


def get_recipes_by_name(
    name: str, cache: CacheClient, overrides: dict[str, int] | None = None
) -> ItemRecipes:
    search, page_wikitext = wiki_collaborators(cache)
    title, item_id, recipe_ids = _lookup_recipes(
        name,
        search,
        page_wikitext,
        partial(api.search_recipes_by_output, cache=cache),
        overrides,
    )

    recipes = api.get_recipes(recipe_ids, cache=cache)

    item_ids = sorted(
        {r["output_item_id"] for r in recipes}
        | {ing["item_id"] for r in recipes for ing in r["ingredients"]}
    )
    try:
        items = api.get_items(item_ids, cache=cache) if item_ids else {}
    except APIError as e:
        log.warning("Failed to resolve item names for recipes of '%s': %s", name, e)
        items = {}

    def item_name(item_id: int) -> str | None:
        item = items.get(item_id)
        return item["name"] if item else None

    enriched = [
        EnrichedRecipe(
            id=r["id"],
            type=r["type"],
            output_item_id=r["output_item_id"],
            output_item_count=r["output_item_count"],
            output_item_name=item_name(r["output_item_id"]),
            min_rating=r["min_rating"],
            disciplines=r["disciplines"],
            ingredients=[
                Ingredient(
                    item_id=ing["item_id"], count=ing["count"], name=item_name(ing["item_id"])
                )
                for ing in r["ingredients"]
            ],
            flags=r.get("flags", []),
        )
        for r in recipes
    ]

    return ItemRecipes(
        item_name=title,
        item_id=item_id,
        wiki_url=wiki.page_url(title),
        recipes=enriched,
    )
