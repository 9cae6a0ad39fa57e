"""
CLI script for looking up GW2 items by name.

Resolves a human-readable name through the GW2 wiki, then fetches the
matching data from the GW2 API:
1. Search the wiki and fetch the top page's wikitext
2. Read the item ID from the page infobox (or recipe IDs from its recipes)
3. Fetch item, recipe or trading post data from the GW2 API
"""

import argparse
import logging
import sys
from functools import partial

from gw2_lookup import api, resolver, terminal, wiki
from gw2_lookup.cache import CacheClient
from gw2_lookup.config import get_settings
from gw2_lookup.exceptions import APIError, NotFoundError, WikiError


def lookup_item(name: str, cache: CacheClient, overrides: dict[str, int], id_only: bool) -> None:
    if id_only:
        search, page_wikitext = resolver.wiki_collaborators(cache)
        resolved = resolver.resolve_item_id(name, search, page_wikitext, overrides)
        terminal.info(str(resolved.id))
        return

    item = resolver.get_item_by_name(name, cache, overrides)
    terminal.print_item(item)
    terminal.info(f"  {terminal.link(wiki.page_url(item['name']), 'View on Wiki')}")


def lookup_recipes(
    name: str, cache: CacheClient, overrides: dict[str, int], id_only: bool
) -> None:
    if id_only:
        search, page_wikitext = resolver.wiki_collaborators(cache)
        recipe_ids = resolver.resolve_recipe_ids(
            name,
            search,
            page_wikitext,
            partial(api.search_recipes_by_output, cache=cache),
            overrides,
        )
        terminal.info(" ".join(str(r) for r in recipe_ids))
        return

    terminal.print_recipes(resolver.get_recipes_by_name(name, cache, overrides))


def lookup_price(name: str, cache: CacheClient, overrides: dict[str, int]) -> None:
    price = resolver.get_price_by_name(name, cache, overrides)
    terminal.print_price(name, price)


def main() -> None:
    parser = argparse.ArgumentParser(description="Look up GW2 items and recipes by name")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--item", metavar="NAME", help="Show item details")
    group.add_argument("--recipes", metavar="NAME", help="Show recipes producing the item")
    group.add_argument("--price", metavar="NAME", help="Show trading post prices")
    group.add_argument(
        "--clear-cache",
        nargs="*",
        metavar="TAG",
        help="Clear cache (optionally specify tags: api, wiki)",
    )
    parser.add_argument(
        "--id-only",
        action="store_true",
        help="Print only the resolved ID(s) for --item or --recipes",
    )

    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(message)s",
    )
    cache = CacheClient(settings.cache_dir)

    if args.clear_cache is not None:
        tags = args.clear_cache if args.clear_cache else None
        cache.clear_cache(tags)
        tag_str = f" ({', '.join(tags)})" if tags else " (all)"
        terminal.success(f"Cache cleared{tag_str}")
        return

    try:
        overrides = api.load_name_overrides(settings.overrides_path)
        if args.item:
            lookup_item(args.item, cache, overrides, args.id_only)
        elif args.recipes:
            lookup_recipes(args.recipes, cache, overrides, args.id_only)
        else:
            lookup_price(args.price, cache, overrides)
    except NotFoundError as e:
        terminal.error(str(e))
        terminal.debug("Pin the name to an item ID in the name override file to skip the wiki")
        sys.exit(1)
    except (APIError, WikiError) as e:
        terminal.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
