"""
Type definitions for GW2 API and wiki API responses.

Provides TypedDict structures matching the GW2 API and MediaWiki search
schemas to enable strict type checking and better IDE support.
"""

from collections.abc import Callable
from typing import NamedTuple, NotRequired, TypedDict


class WikiSearchResult(TypedDict):
    title: str
    snippet: str
    pageid: int
    wordcount: int
    size: int
    timestamp: str


class GW2Item(TypedDict):
    id: int
    name: str
    type: str
    rarity: str
    level: int
    vendor_value: NotRequired[int]
    icon: NotRequired[str]
    description: NotRequired[str]
    flags: NotRequired[list[str]]


class RecipeIngredient(TypedDict):
    item_id: int
    count: int


class GW2Recipe(TypedDict):
    id: int
    type: str
    output_item_id: int
    output_item_count: int
    min_rating: int
    disciplines: list[str]
    ingredients: list[RecipeIngredient]
    flags: NotRequired[list[str]]


class PriceQuote(TypedDict):
    quantity: int
    unit_price: int


class GW2Price(TypedDict):
    id: int
    whitelisted: bool
    buys: PriceQuote
    sells: PriceQuote


class ResolvedItem(NamedTuple):
    title: str
    id: int


SearchFn = Callable[[str, int], list[WikiSearchResult]]
PageWikitextFn = Callable[[str], str]
RecipeSearchFn = Callable[[int], list[int]]
