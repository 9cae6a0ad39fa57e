"""
Terminal output formatting for the lookup CLI, with ANSI color support.

Colors are only emitted when stdout is a TTY, so piped output stays plain.
"""

import sys
from enum import Enum

from gw2_lookup.models import ItemRecipes
from gw2_lookup.types import GW2Item, GW2Price


class Color(Enum):
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    BRIGHT_BLACK = "\033[90m"
    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_BLUE = "\033[94m"
    BRIGHT_CYAN = "\033[96m"
    BRIGHT_WHITE = "\033[97m"


_RARITY_COLORS = {
    "Junk": Color.BRIGHT_BLACK,
    "Fine": Color.BRIGHT_BLUE,
    "Masterwork": Color.BRIGHT_GREEN,
    "Rare": Color.BRIGHT_YELLOW,
    "Exotic": Color.BRIGHT_YELLOW,
    "Ascended": Color.BRIGHT_RED,
}


def _supports_color() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def colorize(text: str, *colors: Color) -> str:
    if not _supports_color():
        return text
    prefix = "".join(c.value for c in colors)
    return f"{prefix}{text}{Color.RESET.value}"


def format_coins(copper: int) -> str:
    gold, rest = divmod(copper, 10000)
    silver, cop = divmod(rest, 100)
    parts = []
    if gold > 0:
        parts.append(f"{gold}g")
    if silver > 0 or gold > 0:
        parts.append(f"{silver}s")
    parts.append(f"{cop}c")
    return " ".join(parts)


def info(message: str) -> None:
    print(message)


def debug(message: str) -> None:
    print(colorize(message, Color.DIM, Color.BRIGHT_BLACK))


def success(message: str) -> None:
    print(colorize(message, Color.BRIGHT_GREEN))


def error(message: str) -> None:
    print(colorize(f"✗ {message}", Color.BRIGHT_RED), file=sys.stderr)


def section_header(title: str) -> None:
    separator = "=" * 60
    print(f"\n{colorize(separator, Color.BRIGHT_BLUE)}")
    print(colorize(title, Color.BOLD, Color.BRIGHT_CYAN))
    print(colorize(separator, Color.BRIGHT_BLUE))


def key_value(key: str, value: str, indent: int = 0) -> None:
    spaces = " " * indent
    colored_key = colorize(f"{key}:", Color.BRIGHT_WHITE)
    print(f"{spaces}{colored_key} {value}")


def bullet(message: str, indent: int = 2, symbol: str = "•") -> None:
    spaces = " " * indent
    print(f"{spaces}{colorize(symbol, Color.BRIGHT_BLUE)} {message}")


def link(url: str, label: str | None = None) -> str:
    display = label or url
    if _supports_color():
        colored_text = colorize(display, Color.BRIGHT_CYAN, Color.BOLD)
        return f"\033]8;;{url}\033\\{colored_text}\033]8;;\033\\"
    return f"{display} ({url})"


def print_item(item: GW2Item) -> None:
    rarity = item["rarity"]
    rarity_color = _RARITY_COLORS.get(rarity, Color.BRIGHT_WHITE)
    section_header(f"{item['name']} (ID: {item['id']})")
    key_value("Type", item["type"], indent=2)
    key_value("Rarity", colorize(rarity, rarity_color), indent=2)
    key_value("Level", str(item["level"]), indent=2)
    if "vendor_value" in item:
        key_value("Vendor value", format_coins(item["vendor_value"]), indent=2)
    if item.get("description"):
        key_value("Description", item["description"], indent=2)


def print_price(name: str, price: GW2Price) -> None:
    section_header(f"{name} (ID: {price['id']})")
    buys = price["buys"]
    sells = price["sells"]
    buy_price = format_coins(buys["unit_price"])
    sell_price = format_coins(sells["unit_price"])
    key_value("Buy", f"{buy_price} ({buys['quantity']:,} orders)", indent=2)
    key_value("Sell", f"{sell_price} ({sells['quantity']:,} listings)", indent=2)


def print_recipes(result: ItemRecipes) -> None:
    id_label = f" (ID: {result.item_id})" if result.item_id is not None else ""
    section_header(f"Recipes for {result.item_name}{id_label}")
    if result.wiki_url:
        info(f"  {link(result.wiki_url, 'View on Wiki')}")

    for recipe in result.recipes:
        output = recipe.output_item_name or f"item {recipe.output_item_id}"
        disciplines = ", ".join(recipe.disciplines) or "none"
        print()
        key_value(f"Recipe {recipe.id}", f"{recipe.output_item_count} x {output}", indent=2)
        debug(f"    {recipe.type} | {disciplines} | rating {recipe.min_rating}")
        for ingredient in recipe.ingredients:
            label = ingredient.name or f"item {ingredient.item_id}"
            bullet(f"{ingredient.count} x {label}", indent=4)
