"""
Template extraction from raw MediaWiki wikitext.

Covers the markup GW2 wiki item pages actually use: ``{{Name | key = value}}``
templates with arbitrary nesting, ``[[target]]`` / ``[[target|label]]`` links
and ``'''bold'''`` / ``''italic''`` emphasis. Tables, parser functions and
switch templates are not understood.

Nothing in this module raises on malformed input. Unbalanced braces, unknown
templates and empty bodies all degrade to ``None`` or an empty result.
"""

import logging
import re
from collections.abc import Callable
from typing import NamedTuple

log = logging.getLogger(__name__)

_BRACES_RE = re.compile(r"\{\{|\}\}")
_PARAM_TOKEN_RE = re.compile(r"\{\{|\}\}|\[\[|\]\]|\||\n")
_TEMPLATE_NAME_RE = re.compile(r"\s*([^|\n]*?)\s*(?:\||\n|\}\}|$)")

# Piped links must go before simple links and bold before italic: the
# simpler patterns also match inside the longer ones.
_PIPED_LINK_RE = re.compile(r"\[\[[^\]|]+\|([^\]]+)\]\]")
_SIMPLE_LINK_RE = re.compile(r"\[\[([^\]]+)\]\]")
_BOLD_RE = re.compile(r"'''(.+?)'''")
_ITALIC_RE = re.compile(r"''(.+?)''")


class TemplateMatch(NamedTuple):
    name: str
    start: int
    end: int
    depth: int
    body: str


class Infobox(NamedTuple):
    type: str
    fields: dict[str, str]


def is_infobox_name(name: str) -> bool:
    return "infobox" in name


def is_recipe_name(name: str) -> bool:
    return name == "recipe"


def _clean_once(value: str) -> str:
    value = _PIPED_LINK_RE.sub(r"\1", value)
    value = _SIMPLE_LINK_RE.sub(r"\1", value)
    value = _BOLD_RE.sub(r"\1", value)
    value = _ITALIC_RE.sub(r"\1", value)
    return value.strip()


def clean_markup(value: str) -> str:
    """
    Strip links and emphasis from a field value, leaving plain text.

    ``[[Dragonite Ingot|dragonite ingots]]`` becomes ``dragonite ingots``,
    ``[[Eternity]]`` and ``'''Eternity'''`` both become ``Eternity``.

    Passes repeat until nothing changes, so markup uncovered by one pass
    (``[[[[x]]]]``) is removed too and the result is stable under a second
    call.
    """
    while True:
        cleaned = _clean_once(value)
        if cleaned == value:
            return cleaned
        value = cleaned


def _template_name(doc: str, open_at: int) -> str:
    match = _TEMPLATE_NAME_RE.match(doc, open_at + 2)
    if match is None:
        return ""
    return match.group(1).strip().lower()


def _find_closing(doc: str, body_start: int) -> int | None:
    depth = 1
    for token in _BRACES_RE.finditer(doc, body_start):
        if token.group() == "{{":
            depth += 1
        else:
            depth -= 1
            if depth == 0:
                return token.start()
    return None


def _depth_at(doc: str, pos: int) -> int:
    depth = 0
    for token in _BRACES_RE.finditer(doc, 0, pos):
        if token.group() == "{{":
            depth += 1
        elif depth > 0:
            depth -= 1
    return depth


def find_template(
    doc: str, predicate: Callable[[str], bool], search_from: int = 0
) -> TemplateMatch | None:
    """
    Find the first template at or after ``search_from`` whose name satisfies
    ``predicate`` and return it with its balanced body.

    The name is the lowercased text between ``{{`` and the first ``|``,
    newline or ``}}``. After a candidate fails the predicate, scanning resumes
    one character later, so overlapping braces (``{{{Recipe``) and templates
    nested inside the candidate are still seen.
    Returns ``None`` when no template matches or the matching one is never
    closed.
    """
    pos = doc.find("{{", max(search_from, 0))
    while pos >= 0:
        name = _template_name(doc, pos)
        if predicate(name):
            close = _find_closing(doc, pos + 2)
            if close is None:
                log.debug("Template '%s' at offset %d is never closed", name, pos)
                return None
            return TemplateMatch(
                name=name,
                start=pos,
                end=close + 2,
                depth=_depth_at(doc, pos),
                body=doc[pos + 2 : close],
            )
        pos = doc.find("{{", pos + 1)
    return None


def _split_params(body: str) -> list[str]:
    params = []
    template_depth = 0
    link_depth = 0
    line_start: int | None = None
    param_start: int | None = None
    for token in _PARAM_TOKEN_RE.finditer(body):
        text = token.group()
        if text == "{{":
            template_depth += 1
        elif text == "}}":
            template_depth = max(template_depth - 1, 0)
        elif text == "[[":
            link_depth += 1
        elif text == "]]":
            link_depth = max(link_depth - 1, 0)
        elif text == "\n":
            # links never span lines
            link_depth = 0
            line_start = token.end()
        elif template_depth or link_depth:
            continue
        elif line_start is None or not body[line_start : token.start()].strip():
            # past the name line, only a pipe that opens its line separates
            if param_start is not None:
                params.append(body[param_start : token.start()])
            param_start = token.end()
    if param_start is not None:
        params.append(body[param_start:])
    return params


def parse_fields(body: str) -> dict[str, str]:
    """
    Parse ``| key = value`` parameters out of a template body.

    Parameters are separated by ``|`` outside nested templates and links.
    On the template's name line every such pipe separates, which covers
    single-line calls; on later lines only a pipe that starts the line does,
    so ``| note = red | blue`` keeps ``red | blue`` as its value. Text before
    the first separator is the template name and is dropped. Only the first
    line of a value counts. Positional parameters, empty keys
    and values that are themselves template calls are skipped. A repeated
    key keeps its last value.
    """
    fields: dict[str, str] = {}
    for param in _split_params(body):
        key, sep, value = param.partition("=")
        if not sep:
            continue
        key = key.strip()
        value = value.split("\n", 1)[0].strip()
        if not key:
            continue
        if value.startswith("{{"):
            continue
        fields[key] = clean_markup(value)
    return fields


def extract_infobox(doc: str) -> Infobox | None:
    match = find_template(doc, is_infobox_name)
    if match is None:
        return None

    fields = parse_fields(match.body)
    if not fields:
        log.debug("Infobox '%s' has no fields", match.name)
        return None

    infobox_type = match.name.replace("infobox", "").strip()
    return Infobox(type=infobox_type, fields=fields)


def extract_recipes(doc: str) -> list[dict[str, str]]:
    recipes = []
    search_from = 0
    while True:
        match = find_template(doc, is_recipe_name, search_from)
        if match is None:
            break
        search_from = match.end
        fields = parse_fields(match.body)
        if fields:
            recipes.append(fields)
    return recipes
