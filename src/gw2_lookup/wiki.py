"""
GW2 Wiki client for searching pages and fetching their wikitext.

Wraps the GW2 Wiki MediaWiki API. Search results and page sources are
cached for a day to keep load on the wiki servers low.
"""

import html
import logging
import re
from typing import Any

import httpx

from gw2_lookup.cache import CacheClient
from gw2_lookup.config import get_settings
from gw2_lookup.exceptions import PageNotFoundError, WikiError
from gw2_lookup.types import WikiSearchResult

log = logging.getLogger(__name__)

WIKI_BASE_URL = "https://wiki.guildwars2.com"
_WIKI_API_URL = f"{WIKI_BASE_URL}/api.php"

_SEARCHMATCH_RE = re.compile(r'<span class="searchmatch">(.*?)</span>', re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")
_DISAMBIG_RE = re.compile(r"\{\{\s*disambig", re.IGNORECASE)


def page_url(title: str) -> str:
    return f"{WIKI_BASE_URL}/wiki/{title.replace(' ', '_')}"


def clean_snippet(snippet: str) -> str:
    cleaned = _SEARCHMATCH_RE.sub(r"\1", snippet)
    cleaned = _TAG_RE.sub("", cleaned)
    cleaned = html.unescape(cleaned)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def _get_json(params: dict[str, Any], what: str) -> dict[str, Any]:
    settings = get_settings()
    try:
        response = httpx.get(
            _WIKI_API_URL,
            params={**params, "format": "json"},
            headers={"User-Agent": settings.user_agent},
            timeout=settings.api_timeout,
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise WikiError(f"Failed to fetch {what}: HTTP {e.response.status_code}") from e
    except httpx.RequestError as e:
        raise WikiError(f"Network error fetching {what}: {e}") from e

    try:
        data: dict[str, Any] = response.json()
    except (ValueError, TypeError) as e:
        raise WikiError(f"Invalid JSON response for {what}") from e
    return data


def search(query: str, limit: int, cache: CacheClient) -> list[WikiSearchResult]:
    normalized = query.strip().lower()
    if not normalized:
        raise WikiError("Search query cannot be empty")

    cached = cache.get_wiki_search(normalized, limit)
    if cached is not None:
        log.info("Wiki search '%s': using cached results", query)
        return cached

    log.info("Wiki search '%s': querying wiki API", query)
    data = _get_json(
        {
            "action": "query",
            "list": "search",
            "srsearch": query,
            "srlimit": limit,
            "srprop": "size|wordcount|timestamp|snippet",
        },
        f"wiki search results for '{query}'",
    )

    if "error" in data:
        error_info = data["error"].get("info", "Unknown error")
        raise WikiError(f"Wiki search for '{query}' failed: {error_info}")

    try:
        hits = data["query"]["search"]
    except (KeyError, TypeError) as e:
        raise WikiError(f"Unexpected wiki search response format for '{query}'") from e

    results: list[WikiSearchResult] = [
        {
            "title": hit["title"],
            "snippet": clean_snippet(hit.get("snippet", "")),
            "pageid": hit.get("pageid", 0),
            "wordcount": hit.get("wordcount", 0),
            "size": hit.get("size", 0),
            "timestamp": hit.get("timestamp", ""),
        }
        for hit in hits
    ]
    cache.set_wiki_search(normalized, limit, results)
    return results


def _fetch_wikitext(title: str) -> str:
    data = _get_json(
        {"action": "parse", "page": title, "prop": "wikitext", "redirects": 1},
        f"wiki page '{title}'",
    )

    if "error" in data:
        if data["error"].get("code") == "missingtitle":
            raise PageNotFoundError(title)
        error_info = data["error"].get("info", "Unknown error")
        raise WikiError(f"Failed to fetch wiki page '{title}': {error_info}")

    try:
        return data["parse"]["wikitext"]["*"]
    except (KeyError, TypeError) as e:
        raise WikiError(f"Unexpected wiki API response format for '{title}'") from e


def _find_item_disambiguation(wikitext: str, title: str) -> str | None:
    if not _DISAMBIG_RE.search(wikitext):
        return None

    candidate = f"{title} (item)"
    pattern = rf"\[\[\s*{re.escape(candidate)}\s*(?:\||\]\])"
    if re.search(pattern, wikitext, re.IGNORECASE):
        log.warning(
            "Wiki page '%s' is a disambiguation page; redirecting to '%s'",
            title,
            candidate,
        )
        return candidate

    return None


def get_page_wikitext(title: str, cache: CacheClient) -> str:
    if not title or not title.strip():
        raise WikiError("Page title cannot be empty")

    cached = cache.get_wiki_page(title)
    if cached is not None:
        log.info("Wiki page '%s': using cached wikitext", title)
        return cached

    log.info("Wiki page '%s': fetching from wiki API", title)
    wikitext = _fetch_wikitext(title)

    redirect = _find_item_disambiguation(wikitext, title)
    if redirect:
        cached_redirect = cache.get_wiki_page(redirect)
        if cached_redirect is not None:
            log.info("Wiki page '%s': using cached wikitext", redirect)
            cache.set_wiki_page(title, cached_redirect)
            return cached_redirect

        wikitext = _fetch_wikitext(redirect)
        cache.set_wiki_page(redirect, wikitext)

    cache.set_wiki_page(title, wikitext)
    return wikitext
