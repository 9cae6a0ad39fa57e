"""Tests for the lookup CLI script."""

from pathlib import Path

import pytest

from gw2_lookup.cache import CacheClient
from gw2_lookup.config import reload_settings
from gw2_lookup.exceptions import NotFoundError, WikiError

MYSTIC_COIN_PAGE = "{{Infobox currency | id = 19976 | name = Mystic Coin}}"


@pytest.fixture
def settings_env(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("GW2_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("GW2_OVERRIDES_PATH", str(tmp_path / "overrides.yaml"))
    reload_settings()
    yield tmp_path
    monkeypatch.undo()
    reload_settings()


def _patch_wiki(mocker):
    mocker.patch(
        "gw2_lookup.wiki.search",
        return_value=[
            {
                "title": "Mystic Coin",
                "snippet": "",
                "pageid": 1,
                "wordcount": 10,
                "size": 100,
                "timestamp": "",
            }
        ],
    )
    mocker.patch("gw2_lookup.wiki.get_page_wikitext", return_value=MYSTIC_COIN_PAGE)


def test_lookup_item_id_only(mocker, tmp_path: Path, capsys):
    from scripts import lookup

    _patch_wiki(mocker)
    mock_items = mocker.patch("gw2_lookup.api.get_items")

    lookup.lookup_item("Mystic Coin", CacheClient(tmp_path / "cache"), {}, id_only=True)

    assert capsys.readouterr().out.strip() == "19976"
    mock_items.assert_not_called()


def test_lookup_recipes_id_only(mocker, tmp_path: Path, capsys):
    from scripts import lookup

    _patch_wiki(mocker)
    mocker.patch("gw2_lookup.api.search_recipes_by_output", return_value=[13263, 13264])

    lookup.lookup_recipes("Mystic Coin", CacheClient(tmp_path / "cache"), {}, id_only=True)

    assert capsys.readouterr().out.strip() == "13263 13264"


def test_main_item(mocker, monkeypatch, settings_env: Path, capsys):
    from scripts import lookup

    item = {"id": 19976, "name": "Mystic Coin", "type": "Trophy", "rarity": "Rare", "level": 0}
    mocker.patch("gw2_lookup.resolver.get_item_by_name", return_value=item)
    monkeypatch.setattr("sys.argv", ["lookup.py", "--item", "Mystic Coin"])

    lookup.main()

    out = capsys.readouterr().out
    assert "Mystic Coin (ID: 19976)" in out
    assert "https://wiki.guildwars2.com/wiki/Mystic_Coin" in out


def test_main_uses_name_overrides(mocker, monkeypatch, settings_env: Path, capsys):
    from scripts import lookup

    (settings_env / "overrides.yaml").write_text("Mystic Coin: 19976\n")
    mock_search = mocker.patch("gw2_lookup.wiki.search")
    monkeypatch.setattr("sys.argv", ["lookup.py", "--item", "Mystic Coin", "--id-only"])

    lookup.main()

    assert capsys.readouterr().out.strip() == "19976"
    mock_search.assert_not_called()


def test_main_recipes_use_name_overrides(mocker, monkeypatch, settings_env: Path, capsys):
    from scripts import lookup

    (settings_env / "overrides.yaml").write_text("Odd Thing: 123\n")
    mock_search = mocker.patch("gw2_lookup.wiki.search")
    mock_by_output = mocker.patch("gw2_lookup.api.search_recipes_by_output", return_value=[77])
    monkeypatch.setattr("sys.argv", ["lookup.py", "--recipes", "Odd Thing", "--id-only"])

    lookup.main()

    assert capsys.readouterr().out.strip() == "77"
    mock_search.assert_not_called()
    assert mock_by_output.call_args.args == (123,)


def test_main_bad_override_file_exits_nonzero(monkeypatch, settings_env: Path, capsys):
    from scripts import lookup

    (settings_env / "overrides.yaml").write_text("Foo: bar\n")
    monkeypatch.setattr("sys.argv", ["lookup.py", "--item", "Foo"])

    with pytest.raises(SystemExit) as exc_info:
        lookup.main()

    assert exc_info.value.code == 1
    assert "non-numeric item ID" in capsys.readouterr().err


def test_main_not_found_exits_nonzero(mocker, monkeypatch, settings_env: Path, capsys):
    from scripts import lookup

    mocker.patch(
        "gw2_lookup.resolver.get_price_by_name",
        side_effect=NotFoundError("zzzz", "no wiki search results"),
    )
    monkeypatch.setattr("sys.argv", ["lookup.py", "--price", "zzzz"])

    with pytest.raises(SystemExit) as exc_info:
        lookup.main()

    assert exc_info.value.code == 1
    assert "Nothing found for 'zzzz'" in capsys.readouterr().err


def test_main_wiki_error_exits_nonzero(mocker, monkeypatch, settings_env: Path, capsys):
    from scripts import lookup

    mocker.patch(
        "gw2_lookup.resolver.get_recipes_by_name",
        side_effect=WikiError("Network error fetching wiki search results"),
    )
    monkeypatch.setattr("sys.argv", ["lookup.py", "--recipes", "Bolt"])

    with pytest.raises(SystemExit) as exc_info:
        lookup.main()

    assert exc_info.value.code == 1
    assert "Network error" in capsys.readouterr().err


def test_main_clear_cache(monkeypatch, settings_env: Path, capsys):
    from scripts import lookup

    cache = CacheClient(settings_env / "cache")
    cache.set_wiki_page("Mystic Coin", MYSTIC_COIN_PAGE)
    cache.set_api_item(19976, {"id": 19976})
    monkeypatch.setattr("sys.argv", ["lookup.py", "--clear-cache", "wiki"])

    lookup.main()

    assert "Cache cleared (wiki)" in capsys.readouterr().out
    assert cache.get_wiki_page("Mystic Coin") is None
    assert cache.get_api_item(19976) == {"id": 19976}
