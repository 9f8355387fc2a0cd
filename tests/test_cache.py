"""Tests for the session caches."""

from factories import make_item_json, make_playlist_json

from playlist_organizer.cache import APICache, SelectionStore, SpotifySession
from playlist_organizer.spotify.models import PlaylistItem, PlaylistsPage


def _items(*track_ids: str) -> list[PlaylistItem]:
    return [PlaylistItem.model_validate(make_item_json(track_id)) for track_id in track_ids]


def test_store_playlists_indexes_by_id() -> None:
    """Stored playlists are reachable by id."""
    cache = APICache()
    page = PlaylistsPage.model_validate({"items": [make_playlist_json("p1", total=4)], "total": 1})
    cache.store_playlists(page)
    assert cache.playlists is page
    assert cache.get_playlist("p1") is page.items[0]
    assert cache.known_total("p1") == 4
    assert cache.is_complete("p1") is False


def test_unknown_playlist() -> None:
    cache = APICache()
    assert cache.known_total("p1") is None
    assert cache.is_complete("p1") is False
    assert cache.cached_count("p1") == 0
    assert cache.get_playlist_items("p1") == []


def test_extend_appends_contiguous_pages() -> None:
    """Pages starting at the current length are appended in order."""
    cache = APICache()
    cache.extend_playlist_items("p1", 0, _items("a", "b"), total=3)
    assert cache.is_complete("p1") is False
    cache.extend_playlist_items("p1", 2, _items("c"), total=3)
    assert [item.key for item in cache.get_playlist_items("p1")] == ["a", "b", "c"]
    assert cache.is_complete("p1") is True


def test_extend_skips_non_contiguous_page() -> None:
    """A page that does not start at the end of the list is indexed but not appended."""
    cache = APICache()
    cache.extend_playlist_items("p1", 50, _items("z"), total=60)
    assert cache.cached_count("p1") == 0
    assert cache.get_track("z") is not None


def test_fetched_total_overrides_summary() -> None:
    """A total from a fetched page wins over the playlist summary."""
    cache = APICache()
    cache.store_playlists(PlaylistsPage.model_validate({"items": [make_playlist_json("p1", total=10)]}))
    cache.extend_playlist_items("p1", 0, _items("a"), total=1)
    assert cache.known_total("p1") == 1
    assert cache.is_complete("p1") is True


def test_track_map_last_write_wins() -> None:
    """A track seen in two playlists keeps the latest item."""
    cache = APICache()
    first = _items("a")
    second = _items("a")
    cache.extend_playlist_items("p1", 0, first, total=1)
    cache.extend_playlist_items("p2", 0, second, total=1)
    assert cache.get_track("a") is second[0]


def test_selection_save_replaces_and_dedupes() -> None:
    """Saving replaces the whole selection, dropping duplicates."""
    selection = SelectionStore()
    assert selection.selected_ids == ()
    selection.save(["p1", "p2", "p1"])
    assert selection.selected_ids == ("p1", "p2")
    assert selection.is_selected("p2")
    selection.save(["p3"])
    assert selection.selected_ids == ("p3",)
    assert not selection.is_selected("p1")


def test_sessions_do_not_share_state() -> None:
    """Each session starts with its own empty caches."""
    first, second = SpotifySession(), SpotifySession()
    first.selection.save(["p1"])
    first.song_table["a"] = {"p1": True}
    assert second.selection.selected_ids == ()
    assert second.song_table == {}
    assert first.api_cache is not second.api_cache
