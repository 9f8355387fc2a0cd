"""Tests for song table building and rendering."""

from factories import make_item_json, make_playlist_json

from playlist_organizer.cache import APICache
from playlist_organizer.songtable import build_song_table, format_song_table
from playlist_organizer.spotify.models import PlaylistItem, PlaylistsPage


def _cache(**playlists: list[str]) -> APICache:
    cache = APICache()
    for playlist_id, track_ids in playlists.items():
        items = [PlaylistItem.model_validate(make_item_json(track_id)) for track_id in track_ids]
        cache.extend_playlist_items(playlist_id, 0, items, total=len(items))
    return cache


def test_presence_matrix() -> None:
    """Each track row marks the selected playlists that contain it."""
    cache = _cache(P1=["A", "B"], P2=["B", "C"])
    assert build_song_table(cache, ["P1", "P2"]) == {
        "A": {"P1": True, "P2": False},
        "B": {"P1": True, "P2": True},
        "C": {"P1": False, "P2": True},
    }


def test_only_selected_playlists_are_columns() -> None:
    """Cached but unselected playlists do not appear."""
    cache = _cache(P1=["A"], P2=["B"], P3=["A"])
    assert build_song_table(cache, ["P1", "P3"]) == {"A": {"P1": True, "P3": True}}


def test_uncached_selected_playlist_is_all_false_column() -> None:
    """A selected playlist with no cached items gets an all-False column."""
    cache = _cache(P1=["A"])
    assert build_song_table(cache, ["P1", "P2"]) == {"A": {"P1": True, "P2": False}}


def test_duplicate_track_in_one_playlist() -> None:
    """A track listed twice in one playlist yields one row."""
    cache = _cache(P1=["A", "A"])
    assert build_song_table(cache, ["P1"]) == {"A": {"P1": True}}


def test_removed_tracks_are_skipped() -> None:
    """Items whose track was removed are left out."""
    cache = APICache()
    items = [PlaylistItem.model_validate({"track": None}), PlaylistItem.model_validate(make_item_json("A"))]
    cache.extend_playlist_items("P1", 0, items, total=2)
    assert build_song_table(cache, ["P1"]) == {"A": {"P1": True}}


def test_empty_selection() -> None:
    """No selection, no rows."""
    assert build_song_table(_cache(P1=["A"]), []) == {}


def test_format_song_table() -> None:
    """Rendered table has a header row and an x per containing playlist."""
    cache = _cache(P1=["A", "B"], P2=["B"])
    cache.store_playlists(PlaylistsPage.model_validate({"items": [make_playlist_json("P1", "Road trip")]}))
    table = build_song_table(cache, ["P1", "P2"])

    lines = format_song_table(table, cache, ["P1", "P2"]).splitlines()

    assert lines[0].split() == ["Track", "Road", "trip", "P2"]
    assert lines[1].startswith("Track A")
    assert lines[1].split() == ["Track", "A", "x"]
    assert lines[2].split() == ["Track", "B", "x", "x"]
    assert all(line == line.rstrip() for line in lines)
