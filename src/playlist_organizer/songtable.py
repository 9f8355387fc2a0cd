"""Song table: which of the selected playlists contain each cached track."""

from collections.abc import Sequence

from playlist_organizer.cache import APICache, SongTable


def build_song_table(api_cache: APICache, selected_ids: Sequence[str]) -> SongTable:
    """Compute ``{track_key: {playlist_id: present}}`` over *selected_ids*.

    Every row has exactly one cell per selected playlist. Only cached items
    are considered, so a partially cached playlist yields a partial column.
    Items without a track are skipped.
    """
    table: SongTable = {}
    for playlist_id in selected_ids:
        for item in api_cache.get_playlist_items(playlist_id):
            key = item.key
            if key is None:
                continue
            row = table.get(key)
            if row is None:
                row = dict.fromkeys(selected_ids, False)
                table[key] = row
            row[playlist_id] = True
    return table


def format_song_table(table: SongTable, api_cache: APICache, selected_ids: Sequence[str]) -> str:
    """Render *table* as fixed-width text: one row per track, one ``x`` column per playlist."""
    headers = ["Track"] + [_playlist_label(api_cache, pid) for pid in selected_ids]
    rows: list[list[str]] = []
    for key, cells in table.items():
        item = api_cache.get_track(key)
        name = item.track.name if item is not None and item.track is not None else key
        rows.append([name] + ["x" if cells.get(pid) else "" for pid in selected_ids])

    table_rows = [headers, *rows]
    widths = [max(len(row[col]) for row in table_rows) for col in range(len(headers))]
    lines = ["  ".join(cell.ljust(width) for cell, width in zip(row, widths, strict=True)) for row in table_rows]
    return "\n".join(line.rstrip() for line in lines)


def _playlist_label(api_cache: APICache, playlist_id: str) -> str:
    playlist = api_cache.get_playlist(playlist_id)
    return playlist.name if playlist is not None else playlist_id
