"""Console entry point: sign in, cache the selected playlists and print the song table."""

import asyncio
import logging

import click
from pydantic import ValidationError

from playlist_organizer.auth.storage import InMemoryStorage, JSONFileStorage, KeyValueStorage
from playlist_organizer.auth.tokens import TokenManager
from playlist_organizer.logging import configure_logging
from playlist_organizer.settings import PlaylistOrganizerSettings, get_settings
from playlist_organizer.songtable import format_song_table
from playlist_organizer.spotify.client import CacheProgress, SpotifyClient
from playlist_organizer.spotify.constants import DEFAULT_PLAYLISTS_PAGE_SIZE
from playlist_organizer.spotify.exceptions import SpotifyClientError

logger = logging.getLogger(__name__)


def _log_progress(progress: CacheProgress) -> None:
    logger.info("Cached a page of playlist items", extra={"progress": progress})


def _build_storage(settings: PlaylistOrganizerSettings) -> KeyValueStorage:
    if settings.VERIFIER_STORE_PATH:
        return JSONFileStorage(settings.VERIFIER_STORE_PATH)
    return InMemoryStorage()


async def main(
    settings: PlaylistOrganizerSettings,
    token_manager: TokenManager,
    callback_url: str,
    playlist_ids: tuple[str, ...],
    limit: int,
) -> str:
    """Finish signing in from *callback_url*, cache the selection and return the rendered song table."""
    await token_manager.handle_callback(callback_url)

    client = SpotifyClient(
        token_manager,
        request_timeout=settings.REQUEST_TIMEOUT_SECONDS,
        page_size=settings.PLAYLIST_ITEMS_PAGE_SIZE,
    )
    page = await client.get_user_playlists(limit=limit)
    for playlist in page.items:
        click.echo(f"{playlist.id}  {playlist.name} ({playlist.tracks.total} tracks)")

    client.save_selection(playlist_ids or [playlist.id for playlist in page.items])
    table = await client.cache_selected_playlists(on_progress=_log_progress)
    return format_song_table(table, client.session.api_cache, client.selected_ids)


@click.command()
@click.option(
    "--playlist",
    "playlist_ids",
    multiple=True,
    help="Playlist id to include (repeatable). Defaults to every listed playlist.",
)
@click.option(
    "--limit",
    default=DEFAULT_PLAYLISTS_PAGE_SIZE,
    show_default=True,
    help="How many of your playlists to list.",
)
def run(playlist_ids: tuple[str, ...], limit: int) -> None:
    """Show which of your Spotify playlists contain each track."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        raise click.UsageError(f"Invalid configuration: {exc}") from exc
    configure_logging(settings.LOG_LEVEL)
    if not settings.SPOTIFY_CLIENT_ID:
        raise click.UsageError("SPOTIFY_CLIENT_ID is not set")

    token_manager = TokenManager(settings, _build_storage(settings))
    url = token_manager.launch_auth()
    click.echo(f"If your browser did not open, visit:\n{url}")
    callback_url = click.prompt("Paste the URL Spotify redirected you to")

    try:
        output = asyncio.run(main(settings, token_manager, callback_url, playlist_ids, limit))
    except SpotifyClientError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(output)


if __name__ == "__main__":
    run()
