"""Pydantic models for Spotify Web API payloads.

These mirror Spotify's JSON structure for the token endpoint, the current
user's playlists and playlist track listings. Everything received from
Spotify is validated into one of these before it reaches the cache.
"""

from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


class Token(BaseModel):
    """Response from Spotify's /api/token endpoint.

    Immutable: a refresh replaces the whole token.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str
    token_type: str
    expires_in: int
    refresh_token: str | None = None
    scope: str | None = None


class TokenData(BaseModel):
    """A token together with the moment it was obtained."""

    model_config = ConfigDict(frozen=True)

    token: Token
    last_refresh: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        """True when more than ``expires_in`` seconds have passed since ``last_refresh``."""
        now = now or datetime.now(UTC)
        return now - self.last_refresh > timedelta(seconds=self.token.expires_in)


# ---------------------------------------------------------------------------
# Shared objects
# ---------------------------------------------------------------------------


class SpotifyImage(BaseModel):
    """Image object returned by Spotify (playlist covers, album art)."""

    url: str
    height: int | None = None
    width: int | None = None


class SpotifyFollowers(BaseModel):
    href: str | None = None
    total: int = 0


class SpotifyUser(BaseModel):
    """Public user object (playlist owner, ``added_by``)."""

    id: str | None = None
    display_name: str | None = None
    type: str | None = None
    uri: str | None = None
    href: str | None = None
    followers: SpotifyFollowers | None = None
    external_urls: dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Playlists
# ---------------------------------------------------------------------------


class PlaylistTracksSummary(BaseModel):
    """The ``tracks`` field of a simplified playlist: a link and a count."""

    href: str | None = None
    total: int = 0


class Playlist(BaseModel):
    """Simplified playlist from GET /me/playlists."""

    id: str
    name: str
    description: str | None = None
    public: bool | None = None
    collaborative: bool = False
    owner: SpotifyUser | None = None
    images: list[SpotifyImage] | None = None
    tracks: PlaylistTracksSummary = Field(default_factory=PlaylistTracksSummary)
    snapshot_id: str | None = None
    uri: str | None = None
    href: str | None = None
    type: str = "playlist"
    external_urls: dict[str, str] = Field(default_factory=dict)


class PlaylistsPage(BaseModel):
    """Response from GET /me/playlists."""

    items: list[Playlist]
    total: int = 0
    limit: int | None = None
    offset: int | None = None
    next: str | None = None
    previous: str | None = None
    href: str | None = None


# ---------------------------------------------------------------------------
# Playlist items
# ---------------------------------------------------------------------------


class SpotifyArtist(BaseModel):
    """Simplified artist object embedded in tracks."""

    id: str | None = None
    name: str
    uri: str | None = None
    href: str | None = None
    external_urls: dict[str, str] = Field(default_factory=dict)


class SpotifyAlbum(BaseModel):
    """Simplified album object embedded in tracks."""

    id: str | None = None
    name: str
    uri: str | None = None
    album_type: str | None = None
    release_date: str | None = None
    images: list[SpotifyImage] = Field(default_factory=list)
    external_urls: dict[str, str] = Field(default_factory=dict)


class SpotifyTrack(BaseModel):
    """Track object as embedded in a playlist item.

    Local files carry no ``id``; their ``uri`` is still unique.
    """

    id: str | None = None
    name: str
    uri: str | None = None
    duration_ms: int | None = None
    explicit: bool | None = None
    is_local: bool = False
    artists: list[SpotifyArtist] = Field(default_factory=list)
    album: SpotifyAlbum | None = None
    external_urls: dict[str, str] = Field(default_factory=dict)
    href: str | None = None


class PlaylistItem(BaseModel):
    """Single entry of a playlist's track listing."""

    added_at: str | None = None
    added_by: SpotifyUser | None = None
    is_local: bool = False
    track: SpotifyTrack | None = None

    @property
    def key(self) -> str | None:
        """Identifier used to index this entry: track id, else uri for local files."""
        if self.track is None:
            return None
        return self.track.id or self.track.uri

    @property
    def album_art(self) -> list[SpotifyImage]:
        if self.track is None or self.track.album is None:
            return []
        return self.track.album.images


class PlaylistItemsPage(BaseModel):
    """Response from GET /playlists/{id}/tracks."""

    items: list[PlaylistItem]
    total: int = 0
    limit: int | None = None
    offset: int | None = None
    next: str | None = None
    previous: str | None = None
    href: str | None = None
