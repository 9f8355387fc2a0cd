"""Cross-reference the tracks of a user's Spotify playlists."""

__version__ = "0.1.0"
