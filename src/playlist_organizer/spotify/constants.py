"""Spotify API URLs, OAuth parameters and paging defaults."""

# Spotify Auth
SPOTIFY_AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"

# Spotify Web API base (relative paths are joined onto this)
SPOTIFY_API_BASE = "https://api.spotify.com/v1/"

# Spotify Web API endpoints, relative to SPOTIFY_API_BASE
USER_PLAYLISTS_PATH = "me/playlists"
PLAYLIST_ITEMS_PATH = "playlists/{playlist_id}/tracks"

# OAuth / PKCE
SPOTIFY_SCOPES = "user-read-private playlist-read-private"
DEFAULT_SPOTIFY_REDIRECT_URI = "http://localhost:5173/callback"
CODE_VERIFIER_LENGTH = 64
CODE_VERIFIER_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
CODE_VERIFIER_STORAGE_KEY = "code_verifier"

# Paging defaults
DEFAULT_PLAYLISTS_PAGE_SIZE = 20
DEFAULT_PLAYLIST_ITEMS_PAGE_SIZE = 50

# HTTP
DEFAULT_REQUEST_TIMEOUT = 30.0  # seconds
