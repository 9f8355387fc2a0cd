"""Spotify client exceptions."""


class SpotifyClientError(Exception):
    """Base exception for Spotify client errors."""


class AuthError(SpotifyClientError):
    """Authorization failed or no usable token is available.

    Covers a missing authorization code or verifier, a platform-reported
    OAuth error, and the absence of any token to refresh.
    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Spotify authorization error: {detail}")


class APIError(SpotifyClientError):
    """Spotify returned a non-2xx response from a resource endpoint."""

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Spotify API error: HTTP {status_code}" + (f" - {message}" if message else ""))


class DataError(SpotifyClientError):
    """Spotify returned a successful response that does not match the expected shape."""
