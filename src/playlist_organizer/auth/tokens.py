"""Token lifecycle management: PKCE authorization, code exchange and transparent refresh."""

import enum
import logging
import webbrowser
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any
from urllib.parse import parse_qs, urlencode, urlsplit

import httpx
from pydantic import ValidationError

from playlist_organizer.auth.pkce import code_challenge, generate_code_verifier
from playlist_organizer.auth.storage import InMemoryStorage, KeyValueStorage
from playlist_organizer.settings import PlaylistOrganizerSettings
from playlist_organizer.spotify.constants import (
    CODE_VERIFIER_STORAGE_KEY,
    SPOTIFY_AUTHORIZE_URL,
    SPOTIFY_TOKEN_URL,
)
from playlist_organizer.spotify.exceptions import AuthError, DataError
from playlist_organizer.spotify.models import Token, TokenData

logger = logging.getLogger(__name__)


class AuthState(enum.StrEnum):
    """Where the token manager stands in the authorization flow."""

    UNAUTHENTICATED = "unauthenticated"
    AWAITING_CALLBACK = "awaiting_callback"
    AUTHENTICATED = "authenticated"
    REFRESHING = "refreshing"


class TokenManager:
    """Owns the Spotify access token for one session.

    Flow::

        manager = TokenManager(settings, storage)
        manager.launch_auth()                      # user agent goes to Spotify
        await manager.handle_callback(redirected)  # code -> token
        token = await manager.get_valid_access_token()

    The code verifier is written to *storage* before the redirect and read
    back on the callback, so *storage* must outlive the redirect when the
    callback is handled by another process.
    """

    def __init__(
        self,
        settings: PlaylistOrganizerSettings,
        storage: KeyValueStorage | None = None,
        *,
        redirect: Callable[[str], Any] | None = None,
    ) -> None:
        self._settings = settings
        self._storage = storage if storage is not None else InMemoryStorage()
        self._redirect = redirect or webbrowser.open
        self._token_data: TokenData | None = None
        self._awaiting_callback = False
        self._refreshing = False

    @property
    def state(self) -> AuthState:
        if self._refreshing:
            return AuthState.REFRESHING
        if self._token_data is not None:
            return AuthState.AUTHENTICATED
        if self._awaiting_callback:
            return AuthState.AWAITING_CALLBACK
        return AuthState.UNAUTHENTICATED

    @property
    def token_data(self) -> TokenData | None:
        return self._token_data

    @token_data.setter
    def token_data(self, value: TokenData | None) -> None:
        self._token_data = value

    def build_authorization_url(self, challenge: str) -> str:
        """Build the Spotify /authorize URL for the given S256 *challenge*."""
        params = {
            "response_type": "code",
            "client_id": self._settings.SPOTIFY_CLIENT_ID,
            "scope": self._settings.SPOTIFY_SCOPES,
            "code_challenge_method": "S256",
            "code_challenge": challenge,
            "redirect_uri": self._settings.SPOTIFY_REDIRECT_URI,
        }
        return f"{SPOTIFY_AUTHORIZE_URL}?{urlencode(params)}"

    def launch_auth(self) -> str:
        """Start a fresh authorization: store a new verifier and redirect to Spotify.

        Any token held so far is discarded. Returns the authorization URL.
        """
        verifier = generate_code_verifier()
        self._storage.set(CODE_VERIFIER_STORAGE_KEY, verifier)
        url = self.build_authorization_url(code_challenge(verifier))

        self._token_data = None
        self._awaiting_callback = True
        logger.info("Redirecting to Spotify for authorization", extra={"auth_state": self.state})
        self._redirect(url)
        return url

    async def handle_callback(self, callback_url: str) -> None:
        """Process the redirect back from Spotify.

        *callback_url* may be the full redirected URL or just its query string.

        Raises:
            AuthError: If Spotify reported an error, the code is missing,
                or the code exchange fails.
        """
        query = urlsplit(callback_url).query if "?" in callback_url else callback_url
        params = parse_qs(query)

        if "error" in params:
            error = params["error"][0]
            logger.error("Authentication error: %s", error)
            raise AuthError(error)

        code = params.get("code", [""])[0]
        if not code:
            logger.error("No code in callback URL")
            raise AuthError("missing code")

        await self.exchange_code(code)

    async def exchange_code(self, code: str) -> None:
        """Exchange an authorization *code* for the first token of the session.

        Raises:
            AuthError: If no verifier is stored or Spotify rejects the exchange.
            DataError: If Spotify's response is not a valid token payload.
        """
        verifier = self._storage.get(CODE_VERIFIER_STORAGE_KEY)
        if not verifier:
            logger.error("No code verifier in storage")
            raise AuthError("missing verifier")

        token = await self._request_token(
            {
                "client_id": self._settings.SPOTIFY_CLIENT_ID,
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._settings.SPOTIFY_REDIRECT_URI,
                "code_verifier": verifier,
            }
        )

        self._token_data = TokenData(token=token, last_refresh=datetime.now(UTC))
        self._awaiting_callback = False
        self._storage.delete(CODE_VERIFIER_STORAGE_KEY)
        logger.info("Obtained Spotify access token (scope: %s)", token.scope, extra={"auth_state": self.state})

    async def get_valid_access_token(self) -> str:
        """Return the current access token, refreshing it first if it has expired.

        A failed refresh is logged and the stale token is returned; the
        failure then surfaces on the API call that uses it.

        Raises:
            AuthError: If no token was ever obtained, or the token has
                expired and carries no refresh token.
        """
        if self._token_data is None:
            raise AuthError("no token")

        if self._token_data.is_expired():
            await self._refresh(self._token_data)

        return self._token_data.token.access_token

    async def _refresh(self, token_data: TokenData) -> None:
        """Replace the token via the refresh_token grant; log and keep the old one on failure."""
        refresh_token = token_data.token.refresh_token
        if not refresh_token:
            raise AuthError("missing refresh token")

        self._refreshing = True
        try:
            token = await self._request_token(
                {
                    "grant_type": "refresh_token",
                    "refresh_token": refresh_token,
                    "client_id": self._settings.SPOTIFY_CLIENT_ID,
                }
            )
        except (AuthError, DataError, httpx.HTTPError) as exc:
            logger.error("Token refresh failed, keeping the current access token: %s", exc)
            return
        finally:
            self._refreshing = False

        # Spotify may omit refresh_token on refresh; keep the existing one.
        if token.refresh_token is None:
            token = token.model_copy(update={"refresh_token": refresh_token})

        self._token_data = TokenData(token=token, last_refresh=datetime.now(UTC))
        logger.info("Refreshed Spotify access token", extra={"auth_state": self.state})

    async def _request_token(self, form: dict[str, str]) -> Token:
        """POST *form* to the token endpoint and validate the response."""
        async with httpx.AsyncClient(timeout=self._settings.REQUEST_TIMEOUT_SECONDS) as client:
            response = await client.post(SPOTIFY_TOKEN_URL, data=form)

        if response.status_code != 200:
            raise AuthError(f"failed to get token (HTTP {response.status_code}){_describe_error(response)}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise DataError("Token response was not JSON") from exc

        if isinstance(payload, dict) and payload.get("error"):
            raise AuthError(f"{payload['error']}: {payload.get('error_description', '')}")

        try:
            return Token.model_validate(payload)
        except ValidationError as exc:
            raise DataError(f"Malformed token response: {exc}") from exc


def _describe_error(response: httpx.Response) -> str:
    """Render Spotify's ``{error, error_description}`` body as a message suffix, if present."""
    try:
        body = response.json()
    except ValueError:
        return ""
    if not isinstance(body, dict) or not body.get("error"):
        return ""
    description = body.get("error_description")
    return f": {body['error']}" + (f" ({description})" if description else "")
