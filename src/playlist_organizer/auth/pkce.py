"""PKCE (RFC 7636) code verifier and S256 code challenge helpers."""

import base64
import hashlib
import secrets

from playlist_organizer.spotify.constants import CODE_VERIFIER_ALPHABET, CODE_VERIFIER_LENGTH


def generate_code_verifier(length: int = CODE_VERIFIER_LENGTH) -> str:
    """Return a random verifier of *length* characters drawn from an alphanumeric alphabet."""
    return "".join(secrets.choice(CODE_VERIFIER_ALPHABET) for _ in range(length))


def code_challenge(verifier: str) -> str:
    """Compute the S256 code challenge: URL-safe base64 of SHA-256, padding stripped."""
    digest = hashlib.sha256(verifier.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")
