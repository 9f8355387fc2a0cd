"""Tests for PKCE verifier and challenge helpers."""

import base64
import hashlib
import string

from playlist_organizer.auth.pkce import code_challenge, generate_code_verifier


def test_verifier_is_64_alphanumeric_characters() -> None:
    """Default verifier is 64 characters from the unreserved alphanumeric set."""
    verifier = generate_code_verifier()
    assert len(verifier) == 64
    assert set(verifier) <= set(string.ascii_letters + string.digits)


def test_verifiers_are_random() -> None:
    """Two verifiers should never collide."""
    assert generate_code_verifier() != generate_code_verifier()


def test_verifier_custom_length() -> None:
    assert len(generate_code_verifier(43)) == 43


def test_challenge_is_unpadded_urlsafe_sha256() -> None:
    """Challenge is SHA-256, URL-safe base64, without padding."""
    verifier = generate_code_verifier()
    expected = base64.urlsafe_b64encode(hashlib.sha256(verifier.encode()).digest()).decode().rstrip("=")
    challenge = code_challenge(verifier)
    assert challenge == expected
    assert "=" not in challenge
    assert "+" not in challenge
    assert "/" not in challenge


def test_challenge_known_vector() -> None:
    """RFC 7636 appendix B example."""
    verifier = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"
    assert code_challenge(verifier) == "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"
