import base64
import hashlib
import hmac
import secrets

STATE_BYTES = 32
CODE_VERIFIER_BYTES = 64


def generate_state() -> str:
    return secrets.token_urlsafe(STATE_BYTES)


def generate_code_verifier() -> str:
    # RFC 7636 allows 43-128 characters; 64 random bytes encode to 86.
    return secrets.token_urlsafe(CODE_VERIFIER_BYTES)


def code_challenge(code_verifier: str) -> str:
    """S256 PKCE challenge: base64url(sha256(verifier)) without padding."""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def states_match(expected: str, received: str) -> bool:
    return hmac.compare_digest(expected.encode(), received.encode())
