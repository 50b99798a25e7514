"""Bitso request signing.

Signature = hex(HMAC-SHA256(nonce + method + path + body, secret))
Header    = "Bitso <key>:<nonce>:<signature>"
"""

import hashlib
import hmac
import time
from collections.abc import Callable
from dataclasses import dataclass

AUTH_SCHEME = "Bitso"


@dataclass(frozen=True)
class BitsoCredentials:
    """Bitso API credentials."""

    api_key: str
    api_secret: str

    def __repr__(self) -> str:
        return f"BitsoCredentials(api_key={self.api_key!r}, api_secret='***')"


class RequestSigner:
    """Builds the Authorization header for private Bitso endpoints.

    Usage:
        signer = RequestSigner(BitsoCredentials(api_key="...", api_secret="..."))
        headers = signer.sign("GET", "/api/v3/fundings")
    """

    def __init__(self, credentials: BitsoCredentials, clock: Callable[[], float] = time.time):
        self.api_key = credentials.api_key
        self._secret = credentials.api_secret.encode("utf-8")
        self._clock = clock
        self._last_nonce = 0

    def next_nonce(self) -> str:
        """Generate always-increasing nonce value.

        Millisecond timestamp. Bitso rejects a nonce that is not higher than
        the last one seen for the key, so two calls within the same
        millisecond (or after the wall clock steps back) get last + 1.
        """
        nonce = max(int(self._clock() * 1000), self._last_nonce + 1)
        self._last_nonce = nonce
        return str(nonce)

    def generate_signature(self, nonce: str, method: str, path: str, body: str = "") -> str:
        """Generate HMAC-SHA256 signature for a request.

        Args:
            nonce: Nonce string sent in the header
            method: HTTP method, e.g. "GET"
            path: Request path without query string, e.g. "/api/v3/fundings"
            body: Request body, empty for GET

        Returns:
            Lowercase hex digest
        """
        message = f"{nonce}{method}{path}{body}".encode()
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()

    def sign(self, method: str, path: str, body: str | None = None) -> dict[str, str]:
        """Return the Authorization header for a request."""
        nonce = self.next_nonce()
        signature = self.generate_signature(nonce, method, path, body or "")
        return {"Authorization": f"{AUTH_SCHEME} {self.api_key}:{nonce}:{signature}"}
