"""Shared fixtures for Bitso client tests."""

from collections.abc import Callable

import httpx
import pytest

from bitso_funds.services.bitso.client import BitsoClient
from bitso_funds.services.bitso.signer import BitsoCredentials, RequestSigner
from bitso_funds.services.shared.ttl_cache import TTLCache

TEST_BASE_URL = "https://api.bitso.test"


class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_funding(fid: str, **overrides) -> dict:
    """Build a funding as Bitso returns it on the wire."""
    funding = {
        "fid": fid,
        "status": "complete",
        "created_at": "2025-08-12T01:54:02+00:00",
        "currency": "usd",
        "method": "usdc_trf",
        "amount": "29.99",
        "details": {},
    }
    funding.update(overrides)
    return funding


def make_withdrawal(wid: str, **overrides) -> dict:
    """Build a withdrawal as Bitso returns it on the wire."""
    withdrawal = {
        "wid": wid,
        "status": "complete",
        "created_at": "2025-07-01T08:05:09+00:00",
        "currency": "mxn",
        "method": "pixstark",
        "amount": "1500.00",
        "details": {"beneficiary_name": "Test"},
        "origin_id": None,
    }
    withdrawal.update(overrides)
    return withdrawal


def envelope(payload, success: bool = True) -> dict:
    if success:
        return {"success": True, "payload": payload}
    return {"success": False, "error": payload}


@pytest.fixture
def credentials() -> BitsoCredentials:
    """Create test Bitso credentials."""
    return BitsoCredentials(api_key="test-api-key-12345", api_secret="test-secret-key-67890")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def requests_seen() -> list[httpx.Request]:
    return []


@pytest.fixture
def make_client(
    credentials: BitsoCredentials, clock: FakeClock, requests_seen: list[httpx.Request]
) -> Callable[[Callable[[httpx.Request], httpx.Response]], BitsoClient]:
    """Factory building a BitsoClient wired to an in-memory transport.

    The handler receives each request and returns the response. Every request
    is also appended to requests_seen.
    """
    clients: list[BitsoClient] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> BitsoClient:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            return handler(request)

        client = BitsoClient(
            credentials,
            base_url=TEST_BASE_URL,
            cache=TTLCache(300, clock=clock),
            transport=httpx.MockTransport(recording_handler),
            signer=RequestSigner(credentials, clock=clock),
        )
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()
