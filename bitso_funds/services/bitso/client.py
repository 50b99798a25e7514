"""Bitso API client for withdrawals and fundings.

Implements Bitso's HMAC-SHA256 authentication and provides cached, typed
access to the funds-movement endpoints.
"""

import json
import logging
import urllib.parse
from collections.abc import Iterable
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from bitso_funds.schemas import ApiErrorDetail, Funding, ListResponse, Withdrawal
from bitso_funds.services.bitso.constants import (
    BITSO_API_URL,
    FUNDINGS_PATH,
    MAX_PAGE_SIZE,
    WITHDRAWALS_PATH,
)
from bitso_funds.services.bitso.signer import BitsoCredentials, RequestSigner
from bitso_funds.services.shared.http_client import HTTPClient, TransportError
from bitso_funds.services.shared.ttl_cache import CacheStore, TTLCache, make_key

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class BitsoAPIError(Exception):
    """Exception raised when Bitso answers with success=false or a malformed body."""

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code


class BitsoNotFoundError(BitsoAPIError):
    """Raised when a requested withdrawal or funding does not exist."""


def _join_ids(ids: str | Iterable[str]) -> str:
    if isinstance(ids, str):
        return ids
    return ",".join(ids)


def _entity_path(base: str, entity_id: str) -> str:
    if not entity_id or not entity_id.strip():
        raise ValueError("ID must not be empty")
    return f"{base}/{urllib.parse.quote(entity_id, safe='')}"


def _error_detail(raw: Any) -> ApiErrorDetail:
    """Normalize the envelope's error field, which is usually {code, message}."""
    if isinstance(raw, dict):
        return ApiErrorDetail.model_validate(raw)
    if raw:
        return ApiErrorDetail(message=str(raw))
    return ApiErrorDetail(message="API request failed")


def _error_from_body(text: str | None) -> ApiErrorDetail | None:
    """Extract Bitso's error object from a raw response body, if it has one."""
    if not text:
        return None
    try:
        error = json.loads(text).get("error")
    except (ValueError, AttributeError):
        return None
    return _error_detail(error) if error else None


class BitsoClient(HTTPClient):
    """Client for the Bitso withdrawals and fundings endpoints.

    Every list/get call is a read-through cache around one signed GET.
    Successful responses are cached for cache_ttl_seconds; failures are
    never cached.

    Usage:
        client = BitsoClient(BitsoCredentials(api_key="...", api_secret="..."))
        page = client.list_fundings(limit=100)
        funding = client.get_funding(page.items[0].fid)
    """

    def __init__(
        self,
        credentials: BitsoCredentials,
        base_url: str = BITSO_API_URL,
        timeout: float = 30.0,
        cache: CacheStore | None = None,
        cache_ttl_seconds: float = 300,
        log: logging.Logger | None = None,
        transport: httpx.BaseTransport | None = None,
        signer: RequestSigner | None = None,
    ):
        """Initialize Bitso client with credentials.

        Args:
            credentials: Bitso API credentials
            base_url: API endpoint, without the /api/v3 prefix
            timeout: Request timeout in seconds
            cache: Store for responses. A TTLCache is created if not provided.
            cache_ttl_seconds: Lifetime of cached responses when cache is created here
            log: Logger for request and cache events. Defaults to the module logger.
            transport: Optional httpx transport (used by tests)
            signer: Optional pre-built signer. Built from credentials if not provided.
        """
        super().__init__(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )
        self.signer = signer or RequestSigner(credentials)
        self.cache: CacheStore = cache if cache is not None else TTLCache(cache_ttl_seconds)
        self.log = log or logger

    def _signed_get(self, path: str, params: dict | None = None) -> dict:
        """Make authenticated GET request and return the decoded envelope.

        Args:
            path: Endpoint path, without query string
            params: Query parameters (not part of the signature)

        Raises:
            TransportError: On network failures and non-2xx statuses
            BitsoAPIError: If the body is not a Bitso envelope
        """
        headers = self.signer.sign("GET", path)
        try:
            body = self.get_json(path, params=params or None, headers=headers)
        except ValueError as e:
            raise BitsoAPIError(f"Invalid JSON from {path}: {e}") from e

        if not isinstance(body, dict) or "success" not in body:
            raise BitsoAPIError(f"Unexpected response from {path}")
        return body

    def _parse(self, model: type[M], data: Any, path: str) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            self.log.error(f"Malformed payload from {path}: {e}")
            raise BitsoAPIError(f"Malformed payload from {path}") from e

    def _cached_list(self, path: str, params: dict, item_model: type[M]) -> ListResponse[M]:
        key = make_key(path, params)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        self.log.info(f"Fetching {path} from Bitso API (params={params})")
        try:
            body = self._signed_get(path, params)
        except (TransportError, BitsoAPIError) as e:
            self.log.error(f"Failed to fetch {path}: {e}")
            raise

        response = self._parse(ListResponse[item_model], body, path)
        if not response.ok:
            self.log.warning(f"Bitso returned success=false for {path}: {response.error_message}")
            return response

        self.cache.set(key, response)
        self.log.info(f"Fetched {len(response.items)} records from {path}")
        return response

    def _cached_get(self, path: str, model: type[M], entity_id: str) -> M:
        key = make_key(path)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        self.log.info(f"Fetching {path} from Bitso API")
        try:
            body = self._signed_get(path)
        except TransportError as e:
            self.log.error(f"Failed to fetch {path}: {e}")
            if e.status_code == 404:
                error = _error_from_body(e.response_body)
                raise BitsoNotFoundError(
                    error.message if error else f"Not found: {path}",
                    error.code if error else None,
                ) from e
            raise

        if not body.get("success"):
            error = _error_detail(body.get("error"))
            self.log.error(f"Bitso returned success=false for {path}: {error.message}")
            raise BitsoNotFoundError(error.message, error.code)

        payload = body.get("payload")
        # Some single-entity endpoints wrap the object in a one-element list
        if isinstance(payload, list):
            if len(payload) != 1:
                raise BitsoNotFoundError(f"Not found: {path}")
            payload = payload[0]

        entity = self._parse(model, payload, path)
        if entity.id != entity_id:
            self.log.error(f"Bitso returned {entity.id!r} for {path}")
            raise BitsoNotFoundError(f"Not found: {path}")
        self.cache.set(key, entity)
        return entity

    @staticmethod
    def _check_limit(limit: int | None) -> None:
        if limit is not None and not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValueError(f"limit must be between 1 and {MAX_PAGE_SIZE}, got {limit}")

    def test_connection(self) -> bool:
        """Check that the API is reachable and the credentials are accepted.

        Issues a signed, uncached request for a single withdrawal. Never raises.

        Returns:
            True if the API answered with HTTP 200
        """
        self.log.info("Testing Bitso API connection...")
        try:
            headers = self.signer.sign("GET", WITHDRAWALS_PATH)
            response = self.get(WITHDRAWALS_PATH, params={"limit": 1}, headers=headers)
        except TransportError as e:
            self.log.error(f"Connection test failed: {e}")
            return False
        except Exception as e:
            # Bad endpoint URLs and non-ASCII credentials fail before any I/O
            self.log.error(f"Connection test failed: {type(e).__name__}: {e}")
            return False

        healthy = response.status_code == 200
        self.log.log(
            logging.INFO if healthy else logging.WARNING,
            f"Connection test result: status={response.status_code} healthy={healthy}",
        )
        return healthy

    def list_withdrawals(
        self,
        currency: str | None = None,
        limit: int | None = None,
        marker: str | None = None,
        method: str | None = None,
        origin_id: str | None = None,
        status: str | None = None,
        wid: str | None = None,
    ) -> ListResponse[Withdrawal]:
        """List withdrawals, newest first.

        Args:
            currency: Filter by currency (e.g., "mxn")
            limit: Page size, 1-100
            marker: ID of the last withdrawal of the previous page
            method: Filter by withdrawal method
            origin_id: Filter by client-supplied ID(s), comma-separated
            status: Filter by status
            wid: Filter by withdrawal ID(s), comma-separated

        Returns:
            ListResponse of withdrawals. ok is False on an API-level failure.

        Raises:
            ValueError: If limit is outside 1-100
            TransportError: On network failures and non-2xx statuses
        """
        self._check_limit(limit)
        params: dict = {}
        if currency:
            params["currency"] = currency
        if limit is not None:
            params["limit"] = limit
        if marker:
            params["marker"] = marker
        if method:
            params["method"] = method
        if origin_id:
            params["origin_id"] = origin_id
        if status:
            params["status"] = status
        if wid:
            params["wid"] = wid

        return self._cached_list(WITHDRAWALS_PATH, params, Withdrawal)

    def get_withdrawal(self, wid: str) -> Withdrawal:
        """Get a single withdrawal.

        Raises:
            ValueError: If wid is empty
            BitsoNotFoundError: If Bitso reports no such withdrawal
            TransportError: On network failures and other non-2xx statuses
        """
        return self._cached_get(_entity_path(WITHDRAWALS_PATH, wid), Withdrawal, wid)

    def get_withdrawals_by_ids(self, wids: str | Iterable[str]) -> ListResponse[Withdrawal]:
        """Get several withdrawals by ID (list or comma-separated string)."""
        return self.list_withdrawals(wid=_join_ids(wids))

    def get_withdrawals_by_origin_ids(
        self, origin_ids: str | Iterable[str]
    ) -> ListResponse[Withdrawal]:
        """Get withdrawals by client-supplied origin ID (list or comma-separated string)."""
        return self.list_withdrawals(origin_id=_join_ids(origin_ids))

    def list_fundings(
        self,
        limit: int | None = None,
        marker: str | None = None,
        method: str | None = None,
        status: str | None = None,
        fids: str | Iterable[str] | None = None,
    ) -> ListResponse[Funding]:
        """List fundings (deposits), newest first.

        Args:
            limit: Page size, 1-100
            marker: ID of the last funding of the previous page
            method: Filter by funding method
            status: Filter by status
            fids: Filter by funding ID(s), list or comma-separated

        Returns:
            ListResponse of fundings. ok is False on an API-level failure.

        Raises:
            ValueError: If limit is outside 1-100
            TransportError: On network failures and non-2xx statuses
        """
        self._check_limit(limit)
        params: dict = {}
        if limit is not None:
            params["limit"] = limit
        if marker:
            params["marker"] = marker
        if method:
            params["method"] = method
        if status:
            params["status"] = status
        if fids:
            params["fids"] = _join_ids(fids)

        return self._cached_list(FUNDINGS_PATH, params, Funding)

    def get_funding(self, fid: str) -> Funding:
        """Get a single funding.

        Raises:
            ValueError: If fid is empty
            BitsoNotFoundError: If Bitso reports no such funding
            TransportError: On network failures and other non-2xx statuses
        """
        return self._cached_get(_entity_path(FUNDINGS_PATH, fid), Funding, fid)

    def clear_cache(self) -> None:
        """Drop every cached response."""
        self.cache.clear()
