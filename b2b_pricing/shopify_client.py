"""
Shopify GraphQL Client — Rate-limited transport for the Shopify Admin API.

Every query in this project goes through ShopifyGraphQLClient.execute(). It
POSTs a single GraphQL document to:

    https://<store-domain>/admin/api/<version>/graphql.json

with the access token in the X-Shopify-Access-Token header, and returns the
"data" portion of the response. It knows nothing about catalogs or prices.

Backpressure is handled in two places:

  1. HTTP 429 (Too Many Requests), or a GraphQL THROTTLED error, is retried
     with exponential backoff: 2^attempt seconds (1s, 2s, 4s, ...). After
     MAX_ATTEMPTS rejected attempts the call fails with RetriesExhausted.

  2. Every accepted response carries a cost extension:

        "extensions": {"cost": {"throttleStatus": {
            "currentlyAvailable": 4, "restoreRate": 50, ...}}}

     When fewer than THROTTLE_RESERVE points are left, the client sleeps
     ceil((reserve - available) / restoreRate) seconds before returning, so
     the *next* call does not trip a 429.

Any other status code, a body that is not JSON, or a GraphQL "errors" array
raises RemoteError. Connection-level failures propagate as requests
exceptions and are not retried.

Pipeline context:
    Shared by CatalogResolver and PriceResolver; one instance is created per
    PricingEnricher and reused across records (the access token is passed
    per call, not stored).
"""

import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests

from .errors import RemoteError, RetriesExhausted


DEFAULT_API_VERSION = "2023-10"


@dataclass
class ThrottleStatus:
    """The query-cost bucket state reported with each response."""

    currently_available: float
    restore_rate: float

    @classmethod
    def from_response(cls, body: Dict[str, Any]) -> Optional["ThrottleStatus"]:
        """Parse extensions.cost.throttleStatus, or None if it is absent."""
        extensions = body.get("extensions") or {}
        status = (extensions.get("cost") or {}).get("throttleStatus") or {}
        available = status.get("currentlyAvailable")
        if available is None:
            return None
        try:
            return cls(
                currently_available=float(available),
                restore_rate=float(status.get("restoreRate") or 0),
            )
        except (TypeError, ValueError) as e:
            raise RemoteError(f"Malformed throttleStatus in response: {status!r}") from e

    def wait_seconds(self, reserve: float) -> float:
        """Seconds to wait for the bucket to refill to the reserve level."""
        if self.currently_available >= reserve or self.restore_rate <= 0:
            return 0
        return math.ceil((reserve - self.currently_available) / self.restore_rate)


class ShopifyGraphQLClient:
    """Client for the Shopify Admin GraphQL API with 429 and cost throttling.

    Attributes:
        store_domain: Store host name (e.g., "acme.myshopify.com").
        api_version: Admin API version segment (e.g., "2023-10").
        timeout: Per-request timeout in seconds.
        debug: If True, print verbose request/response details.
    """

    MAX_ATTEMPTS = 5
    THROTTLE_RESERVE = 10

    def __init__(
        self,
        store_domain: str,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = 30,
        debug: bool = False,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the client.

        Args:
            store_domain: Store host; a leading scheme and trailing slash are stripped.
            api_version: Admin API version.
            timeout: Seconds before an HTTP request is abandoned.
            debug: Enable verbose output.
            session: Optional requests.Session to reuse (tests pass a mock).
            sleep: Function used for backoff and throttle waits.
        """
        domain = store_domain.strip()
        for scheme in ("https://", "http://"):
            if domain.startswith(scheme):
                domain = domain[len(scheme):]
        self.store_domain = domain.rstrip("/")
        self.api_version = api_version
        self.timeout = timeout
        self.debug = debug
        self._session = session or requests.Session()
        self._sleep = sleep

    @property
    def endpoint(self) -> str:
        """The GraphQL endpoint URL for this store and API version."""
        return f"https://{self.store_domain}/admin/api/{self.api_version}/graphql.json"

    def execute(
        self, query: str, access_token: str, variables: Optional[Dict] = None
    ) -> Dict[str, Any]:
        """Execute a GraphQL query, absorbing rate limits.

        Args:
            query: The GraphQL query string.
            access_token: Admin API access token for this store.
            variables: Optional dict of GraphQL variables.

        Returns:
            The "data" portion of the GraphQL response (a dict).

        Raises:
            RetriesExhausted: If all MAX_ATTEMPTS attempts were rate limited.
            RemoteError: On any other unexpected status, body, or GraphQL error.
            requests.RequestException: On network failures.
        """
        payload = {"query": query}
        if variables:
            payload["variables"] = variables

        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": access_token,
        }

        last_status = None
        for attempt in range(self.MAX_ATTEMPTS):
            if self.debug:
                print(f"  Executing GraphQL query ({len(query)} chars), attempt {attempt + 1}")

            response = self._session.post(
                self.endpoint, json=payload, headers=headers, timeout=self.timeout
            )

            last_status = response.status_code
            if response.status_code == 429:
                self._backoff(attempt, "Rate limit hit (429)")
                continue

            body = self._parse_body(response)

            if self._is_throttled(body):
                self._backoff(attempt, "Query throttled")
                continue

            self._raise_for_errors(body)
            self._wait_for_budget(body)

            data = body.get("data")
            if data is None:
                raise RemoteError("GraphQL response has no data", response.status_code)
            return data

        raise RetriesExhausted(self.MAX_ATTEMPTS, last_status)

    def _backoff(self, attempt: int, reason: str) -> None:
        # No point waiting after the final attempt
        if attempt + 1 >= self.MAX_ATTEMPTS:
            print(f"  {reason}. Giving up after {self.MAX_ATTEMPTS} attempts")
            return
        wait_ms = (2 ** attempt) * 1000
        print(f"  {reason}. Retrying in {wait_ms}ms...")
        self._sleep(wait_ms / 1000)

    def _wait_for_budget(self, body: Dict[str, Any]) -> None:
        throttle = ThrottleStatus.from_response(body)
        if throttle is None:
            return

        if self.debug:
            print(
                f"  Query budget: {throttle.currently_available:g} available, "
                f"restoring {throttle.restore_rate:g}/s"
            )

        wait_seconds = throttle.wait_seconds(self.THROTTLE_RESERVE)
        if wait_seconds > 0:
            print(f"  Throttling: waiting {int(wait_seconds * 1000)}ms for tokens to restore...")
            self._sleep(wait_seconds)

    @staticmethod
    def _parse_body(response) -> Dict[str, Any]:
        if response.status_code != 200:
            raise RemoteError(
                f"Unexpected HTTP {response.status_code} from Shopify: {response.text[:200]}",
                response.status_code,
            )
        try:
            body = response.json()
        except ValueError as e:
            raise RemoteError(f"Response is not valid JSON: {e}", response.status_code) from e
        if not isinstance(body, dict):
            raise RemoteError("Response JSON is not an object", response.status_code)
        return body

    @staticmethod
    def _is_throttled(body: Dict[str, Any]) -> bool:
        errors = body.get("errors") or []
        if not isinstance(errors, list):
            return False
        return any(
            isinstance(e, dict) and (e.get("extensions") or {}).get("code") == "THROTTLED"
            for e in errors
        )

    @staticmethod
    def _raise_for_errors(body: Dict[str, Any]) -> None:
        if not body.get("errors"):
            return
        errors = body["errors"]
        if not isinstance(errors, list):
            errors = [errors]
        messages = [e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in errors]
        raise RemoteError(f"GraphQL errors: {'; '.join(messages)}")
