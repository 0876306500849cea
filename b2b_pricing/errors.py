"""
Errors — Exception types raised by the pricing enrichment pipeline.

Two families exist:

  RemoteError        Something went wrong talking to the Shopify Admin API
                     (unexpected HTTP status, non-JSON body, GraphQL errors).
                     RetriesExhausted is the rate-limit flavour of it, raised
                     when every attempt came back with HTTP 429.

  ResolutionError    The API answered, but the answer (or the input record)
                     is missing something the resolvers need, e.g. a null
                     product or a price amount that is not a number.

Network failures (DNS, TLS, connection reset, timeouts) are not wrapped;
they surface as requests.RequestException subclasses.
"""

from typing import Optional


class RemoteError(Exception):
    """The remote GraphQL endpoint returned something unusable.

    Attributes:
        status_code: HTTP status of the failing response, if one was received.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RetriesExhausted(RemoteError):
    """Every attempt was rejected as rate limited.

    status_code is that of the last rejected attempt: 429, or 200 when the
    final rejection was a GraphQL THROTTLED error.
    """

    def __init__(self, attempts: int, status_code: Optional[int] = 429):
        super().__init__(
            f"Rate limit still in effect after {attempts} attempts", status_code=status_code
        )
        self.attempts = attempts


class ResolutionError(Exception):
    """A catalog or price could not be resolved from the API response."""
