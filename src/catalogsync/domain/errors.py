"""Error taxonomy for remote platform calls and shop resolution.

Remote errors are produced at the HTTP boundary so callers branch on the error
type rather than on response details:

* ``RateLimitedError``: the platform throttled the call (HTTP 429). Retryable.
* ``RemoteClientError``: the request itself was rejected (4xx). Not retryable.
  ``RemoteNotFoundError`` is the non-fatal subset (the entity is gone).
* ``UpstreamError``: the platform failed (5xx, network). Not retryable here;
  transient gateway failures are retried at the transport layer.
"""

from __future__ import annotations


class RemoteError(RuntimeError):
    """Base class for failures talking to the remote platform."""

    code = "REMOTE_ERROR"
    fatal = False

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(RemoteError):
    code = "RATE_LIMITED"

    def __init__(
        self,
        message: str = "Remote rate limit exceeded",
        *,
        status_code: int | None = 429,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.retry_after = retry_after


class RemoteClientError(RemoteError):
    code = "CLIENT_ERROR"
    fatal = True


class RemoteNotFoundError(RemoteClientError):
    code = "NOT_FOUND"
    fatal = False

    def __init__(self, message: str, *, status_code: int | None = 404) -> None:
        super().__init__(message, status_code=status_code)


class UpstreamError(RemoteError):
    code = "UPSTREAM_ERROR"


class ShopResolutionError(RuntimeError):
    """Raised when a shop or its remote session cannot be resolved."""


class ShopNotFoundError(ShopResolutionError):
    pass


class InvalidSessionError(ShopResolutionError):
    """The access token does not open a valid remote session."""


class ClientInitializationError(ShopResolutionError):
    """A remote client could not be constructed for reasons other than auth."""
