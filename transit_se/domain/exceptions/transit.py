from __future__ import annotations


class TransitError(Exception):
    """Base exception for all transit-se errors."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


class InvalidArgumentError(TransitError):
    """Raised when a caller-supplied argument is out of its allowed set."""


class InvalidLocationError(InvalidArgumentError):
    """Raised when no usable location parameter was supplied."""


class SiteNotFoundError(TransitError):
    """Raised when a site id/name does not exist or the site directory is empty."""


class ApiKeyMissingError(TransitError):
    """Raised when a client that needs an API key is built without one."""

    def __init__(self, variable: str) -> None:
        super().__init__(
            f"API key is required. Pass it explicitly or set {variable}."
        )
        self.variable = variable


class RemoteError(TransitError):
    """Raised when an upstream HTTP fetch fails (network or non-2xx)."""


class ApiResponseError(RemoteError):
    """Raised when the upstream API answers with a non-2xx status."""

    def __init__(self, status_code: int, endpoint: str, body: str | None = None) -> None:
        detail = f": {body}" if body else ""
        super().__init__(
            f"API returned {status_code} for {endpoint}{detail}",
            status_code=status_code,
            endpoint=endpoint,
        )
        self.body = body


class ResponseValidationError(RemoteError):
    """Raised when an upstream payload does not have the expected shape."""
