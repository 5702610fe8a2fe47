from .transit import (
    ApiKeyMissingError,
    ApiResponseError,
    InvalidArgumentError,
    InvalidLocationError,
    RemoteError,
    ResponseValidationError,
    SiteNotFoundError,
    TransitError,
)

__all__ = [
    "ApiKeyMissingError",
    "ApiResponseError",
    "InvalidArgumentError",
    "InvalidLocationError",
    "RemoteError",
    "ResponseValidationError",
    "SiteNotFoundError",
    "TransitError",
]
