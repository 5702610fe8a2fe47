from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx
from pydantic import TypeAdapter, ValidationError

from transit_se.adapters.usage_counter import UsageCounter
from transit_se.domain.exceptions import (
    ApiResponseError,
    RemoteError,
    ResponseValidationError,
)

logger = logging.getLogger(__name__)

QueryParams = Sequence[tuple[str, str | int]]


async def get_json(
    *,
    base_url: str,
    path: str,
    adapter: TypeAdapter[Any],
    timeout_s: float | None,
    transport: httpx.AsyncBaseTransport | None,
    usage: UsageCounter,
    params: QueryParams = (),
) -> Any:
    """GET `base_url + path` and validate the JSON body with `adapter`.

    Every call is counted in `usage`, failed or not. Transport failures raise
    `RemoteError`, non-2xx responses `ApiResponseError`, and bodies that do
    not match the adapter `ResponseValidationError`.
    """

    usage.record(path)
    logger.debug("GET %s%s", base_url, path)

    try:
        async with httpx.AsyncClient(timeout=timeout_s, transport=transport) as client:
            resp = await client.get(f"{base_url}{path}", params=list(params) or None)
    except httpx.HTTPError as e:
        # Query strings may carry API keys; report only the path.
        raise RemoteError(
            f"Request to {path} failed: {e.__class__.__name__}", endpoint=path
        ) from e

    if resp.is_error:
        raise ApiResponseError(resp.status_code, path, resp.text or None)

    try:
        return adapter.validate_json(resp.content)
    except ValidationError as e:
        raise ResponseValidationError(
            f"Response validation failed for {path}: {e.error_count()} error(s)",
            endpoint=path,
        ) from e
