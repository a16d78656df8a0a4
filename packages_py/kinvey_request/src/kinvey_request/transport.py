"""
httpx-backed transport for prepared requests.

Sends exactly what it is given: no retries, no response parsing.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from .auth.encoding import mask_value
from .types import PreparedRequest

logger = logging.getLogger("kinvey_request.transport")


def _mask_headers_for_logging(headers: Dict[str, str]) -> Dict[str, str]:
    masked = dict(headers)
    for key in masked:
        if key.lower() == "authorization":
            masked[key] = mask_value(masked[key])
    return masked


class HttpxTransport:
    """Sends a PreparedRequest through an httpx.AsyncClient."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None) -> None:
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient()

    async def send(self, request: PreparedRequest) -> httpx.Response:
        kwargs: Dict[str, Any] = {}
        if isinstance(request.body, (dict, list)):
            kwargs["json"] = request.body
        elif request.body is not None:
            kwargs["content"] = request.body

        logger.debug(
            f"HttpxTransport.send: {request.method} {request.url} "
            f"headers={_mask_headers_for_logging(request.headers)}"
        )
        return await self._client.request(
            request.method,
            request.url,
            headers=request.headers,
            timeout=request.timeout,
            follow_redirects=request.follow_redirect,
            **kwargs,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
