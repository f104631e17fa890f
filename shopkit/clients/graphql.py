"""Shopify GraphQL Admin API transport.

One operation: ``await client.query(request) -> dict``. The client owns no
long-lived connection; each call opens a short-lived ``httpx.AsyncClient``.
HTTP and network failures are translated into shopkit errors; GraphQL-level
``errors``/``userErrors`` are left in the returned body for the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from shopkit.clients.retry import retry_with_backoff
from shopkit.errors import HttpRequestError, HttpResponseError, InvalidResponseError
from shopkit.types import ApiVersion, ShopifyHeader

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT_S = 30.0


@dataclass(frozen=True)
class GraphqlRequest:
    """Query text plus the variables bound to it."""

    query: str
    variables: dict[str, Any] = field(default_factory=dict)

    def payload(self) -> dict[str, Any]:
        return {"query": self.query, "variables": dict(self.variables)}


class GraphqlClient:
    """Admin API GraphQL client keyed by shop domain and access token."""

    def __init__(
        self,
        shop: str,
        access_token: str,
        api_version: str = ApiVersion.LATEST.value,
        *,
        tries: int = 1,
        timeout: float = _DEFAULT_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.shop = shop
        self.access_token = access_token
        self.api_version = api_version
        self.tries = tries
        self.timeout = timeout
        self._transport = transport

    @property
    def endpoint(self) -> str:
        shop = self.shop.strip().rstrip("/")
        if "://" in shop:
            shop = shop.split("://", 1)[1]
        return f"https://{shop}/admin/api/{self.api_version}/graphql.json"

    async def query(
        self,
        request: GraphqlRequest | str,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Execute a query or mutation and return the parsed JSON body."""
        if isinstance(request, str):
            request = GraphqlRequest(request, variables or {})

        try:
            response = await self._post(request.payload())
        except httpx.HTTPStatusError as e:
            resp = e.response
            raise HttpResponseError(
                f"Received an error response ({resp.status_code} {resp.reason_phrase}) from Shopify",
                code=resp.status_code,
                status_text=resp.reason_phrase,
                body=_safe_body(resp),
            ) from e
        except httpx.TransportError as e:
            raise HttpRequestError(f"Failed to make Shopify HTTP request: {type(e).__name__}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise InvalidResponseError("Shopify returned a non-JSON body", body=response.text) from e

        if isinstance(body, dict) and body.get("errors"):
            logger.debug("GraphQL errors from %s: %s", self.shop, body["errors"])
        return body

    @retry_with_backoff(base_delay=1.0, max_delay=30.0)
    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            response = await client.post(
                self.endpoint,
                json=payload,
                headers={
                    ShopifyHeader.ACCESS_TOKEN.value: self.access_token,
                    "Content-Type": "application/json",
                },
            )
        response.raise_for_status()
        return response


def _safe_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
