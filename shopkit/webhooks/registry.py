"""Webhook registry — subscription registration and inbound dispatch.

register():
1. Builds the callback address from the context host name and the given path
2. Looks up an existing subscription for the topic
3. Skips the mutation if that subscription already points at the address
4. Otherwise creates (no existing id) or updates (existing id) the subscription
5. On success, replaces the store entry for the topic

process():
1. Extracts the HMAC, topic and shop domain headers (case-insensitive)
2. Raises InvalidWebhookError naming every missing header
3. Verifies the signature over the raw body (403 on mismatch)
4. Dispatches to the handler registered for the canonical topic (200)
5. Valid signature but no handler -> 403 as well

Known limitation: two overlapping register() calls for one topic can both
decide to mutate; whichever store write lands last wins.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from shopkit.clients.graphql import GraphqlClient
from shopkit.config import Context
from shopkit.errors import InvalidResponseError, InvalidWebhookError
from shopkit.types import ShopifyHeader
from shopkit.webhooks.models import (
    STATUS_FORBIDDEN,
    STATUS_OK,
    ProcessResult,
    RegisterResult,
    WebhookCheckResponse,
    WebhookEntry,
    WebhookHandler,
)
from shopkit.webhooks.queries import (
    DeliveryMethod,
    build_check_query,
    build_upsert_mutation,
    canonical_topic,
    is_success,
)
from shopkit.webhooks.store import WebhookStore
from shopkit.webhooks.verification import verify_hmac

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, str, str], GraphqlClient]

_REQUIRED_HEADERS = (ShopifyHeader.HMAC, ShopifyHeader.TOPIC, ShopifyHeader.DOMAIN)


def _normalize_path(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"


def _default_client_factory(shop: str, access_token: str, api_version: str) -> GraphqlClient:
    return GraphqlClient(shop, access_token, api_version)


def _extract_headers(headers: Mapping[str, str]) -> dict[ShopifyHeader, str]:
    wanted = {h.value.lower(): h for h in _REQUIRED_HEADERS}
    found: dict[ShopifyHeader, str] = {}
    for name, value in headers.items():
        if not name:
            continue
        header = wanted.get(name.lower())
        if header is not None and value:
            found[header] = value
    return found


class WebhookRegistry:
    """Registers webhook subscriptions and dispatches verified webhooks.

    One instance per tenant (or per test); nothing is shared between instances.
    """

    def __init__(
        self,
        context: Context,
        client_factory: ClientFactory | None = None,
        store: WebhookStore | None = None,
    ):
        self.context = context
        self.store = store if store is not None else WebhookStore()
        self._client_factory = client_factory or _default_client_factory

    def callback_address(self, path: str) -> str:
        return f"https://{self.context.host_name}{_normalize_path(path)}"

    async def register(
        self,
        topic: str,
        path: str,
        shop: str,
        access_token: str,
        handler: WebhookHandler,
        delivery_method: DeliveryMethod = DeliveryMethod.HTTP,
        api_version: str | None = None,
    ) -> RegisterResult:
        """Create or update the subscription for ``topic`` and remember ``handler``.

        For ``DeliveryMethod.EVENT_BRIDGE`` the address is still built from the
        context host name and ``path``, matching what the lookup returns.

        Raises:
            HttpRequestError: the Admin API could not be reached or answered non-2xx
            InvalidResponseError: the subscription lookup came back malformed
        """
        method = DeliveryMethod(delivery_method)
        path = _normalize_path(path)
        graphql_topic = canonical_topic(topic)
        address = self.callback_address(path)
        client = self._client_factory(shop, access_token, api_version or self.context.api_version)

        check_body = await client.query(build_check_query(graphql_topic))
        try:
            existing = WebhookCheckResponse.model_validate(check_body).first()
        except ValidationError as e:
            raise InvalidResponseError(
                f"Unexpected webhook subscription lookup response for {graphql_topic}",
                body=check_body,
            ) from e

        webhook_id = existing.id if existing else None
        if existing is not None and existing.callback_url == address:
            logger.info("Webhook %s already registered at %s on %s", graphql_topic, address, shop)
            success, body = True, {}
        else:
            body = await client.query(build_upsert_mutation(graphql_topic, address, method, webhook_id))
            success = is_success(body, method, webhook_id)
            if success:
                logger.info(
                    "Webhook %s %s at %s on %s (%s)",
                    graphql_topic,
                    "updated" if webhook_id else "created",
                    address,
                    shop,
                    method.value,
                )
            else:
                logger.warning(
                    "Webhook %s registration failed on %s: %s",
                    graphql_topic,
                    shop,
                    _user_errors(body),
                )

        if success:
            self.store.upsert(WebhookEntry(path=path, topic=graphql_topic, handler=handler))

        return RegisterResult(success=success, result=body)

    async def process(self, headers: Mapping[str, str], body: bytes) -> ProcessResult:
        """Verify an inbound webhook and run its handler to completion.

        Raises:
            InvalidWebhookError: one or more required headers are missing
        """
        found = _extract_headers(headers)
        missing = [h.value for h in _REQUIRED_HEADERS if h not in found]
        if missing:
            raise InvalidWebhookError(missing)

        result = ProcessResult(status_code=STATUS_FORBIDDEN)

        if not verify_hmac(self.context.api_secret_key, body, found[ShopifyHeader.HMAC]):
            logger.warning(
                "Webhook signature mismatch for %s from %s",
                found[ShopifyHeader.TOPIC],
                found[ShopifyHeader.DOMAIN],
            )
            return result

        graphql_topic = canonical_topic(found[ShopifyHeader.TOPIC])
        domain = found[ShopifyHeader.DOMAIN]
        entry = self.store.find_by_topic(graphql_topic)
        if entry is None:
            # Same 403 as a bad signature; callers cannot tell the two apart
            logger.info("No webhook handler registered for %s (shop=%s)", graphql_topic, domain)
            return result

        outcome = entry.handler(graphql_topic, domain, body)
        if inspect.isawaitable(outcome):
            await outcome

        logger.info("Dispatched webhook %s from %s", graphql_topic, domain)
        result.status_code = STATUS_OK
        return result

    def is_webhook_path(self, path: str) -> bool:
        """Whether ``path`` is the callback path of a registered handler."""
        return self.store.find_by_path(_normalize_path(path)) is not None


def _user_errors(body: Any) -> Any:
    if not isinstance(body, dict):
        return body
    data = body.get("data")
    if isinstance(data, dict):
        for payload in data.values():
            if isinstance(payload, dict) and payload.get("userErrors"):
                return payload["userErrors"]
    return body.get("errors", "no webhookSubscription in response")
