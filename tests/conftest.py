"""Shared fixtures for the shopkit test suite."""

from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Any, Callable

import pytest

from shopkit.clients.graphql import GraphqlRequest
from shopkit.config import Context
from shopkit.webhooks.registry import WebhookRegistry

SECRET = "shpss_test_secret"
HOST = "app.example.com"


class FakeGraphqlClient:
    """Stands in for GraphqlClient: records requests, replays queued bodies."""

    def __init__(self, *responses: Any):
        self.responses = list(responses)
        self.requests: list[GraphqlRequest] = []
        self.built_with: list[tuple[str, str, str]] = []

    async def query(self, request: GraphqlRequest) -> Any:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def lookup_response(webhook_id: str | None = None, callback_url: str | None = None) -> dict:
    """Body of the subscription lookup query."""
    edges = []
    if webhook_id is not None:
        edges.append({"node": {"id": webhook_id, "callbackUrl": callback_url}})
    return {"data": {"webhookSubscriptions": {"edges": edges}}}


def mutation_response(name: str, webhook_id: str = "gid://shopify/WebhookSubscription/1") -> dict:
    return {
        "data": {
            name: {
                "userErrors": [],
                "webhookSubscription": {"id": webhook_id},
            }
        }
    }


@pytest.fixture()
def context() -> Context:
    return Context(api_secret_key=SECRET, host_name=HOST)


@pytest.fixture()
def fake_client() -> FakeGraphqlClient:
    return FakeGraphqlClient()


@pytest.fixture()
def registry(context: Context, fake_client: FakeGraphqlClient) -> WebhookRegistry:
    def factory(shop: str, access_token: str, api_version: str) -> FakeGraphqlClient:
        fake_client.built_with.append((shop, access_token, api_version))
        return fake_client

    return WebhookRegistry(context, client_factory=factory)


@pytest.fixture()
def sign() -> Callable[..., str]:
    """Compute a valid X-Shopify-Hmac-Sha256 header value."""

    def _sign(body: bytes, secret: str = SECRET) -> str:
        digest = hmac.new(secret.encode(), body, hashlib.sha256).digest()
        return base64.b64encode(digest).decode()

    return _sign
