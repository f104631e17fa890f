"""Webhook subscription queries for the GraphQL Admin API.

Query text is constant per (delivery method, create/update). Topic, address
and subscription id are always bound as GraphQL variables, never spliced
into the query string.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from shopkit.clients.graphql import GraphqlRequest


class DeliveryMethod(StrEnum):
    """How Shopify pushes events for a subscription."""

    HTTP = "http"
    EVENT_BRIDGE = "eventbridge"


def canonical_topic(topic: str) -> str:
    """``orders/create`` -> ``ORDERS_CREATE``; already-canonical topics pass through."""
    return topic.strip().upper().replace("/", "_")


_CHECK_QUERY = """
query webhookSubscriptionLookup($topic: WebhookSubscriptionTopic!) {
  webhookSubscriptions(first: 1, topics: [$topic]) {
    edges {
      node {
        id
        callbackUrl
      }
    }
  }
}
"""

_RESULT_SELECTION = """
    userErrors {
      field
      message
    }
    webhookSubscription {
      id
    }
"""

# delivery method -> (create mutation, update mutation, address argument, input type)
_MUTATIONS: dict[DeliveryMethod, tuple[str, str, str, str]] = {
    DeliveryMethod.HTTP: (
        "webhookSubscriptionCreate",
        "webhookSubscriptionUpdate",
        "callbackUrl",
        "WebhookSubscriptionInput",
    ),
    DeliveryMethod.EVENT_BRIDGE: (
        "eventBridgeWebhookSubscriptionCreate",
        "eventBridgeWebhookSubscriptionUpdate",
        "arn",
        "EventBridgeWebhookSubscriptionInput",
    ),
}


def build_check_query(topic: str) -> GraphqlRequest:
    """Look up the first existing subscription for ``topic`` (id + callbackUrl)."""
    return GraphqlRequest(_CHECK_QUERY, {"topic": canonical_topic(topic)})


def mutation_name(delivery_method: DeliveryMethod, webhook_id: str | None = None) -> str:
    create, update, _, _ = _MUTATIONS[DeliveryMethod(delivery_method)]
    return update if webhook_id else create


def build_upsert_mutation(
    topic: str,
    address: str,
    delivery_method: DeliveryMethod = DeliveryMethod.HTTP,
    webhook_id: str | None = None,
) -> GraphqlRequest:
    """Create a subscription, or update ``webhook_id`` when one already exists."""
    method = DeliveryMethod(delivery_method)
    _, _, address_arg, input_type = _MUTATIONS[method]
    name = mutation_name(method, webhook_id)

    variables: dict[str, Any] = {"webhookSubscription": {address_arg: address}}
    if webhook_id:
        declaration = f"$id: ID!, $webhookSubscription: {input_type}!"
        arguments = "id: $id, webhookSubscription: $webhookSubscription"
        variables["id"] = webhook_id
    else:
        declaration = f"$topic: WebhookSubscriptionTopic!, $webhookSubscription: {input_type}!"
        arguments = "topic: $topic, webhookSubscription: $webhookSubscription"
        variables["topic"] = canonical_topic(topic)

    query = (
        f"mutation webhookSubscription({declaration}) {{\n"
        f"  {name}({arguments}) {{{_RESULT_SELECTION}  }}\n"
        "}\n"
    )
    return GraphqlRequest(query, variables)


def is_success(body: Any, delivery_method: DeliveryMethod, webhook_id: str | None = None) -> bool:
    """True when ``data.<mutation>.webhookSubscription`` is present in ``body``.

    Any other shape, including non-dict bodies, is a failure rather than an error.
    """
    if not isinstance(body, dict):
        return False
    data = body.get("data")
    if not isinstance(data, dict):
        return False
    payload = data.get(mutation_name(delivery_method, webhook_id))
    if not isinstance(payload, dict):
        return False
    return bool(payload.get("webhookSubscription"))
