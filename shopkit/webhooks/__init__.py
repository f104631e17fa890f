"""Webhook subscriptions — registration, signature verification and dispatch.

Registers subscriptions through the GraphQL Admin API, verifies inbound
webhooks with constant-time HMAC and dispatches them to per-topic handlers.
"""

from shopkit.webhooks.models import ProcessResult, RegisterResult, WebhookEntry
from shopkit.webhooks.queries import DeliveryMethod, canonical_topic
from shopkit.webhooks.registry import WebhookRegistry
from shopkit.webhooks.store import WebhookStore
from shopkit.webhooks.verification import compute_hmac, safe_compare, verify_hmac

__all__ = [
    "DeliveryMethod",
    "ProcessResult",
    "RegisterResult",
    "WebhookEntry",
    "WebhookRegistry",
    "WebhookStore",
    "canonical_topic",
    "compute_hmac",
    "safe_compare",
    "verify_hmac",
]
