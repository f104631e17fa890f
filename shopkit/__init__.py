"""shopkit — webhook subscription registry for the Shopify Admin API.

Registers webhook subscriptions over GraphQL, verifies inbound webhook
signatures and dispatches verified payloads to per-topic handlers.
"""

__version__ = "0.3.0"
