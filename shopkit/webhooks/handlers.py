"""Webhook HTTP handlers — FastAPI route feeding WebhookRegistry.process().

Each request:
1. Is matched against the callback paths registered in the registry (404 otherwise)
2. Reads the raw body (needed for HMAC verification, never re-serialized)
3. Hands headers + body to the registry, which verifies and dispatches
4. Returns the registry's status code (200 dispatched, 403 rejected)
5. A handler that raises -> 500 with an opaque body and a dispatch_failed audit record

Security contract:
- Never return error details to webhook caller (info disclosure)
- Missing required headers -> 400 with an opaque body
- Bad signature and unknown topic are indistinguishable to the caller (both 403)
- Log all webhook activity for audit trail
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shopkit.errors import InvalidWebhookError
from shopkit.types import ShopifyHeader
from shopkit.webhooks.models import STATUS_OK
from shopkit.webhooks.registry import WebhookRegistry

logger = logging.getLogger(__name__)


def _log_webhook(path: str, topic: str, shop: str, status: str) -> None:
    """Audit log for webhook activity."""
    logger.info("WEBHOOK_AUDIT path=%s topic=%s shop=%s status=%s", path, topic, shop, status)


async def handle_webhook(request: Request, registry: WebhookRegistry) -> JSONResponse:
    """Run one inbound webhook request through ``registry``."""
    start = time.monotonic()
    path = request.url.path
    topic = request.headers.get(ShopifyHeader.TOPIC.value, "unknown")
    shop = request.headers.get(ShopifyHeader.DOMAIN.value, "unknown")

    if not registry.is_webhook_path(path):
        _log_webhook(path, topic, shop, "unknown_path")
        return JSONResponse({"status": "not_found"}, status_code=404)

    body = await request.body()

    try:
        result = await registry.process(request.headers, body)
    except InvalidWebhookError as e:
        _log_webhook(path, topic, shop, f"missing_headers:{','.join(e.missing_headers)}")
        return JSONResponse({"status": "bad_request"}, status_code=400)
    except Exception:
        logger.exception("Webhook handler failed for %s (%s)", path, topic)
        _log_webhook(path, topic, shop, "dispatch_failed")
        return JSONResponse({"status": "error"}, status_code=500)

    if result.status_code == STATUS_OK:
        _log_webhook(path, topic, shop, "dispatched")
        content = {"status": "received"}
    else:
        _log_webhook(path, topic, shop, "rejected")
        content = {"status": "forbidden"}

    logger.debug("Webhook processed in %.1fms: %s", (time.monotonic() - start) * 1000, path)
    return JSONResponse(content, status_code=result.status_code, headers=result.headers)


def install_webhook_routes(app: FastAPI, registry: WebhookRegistry, prefix: str = "/webhooks") -> None:
    """Register the webhook endpoint on the FastAPI app.

    Callback paths passed to ``registry.register()`` must live under ``prefix``.
    """
    prefix = "/" + prefix.strip("/")

    @app.post(prefix + "/{subpath:path}", include_in_schema=False)
    async def shopify_webhook(request: Request, subpath: str):
        """Receive Shopify webhooks (signature-verified)."""
        return await handle_webhook(request, registry)

    logger.info("Webhook route registered: %s/{subpath}", prefix)
