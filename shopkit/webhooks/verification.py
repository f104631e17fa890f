"""Webhook signature verification — constant-time HMAC.

Security contract:
- Signature is base64(HMAC-SHA256(secret, raw body)) over the exact bytes received
- All comparisons use hmac.compare_digest() (constant-time, no timing attacks)
- Unequal lengths are compared the same way, no early exit
- Empty secret -> verification always fails (fail-closed)
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)


def compute_hmac(secret: str, body: bytes) -> str:
    """Return the base64-encoded HMAC-SHA256 of ``body`` keyed with ``secret``."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def safe_compare(expected: str, provided: str) -> bool:
    """Compare two strings in time independent of where they first differ.

    Both sides are reduced to fixed-length SHA-256 digests first, so inputs
    of different lengths go through the same comparison path.
    """
    a = hashlib.sha256(expected.encode("utf-8")).digest()
    b = hashlib.sha256(provided.encode("utf-8")).digest()
    return hmac.compare_digest(a, b)


def verify_hmac(secret: str, body: bytes, signature: str | None) -> bool:
    """Verify a webhook signature header against the raw request body.

    Args:
        secret: App API secret key
        body: Raw request body bytes, never re-serialized
        signature: Value of the X-Shopify-Hmac-Sha256 header

    Returns:
        True if signature is valid
    """
    if not secret:
        logger.warning("Webhook secret not configured — rejecting webhook")
        return False
    if not signature:
        return False
    return safe_compare(compute_hmac(secret, body), signature)
