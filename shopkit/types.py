"""Shared enums: Shopify request headers and Admin API versions."""

from __future__ import annotations

from enum import StrEnum


class ShopifyHeader(StrEnum):
    """Headers Shopify sends with (and expects on) API traffic."""

    ACCESS_TOKEN = "X-Shopify-Access-Token"
    HMAC = "X-Shopify-Hmac-Sha256"
    TOPIC = "X-Shopify-Topic"
    DOMAIN = "X-Shopify-Shop-Domain"


class ApiVersion(StrEnum):
    """Admin API versions this package has been exercised against."""

    JULY23 = "2023-07"
    OCTOBER23 = "2023-10"
    JANUARY24 = "2024-01"
    APRIL24 = "2024-04"
    JULY24 = "2024-07"
    OCTOBER24 = "2024-10"
    JANUARY25 = "2025-01"
    UNSTABLE = "unstable"

    LATEST = "2025-01"
