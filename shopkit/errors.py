"""Exception hierarchy.

Signature mismatches and unknown topics are *results* (403), not errors.
Everything raised from this package derives from ShopkitError.
"""

from __future__ import annotations

from typing import Any


class ShopkitError(Exception):
    """Base class for all shopkit errors."""


class ConfigError(ShopkitError):
    """Required configuration is missing or malformed."""


class InvalidWebhookError(ShopkitError):
    """Inbound webhook request lacks the headers needed to process it."""

    def __init__(self, missing_headers: list[str]):
        self.missing_headers = list(missing_headers)
        super().__init__(
            "Missing one or more of the required HTTP headers to process webhooks: "
            f"[{', '.join(self.missing_headers)}]"
        )


class HttpRequestError(ShopkitError):
    """The platform could not be reached (DNS, connect, read timeout...)."""


class HttpResponseError(HttpRequestError):
    """The platform answered with a non-2xx status."""

    def __init__(self, message: str, code: int, status_text: str = "", body: Any = None):
        super().__init__(message)
        self.code = code
        self.status_text = status_text
        self.body = body


class InvalidResponseError(ShopkitError):
    """A response body did not have the shape the caller relies on."""

    def __init__(self, message: str, body: Any = None):
        super().__init__(message)
        self.body = body
