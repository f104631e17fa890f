"""Process configuration for the webhook registry.

The registry never reads the environment itself: callers build a Context
(usually via ``Context.from_env()``) and hand it to ``WebhookRegistry``.
Separate contexts give isolated registries per tenant and per test.

Environment variables:
- SHOPIFY_API_SECRET_KEY  (required) shared secret used to sign webhooks
- SHOPIFY_HOST_NAME       (required) public host receiving webhook callbacks
- SHOPIFY_API_VERSION     (optional) Admin API version, default ApiVersion.LATEST
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from shopkit.errors import ConfigError
from shopkit.types import ApiVersion

logger = logging.getLogger(__name__)


def _normalize_host(host_name: str) -> str:
    host = host_name.strip()
    for scheme in ("https://", "http://"):
        if host.startswith(scheme):
            host = host[len(scheme):]
    return host.rstrip("/")


@dataclass(frozen=True)
class Context:
    """Read-only settings consulted by registration and dispatch at call time."""

    api_secret_key: str
    host_name: str
    api_version: str = ApiVersion.LATEST.value

    def __post_init__(self) -> None:
        missing = []
        if not self.api_secret_key:
            missing.append("api_secret_key")
        if not self.host_name:
            missing.append("host_name")
        if missing:
            raise ConfigError(f"Missing required context values: {', '.join(missing)}")
        object.__setattr__(self, "host_name", _normalize_host(self.host_name))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Context:
        """Build a Context from SHOPIFY_* environment variables."""
        env = os.environ if environ is None else environ
        secret = env.get("SHOPIFY_API_SECRET_KEY", "").strip()
        host = env.get("SHOPIFY_HOST_NAME", "").strip()

        missing = [
            name
            for name, value in (
                ("SHOPIFY_API_SECRET_KEY", secret),
                ("SHOPIFY_HOST_NAME", host),
            )
            if not value
        ]
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

        api_version = env.get("SHOPIFY_API_VERSION", "").strip() or ApiVersion.LATEST.value
        if api_version not in {v.value for v in ApiVersion}:
            # Newer versions than the enum knows about are still accepted
            logger.warning("Unrecognized SHOPIFY_API_VERSION %s, using as-is", api_version)

        return cls(
            api_secret_key=secret,
            host_name=host,
            api_version=api_version,
        )
