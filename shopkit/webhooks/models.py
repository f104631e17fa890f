"""Webhook registry records and response models.

Records the registry hands out are plain dataclasses. Bodies coming back from
the Admin API are validated with pydantic before the registry trusts them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Union

from pydantic import BaseModel, ConfigDict, Field

# Handler signature: (canonical topic, shop domain, raw body) -> None | awaitable
WebhookHandler = Callable[[str, str, bytes], Union[None, Awaitable[None]]]

STATUS_OK = 200
STATUS_FORBIDDEN = 403


@dataclass(frozen=True)
class WebhookEntry:
    """A registered handler. At most one per topic."""

    path: str
    topic: str
    handler: WebhookHandler


@dataclass
class RegisterResult:
    success: bool
    result: Any = field(default_factory=dict)


@dataclass
class ProcessResult:
    status_code: int = STATUS_FORBIDDEN
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status_code == STATUS_OK


# ── Existence check response ─────────────────────────────────────────────


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")


class SubscriptionNode(_Lenient):
    id: str
    callback_url: str | None = Field(default=None, alias="callbackUrl")


class SubscriptionEdge(_Lenient):
    node: SubscriptionNode


class SubscriptionConnection(_Lenient):
    edges: list[SubscriptionEdge] = Field(default_factory=list)


class CheckData(_Lenient):
    webhook_subscriptions: SubscriptionConnection = Field(alias="webhookSubscriptions")


class WebhookCheckResponse(_Lenient):
    """``{"data": {"webhookSubscriptions": {"edges": [{"node": {...}}]}}}``"""

    data: CheckData

    def first(self) -> SubscriptionNode | None:
        edges = self.data.webhook_subscriptions.edges
        return edges[0].node if edges else None
