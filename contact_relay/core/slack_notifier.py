"""
Slack Incoming Webhook delivery for contact notifications.

A notification is sent at most once. There is no retry: a rejected or failed
delivery is logged with its diagnostic detail and reported to the caller only
as an outcome.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import httpx

from contact_relay.models.contact import ContactSubmission

logger = logging.getLogger(__name__)


class DispatchOutcome(str, Enum):
    NOT_CONFIGURED = "not_configured"
    DELIVERED = "delivered"
    REJECTED = "rejected"
    TRANSPORT_FAILURE = "transport_failure"


@dataclass(frozen=True)
class DispatchResult:
    outcome: DispatchOutcome
    # Status code or error description, for logs only
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome in (DispatchOutcome.DELIVERED, DispatchOutcome.NOT_CONFIGURED)


class SlackNotifier:
    """
    Posts Block Kit payloads to a single Slack Incoming Webhook.

    Args:
        webhook_url: Webhook endpoint; empty string disables delivery
        timeout: Seconds to wait for connect/read/write before giving up
        transport: Optional httpx transport (used to swap the network in tests)
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.webhook_url = webhook_url or ""
        self.timeout = timeout
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.webhook_url)

    async def notify(self, payload: Dict[str, Any], submission: Optional[ContactSubmission] = None) -> DispatchResult:
        """
        Deliver a payload to the webhook.

        Returns:
            DispatchResult: DELIVERED only when Slack answers exactly 200
        """
        if not self.configured:
            logger.warning("⚠️ Slack webhook URL is not configured - notification not sent")
            if submission is not None:
                logger.warning(f"📥 Contact received for manual follow-up: {submission.model_dump()}")
            return DispatchResult(DispatchOutcome.NOT_CONFIGURED)

        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
        }

        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response = await client.post(self.webhook_url, content=body, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"❌ Slack webhook delivery failed: {type(e).__name__}: {str(e)}")
            return DispatchResult(DispatchOutcome.TRANSPORT_FAILURE, detail=f"{type(e).__name__}: {str(e)}")

        if response.status_code != 200:
            logger.error(f"❌ Slack webhook rejected notification: HTTP {response.status_code}")
            return DispatchResult(DispatchOutcome.REJECTED, detail=str(response.status_code))

        logger.info("✅ Contact notification delivered to Slack")
        return DispatchResult(DispatchOutcome.DELIVERED)
