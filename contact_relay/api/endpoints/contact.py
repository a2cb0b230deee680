"""
Contact form endpoint.

Pipeline: read body -> parse JSON -> validate -> build Slack message -> deliver.
Errors are raised as ContactError subclasses and rendered by the handler
registered in contact_relay.main.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Union

from fastapi import APIRouter, Depends, Request, status

from contact_relay.core.config import Settings
from contact_relay.core.errors import (
    BodyParseError,
    ContactError,
    PayloadTooLargeError,
    WebhookRejectedError,
    WebhookTransportError,
)
from contact_relay.core.slack_message import build_slack_message
from contact_relay.core.slack_notifier import DispatchOutcome, SlackNotifier
from contact_relay.models.contact import parse_submission

router = APIRouter()
logger = logging.getLogger(__name__)

DELIVERED_MESSAGE = "お問い合わせを送信しました"
NOT_CONFIGURED_MESSAGE = "お問い合わせを受け付けました（Slack未連携）"


@dataclass(frozen=True)
class ParsedOk:
    data: Any


@dataclass(frozen=True)
class ParseFailed:
    reason: str


ParsedBody = Union[ParsedOk, ParseFailed]


def parse_body(raw: bytes) -> ParsedBody:
    """Decode a request body as UTF-8 JSON"""
    try:
        return ParsedOk(json.loads(raw.decode("utf-8")))
    # ValueError covers JSONDecodeError and UnicodeDecodeError; deep nesting hits the recursion limit
    except (ValueError, RecursionError) as e:
        return ParseFailed(f"{type(e).__name__}: {str(e)}")


async def read_body(request: Request, limit: int) -> bytes:
    """
    Accumulate the request body, refusing anything larger than `limit` bytes.

    Raises:
        PayloadTooLargeError: If the declared or actual size exceeds the limit
    """
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise PayloadTooLargeError(f"declared body size {declared} exceeds {limit}")

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise PayloadTooLargeError(f"body exceeds {limit} bytes")
    return bytes(body)


def get_notifier(request: Request) -> SlackNotifier:
    return request.app.state.notifier


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.post("/contact", status_code=status.HTTP_200_OK)
async def submit_contact(
    request: Request,
    notifier: SlackNotifier = Depends(get_notifier),
    settings: Settings = Depends(get_app_settings),
):
    """
    Accept a contact form submission and relay it to Slack.

    Returns:
        dict: {"success": true, "message": ...} when delivered or when Slack is not configured
    """
    raw = await read_body(request, settings.max_body_bytes)

    parsed = parse_body(raw)
    if isinstance(parsed, ParseFailed):
        logger.error(f"❌ Could not parse contact request body: {parsed.reason}")
        raise BodyParseError(parsed.reason)

    try:
        submission = parse_submission(parsed.data)
    except ContactError as e:
        logger.info(f"Contact submission rejected: {e.detail}")
        raise

    try:
        payload = build_slack_message(submission)
        result = await notifier.notify(payload, submission)
    except Exception as e:
        logger.exception(f"❌ Unexpected error while relaying contact submission: {str(e)}")
        raise ContactError(str(e)) from e

    if result.ok:
        message = DELIVERED_MESSAGE if result.outcome == DispatchOutcome.DELIVERED else NOT_CONFIGURED_MESSAGE
        return {"success": True, "message": message}
    if result.outcome == DispatchOutcome.REJECTED:
        raise WebhookRejectedError(result.detail)
    raise WebhookTransportError(result.detail)
