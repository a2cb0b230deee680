"""
Slack Block Kit message builder for contact form notifications.

The message layout is:
    header   - fixed title
    section  - name and email side by side
    section  - requested consultation (service)
    section  - free-text message
    context  - submission time in Japan Standard Time
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from contact_relay.models.contact import ContactSubmission

# Asia/Tokyo has no daylight saving time, so a fixed offset is exact
JST = timezone(timedelta(hours=9), name="JST")

HEADER_TEXT = "📩 新しいお問い合わせ"
NAME_LABEL = "お名前"
EMAIL_LABEL = "メールアドレス"
SERVICE_LABEL = "ご相談内容"
MESSAGE_LABEL = "メッセージ"
SENT_AT_LABEL = "送信日時"


def escape_mrkdwn(text: str) -> str:
    """Escape the control characters Slack reserves in mrkdwn text"""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def format_timestamp(now: datetime) -> str:
    """
    Render a timezone-aware datetime the way the ja-JP locale does in Tokyo,
    e.g. 2025/1/5 9:03:07.
    """
    if now.tzinfo is None or now.utcoffset() is None:
        raise ValueError("timestamp must be timezone-aware")

    local = now.astimezone(JST)
    return f"{local.year}/{local.month}/{local.day} {local.hour}:{local.minute:02d}:{local.second:02d}"


def _labelled(label: str, value: str) -> Dict[str, str]:
    return {"type": "mrkdwn", "text": f"*{label}:*\n{escape_mrkdwn(value)}"}


def build_slack_message(submission: ContactSubmission, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Build the Slack webhook payload for a validated submission.

    Args:
        submission: Validated contact submission
        now: Submission time (defaults to the current UTC time)

    Returns:
        dict: JSON-serializable Block Kit payload
    """
    if now is None:
        now = datetime.now(timezone.utc)

    return {
        "blocks": [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": HEADER_TEXT, "emoji": True},
            },
            {
                "type": "section",
                "fields": [
                    _labelled(NAME_LABEL, submission.name),
                    _labelled(EMAIL_LABEL, submission.email),
                ],
            },
            {
                "type": "section",
                "fields": [_labelled(SERVICE_LABEL, submission.service)],
            },
            {
                "type": "section",
                "text": _labelled(MESSAGE_LABEL, submission.message),
            },
            {
                "type": "context",
                "elements": [
                    {"type": "mrkdwn", "text": f"{SENT_AT_LABEL}: {format_timestamp(now)}"},
                ],
            },
        ]
    }
