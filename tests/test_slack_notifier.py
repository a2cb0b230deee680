import json

import httpx
import pytest

from contact_relay.core.config import Settings
from contact_relay.core.slack_notifier import DispatchOutcome, SlackNotifier
from contact_relay.models.contact import ContactSubmission
from tests.conftest import WEBHOOK_URL, FakeSlack

PAYLOAD = {"blocks": [{"type": "section", "text": {"type": "mrkdwn", "text": "*お名前:*\nA"}}]}


@pytest.mark.asyncio
async def test_unconfigured_never_touches_network(caplog):
    fake = FakeSlack()
    notifier = SlackNotifier("", transport=fake.transport)
    submission = ContactSubmission(name="A", email="a@x.com", service="S", message="M")

    result = await notifier.notify(PAYLOAD, submission)

    assert result.outcome == DispatchOutcome.NOT_CONFIGURED
    assert result.ok
    assert fake.requests == []
    assert "a@x.com" in caplog.text


@pytest.mark.asyncio
async def test_whitespace_url_from_settings_is_unconfigured():
    settings = Settings(_env_file=None, slack_webhook_url="   ")
    assert settings.slack_webhook_url == ""
    assert not settings.webhook_configured

    fake = FakeSlack()
    result = await SlackNotifier(settings.slack_webhook_url, transport=fake.transport).notify(PAYLOAD)
    assert result.outcome == DispatchOutcome.NOT_CONFIGURED
    assert fake.requests == []


@pytest.mark.asyncio
async def test_status_200_is_delivered():
    fake = FakeSlack(status_code=200)
    result = await SlackNotifier(WEBHOOK_URL, transport=fake.transport).notify(PAYLOAD)

    assert result.outcome == DispatchOutcome.DELIVERED
    assert result.detail is None
    assert len(fake.requests) == 1

    request = fake.requests[0]
    assert request.method == "POST"
    assert str(request.url) == WEBHOOK_URL
    assert request.headers["Content-Type"] == "application/json"
    assert int(request.headers["Content-Length"]) == len(request.content)
    assert json.loads(request.content.decode("utf-8")) == PAYLOAD


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [201, 204, 302, 400, 404, 500, 503])
async def test_any_other_status_is_rejected(status_code):
    fake = FakeSlack(status_code=status_code)
    result = await SlackNotifier(WEBHOOK_URL, transport=fake.transport).notify(PAYLOAD)

    assert result.outcome == DispatchOutcome.REJECTED
    assert result.detail == str(status_code)
    assert not result.ok
    assert len(fake.requests) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [httpx.ConnectError, httpx.ReadTimeout, httpx.RemoteProtocolError])
async def test_transport_errors_are_not_retried(error):
    fake = FakeSlack(error=error)
    result = await SlackNotifier(WEBHOOK_URL, transport=fake.transport).notify(PAYLOAD)

    assert result.outcome == DispatchOutcome.TRANSPORT_FAILURE
    assert error.__name__ in result.detail
    assert len(fake.requests) == 1
