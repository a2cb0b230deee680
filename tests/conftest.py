"""
Pytest configuration and fixtures
"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from contact_relay.core.config import Settings
from contact_relay.main import create_app

WEBHOOK_URL = "https://hooks.slack.com/services/T000/B000/XXXX"

VALID_BODY = {"name": "A", "email": "a@x.com", "service": "S", "message": "M"}


class FakeSlack:
    """Records webhook requests and answers with a fixed status or error"""

    def __init__(self, status_code=200, error=None):
        self.status_code = status_code
        self.error = error
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(f"simulated {self.error.__name__}", request=request)
        return httpx.Response(self.status_code, text="ok" if self.status_code == 200 else "no_service")

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)

    def payloads(self):
        return [json.loads(r.content.decode("utf-8")) for r in self.requests]


@pytest.fixture
def static_dir(tmp_path):
    (tmp_path / "index.html").write_text("<h1>Hello</h1>", encoding="utf-8")
    (tmp_path / "style.css").write_text("body { margin: 0; }", encoding="utf-8")
    return tmp_path


@pytest.fixture
def make_client(static_dir):
    """Build a TestClient against a fake Slack endpoint"""
    clients = []

    def _make(webhook_url=WEBHOOK_URL, fake_slack=None, **overrides):
        settings = Settings(_env_file=None, slack_webhook_url=webhook_url, static_dir=str(static_dir), **overrides)
        transport = fake_slack.transport if fake_slack is not None else None
        client = TestClient(create_app(settings, transport=transport))
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)
