import pytest
from fastapi.testclient import TestClient

from chat_proxy.chat.adapters.deepseek_adapter import DeepSeekClient
from chat_proxy.chat.handler import ChatProxyHandler
from chat_proxy.chat.router import get_handler
from chat_proxy.config import UpstreamSettings
from chat_proxy.main import app

UPSTREAM_BASE = "https://api.deepseek.test"
COMPLETIONS_URL = f"{UPSTREAM_BASE}/v1/chat/completions"


class FakeCredentials:
    """Stands in for the environment-backed key reader."""

    def __init__(self, api_key):
        self.api_key = api_key
        self.calls = 0

    def get_api_key(self):
        self.calls += 1
        return self.api_key


@pytest.fixture
def settings() -> UpstreamSettings:
    return UpstreamSettings(base_url=UPSTREAM_BASE, model="deepseek-chat")


@pytest.fixture
def credentials() -> FakeCredentials:
    return FakeCredentials("sk-test-123")


@pytest.fixture
def handler(settings, credentials) -> ChatProxyHandler:
    return ChatProxyHandler(credentials, DeepSeekClient(settings))


@pytest.fixture
def client(handler):
    app.dependency_overrides[get_handler] = lambda: handler
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
