import pytest
import requests

import chat_client
from chat_client import ChatServiceError, build_chat_body, send_chat


class FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def test_build_chat_body_omits_blank_system():
    msgs = [{"role": "user", "content": "hi"}]
    assert build_chat_body(msgs, "  ") == {"messages": msgs}
    assert build_chat_body(msgs, " be nice ") == {"messages": msgs, "system": "be nice"}


def test_send_chat_returns_reply(monkeypatch):
    seen = {}

    def fake_post(url, json, timeout):
        seen.update(url=url, json=json, timeout=timeout)
        return FakeResponse(200, {"reply": "hello there"})

    monkeypatch.setattr(chat_client.requests, "post", fake_post)
    reply = send_chat([{"role": "user", "content": "hi"}], backend="http://proxy.test")

    assert reply == "hello there"
    assert seen["url"] == "http://proxy.test/chat/messages"
    assert seen["json"] == {"messages": [{"role": "user", "content": "hi"}]}


@pytest.mark.parametrize(
    "response, message",
    [
        (FakeResponse(502, {"error": "AI service temporarily unavailable: rate limited"}), "rate limited"),
        (FakeResponse(504), "HTTP 504"),
    ],
)
def test_send_chat_raises_proxy_error(monkeypatch, response, message):
    monkeypatch.setattr(chat_client.requests, "post", lambda *a, **kw: response)
    with pytest.raises(ChatServiceError, match=message) as exc:
        send_chat([{"role": "user", "content": "hi"}])
    assert exc.value.status_code == response.status_code


def test_send_chat_propagates_network_errors(monkeypatch):
    def fake_post(*a, **kw):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(chat_client.requests, "post", fake_post)
    with pytest.raises(requests.ConnectionError):
        send_chat([{"role": "user", "content": "hi"}])
