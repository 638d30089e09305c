import os

import requests

#BACKEND = "http://localhost:8000"
BACKEND = os.getenv("BACKEND_URL", "http://localhost:8000")


class ChatServiceError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def build_chat_body(messages: list[dict], system: str | None = None) -> dict:
    body = {"messages": messages}
    if system and system.strip():
        body["system"] = system.strip()
    return body


# 프록시 타임아웃(60s)보다 조금 길게 기다린다
def send_chat(messages: list[dict], system: str | None = None, backend: str = BACKEND, timeout: float = 70) -> str:
    res = requests.post(f"{backend}/chat/messages", json=build_chat_body(messages, system), timeout=timeout)
    try:
        data = res.json()
    except ValueError:
        data = {}
    if res.status_code != 200:
        raise ChatServiceError(data.get("error") or f"HTTP {res.status_code}", res.status_code)
    return data.get("reply", "")
