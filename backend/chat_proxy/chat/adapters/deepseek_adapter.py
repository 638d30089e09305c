import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from ...config import UpstreamSettings
from ...schemas import ChatCompletionPayload
from ..errors import UpstreamAPIError, UpstreamParseError, UpstreamTransportError

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_PATH = "/v1/chat/completions"
REPLY_PLACEHOLDER = "(unable to parse AI reply)"

# 모델 예: deepseek-chat(V3, 일반 대화), deepseek-reasoner(R1, 추론, 느리므로 타임아웃 주의)

def build_payload(messages: List[dict], system: Optional[str], settings: UpstreamSettings) -> ChatCompletionPayload:
    # system 프롬프트가 있으면 맨 앞에 끼워 넣고, 없으면 그대로 전달
    full_messages = [{"role": "system", "content": system}, *messages] if system else list(messages)
    return ChatCompletionPayload(
        model=settings.model,
        messages=full_messages,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        stream=False,
    )

def extract_reply(completion: Any) -> str:
    choices = completion.get("choices") if isinstance(completion, dict) else None
    first = choices[0] if isinstance(choices, list) and choices else None
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    # 본문이 비어 있어도 실패로 보지 않고 안내 문구로 대체
    return content if isinstance(content, str) and content else REPLY_PLACEHOLDER

def parse_completion(raw: bytes) -> str:
    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise UpstreamParseError(f"failed to parse upstream response: {e}") from e

    if parsed is None:
        # JSON null 은 응답 본문이 없는 것과 같다
        raise UpstreamParseError("failed to parse upstream response: empty (null) body")

    if isinstance(parsed, dict):
        err = parsed.get("error")
        if isinstance(err, dict) or err:
            message = err.get("message") if isinstance(err, dict) else None
            raise UpstreamAPIError(message or "upstream API returned an error")

    return extract_reply(parsed)


class DeepSeekClient:
    """DeepSeek(OpenAI 호환) chat completions 호출기. 호출마다 새 AsyncClient 를 열고 닫는다."""

    def __init__(self, settings: UpstreamSettings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport  # 테스트에서 httpx.MockTransport 주입용

    async def _post(self, content: bytes, headers: Dict[str, str]) -> bytes:
        async with httpx.AsyncClient(
            base_url=self.settings.base_url,
            timeout=self.settings.timeout,
            transport=self._transport,
        ) as client:
            r = await client.post(CHAT_COMPLETIONS_PATH, content=content, headers=headers)
            return r.content

    async def complete(self, api_key: str, payload: ChatCompletionPayload) -> str:
        content = json.dumps(payload.model_dump(), ensure_ascii=False).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
            "Content-Length": str(len(content)),
        }

        timeout = self.settings.timeout
        try:
            # wait_for 가 만료되면 요청 태스크가 취소되고 async with 가 연결을 닫는다
            raw = await asyncio.wait_for(self._post(content, headers), timeout=timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise UpstreamTransportError(f"request timed out ({timeout:g}s)") from e
        except httpx.HTTPError as e:
            raise UpstreamTransportError(str(e) or type(e).__name__) from e

        logger.debug("upstream responded with %d bytes", len(raw))
        return parse_completion(raw)
