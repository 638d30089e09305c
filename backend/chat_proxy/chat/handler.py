import json
import logging
from typing import Union

from pydantic import ValidationError

from ..config import API_KEY_ENV, CredentialProvider
from ..schemas import ChatReply, ChatRequest, ErrorBody, ProxyResponse
from .adapters.deepseek_adapter import DeepSeekClient, build_payload
from .errors import (
    ChatProxyError,
    MalformedRequest,
    MissingCredential,
    UnsupportedMethod,
    UpstreamError,
)

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}
# CORS: 브라우저 프론트엔드에서 호출 허용
SUCCESS_HEADERS = {**JSON_HEADERS, "Access-Control-Allow-Origin": "*"}


def _format_validation_error(e: ValidationError) -> str:
    first = e.errors()[0]
    loc = ".".join(str(p) for p in first.get("loc", ()))
    return f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))


def parse_chat_request(body: Union[bytes, str, None]) -> ChatRequest:
    # JSON 아님 / 객체 아님 / messages 비었거나 형식 오류 -> MalformedRequest(400)
    try:
        data = json.loads(body or b"")
    except ValueError as e:
        raise MalformedRequest(f"invalid JSON body ({e})") from e

    if not isinstance(data, dict):
        raise MalformedRequest("request body must be a JSON object")

    messages = data.get("messages")
    if not isinstance(messages, list) or not messages:
        raise MalformedRequest("messages is empty or malformed")

    try:
        return ChatRequest.model_validate(data)
    except ValidationError as e:
        raise MalformedRequest(_format_validation_error(e)) from e


class ChatProxyHandler:
    """DeepSeek 채팅 프록시. 모든 실패는 handle() 안에서 JSON 응답으로 변환된다."""

    def __init__(self, credentials: CredentialProvider, upstream: DeepSeekClient):
        self.credentials = credentials
        self.upstream = upstream

    def _require_api_key(self) -> str:
        api_key = self.credentials.get_api_key()
        if not api_key:
            # 운영자 진단용: 변수 이름만 남기고 값은 절대 기록하지 않음
            logger.error("Upstream API key is not configured: %s is unset or empty", API_KEY_ENV)
            raise MissingCredential(
                "server configuration error: the API key is not set. Add DEEPSEEK_API_KEY to the server environment."
            )
        return api_key

    async def _process(self, method: str, body: Union[bytes, str, None]) -> ProxyResponse:
        if method.upper() != "POST":
            raise UnsupportedMethod("only POST requests are supported")

        req = parse_chat_request(body)
        api_key = self._require_api_key()

        messages = [m.model_dump() for m in req.messages]
        payload = build_payload(messages, req.system, self.upstream.settings)
        logger.info(
            "Forwarding chat request: model=%s messages=%d system=%s",
            payload.model, len(payload.messages), req.system is not None,
        )

        reply = await self.upstream.complete(api_key, payload)
        return ProxyResponse(status_code=200, body=ChatReply(reply=reply).model_dump(), headers=dict(SUCCESS_HEADERS))

    async def handle(self, method: str, body: Union[bytes, str, None] = None) -> ProxyResponse:
        try:
            return await self._process(method, body)
        except UpstreamError as e:
            logger.error("DeepSeek API call failed (%s): %s", type(e).__name__, e.detail)
            return self._error_response(e)
        except MissingCredential as e:
            return self._error_response(e)
        except ChatProxyError as e:
            logger.warning("Rejected chat request (%d): %s", e.status_code, e.client_message)
            return self._error_response(e)
        except Exception:
            logger.exception("Unhandled error in chat proxy")
            return ProxyResponse(
                status_code=500,
                body=ErrorBody(error="internal server error").model_dump(),
                headers=dict(JSON_HEADERS),
            )

    @staticmethod
    def _error_response(e: ChatProxyError) -> ProxyResponse:
        return ProxyResponse(
            status_code=e.status_code,
            body=ErrorBody(error=e.client_message).model_dump(),
            headers=dict(JSON_HEADERS),
        )
