from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..config import EnvCredentials, get_settings
from ..schemas import ChatReply, ErrorBody
from .adapters.deepseek_adapter import DeepSeekClient
from .handler import ChatProxyHandler

router = APIRouter(prefix="/chat", tags=["chat"])

# 메서드 검사(405)는 핸들러가 직접 하므로 모든 메서드를 받아서 넘긴다
ACCEPTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_handler() -> ChatProxyHandler:
    return ChatProxyHandler(EnvCredentials(), DeepSeekClient(get_settings()))


@router.api_route(
    "/messages",
    methods=ACCEPTED_METHODS,
    response_model=ChatReply,
    responses={
        400: {"model": ErrorBody, "description": "Malformed request"},
        405: {"model": ErrorBody, "description": "Only POST is supported"},
        500: {"model": ErrorBody, "description": "Server configuration error"},
        502: {"model": ErrorBody, "description": "Upstream AI service failure"},
    },
)
async def chat_messages(request: Request, handler: ChatProxyHandler = Depends(get_handler)):
    body = await request.body()
    result = await handler.handle(request.method, body)
    return JSONResponse(status_code=result.status_code, content=result.body, headers=result.headers)
