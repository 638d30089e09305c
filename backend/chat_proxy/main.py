import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .chat.router import router as chat_router
from .config import EnvCredentials, get_settings
from .schemas import ErrorBody

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title="DeepSeek Chat Proxy")
app.include_router(chat_router)


# TRACE 나 임의 메서드처럼 라우터가 받지 않는 요청도 {"error": ...} 형식으로 응답
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = "only POST requests are supported" if exc.status_code == 405 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorBody(error=message).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.get("/healthz")
def healthz():
    cfg = get_settings()
    return {
        "status": "ok",
        "model": cfg.model,
        "upstream": cfg.base_url,
        # 키 값이 아니라 설정 여부만 노출
        "credential_configured": EnvCredentials().get_api_key() is not None,
    }
