import os
from functools import lru_cache
from typing import Optional, Protocol

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

API_KEY_ENV = "DEEPSEEK_API_KEY"


class UpstreamSettings(BaseModel):
    # DeepSeek 는 OpenAI 호환: base_url/model 만 바꾸면 api.openai.com 으로도 동작
    base_url: str = Field(default_factory=lambda: os.getenv("DEEPSEEK_BASE_URL", "https://api.deepseek.com"))
    model: str = Field(default_factory=lambda: os.getenv("DEEPSEEK_MODEL", "deepseek-chat"))
    temperature: float = 0.7
    max_tokens: int = 1024
    timeout: float = 60.0  # 초 단위, 요청~응답 전체 구간


@lru_cache()
def get_settings() -> UpstreamSettings:
    return UpstreamSettings()


class CredentialProvider(Protocol):
    def get_api_key(self) -> Optional[str]: ...


class EnvCredentials:
    """호출할 때마다 환경변수에서 API 키를 새로 읽는다(값은 절대 로그에 남기지 않음)."""

    def __init__(self, var_name: str = API_KEY_ENV):
        self.var_name = var_name

    def get_api_key(self) -> Optional[str]:
        value = (os.getenv(self.var_name) or "").strip()
        return value or None
