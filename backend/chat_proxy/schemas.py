from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Dict, Any, Literal

class ChatMessage(BaseModel):
    # name 등 추가 필드는 그대로 업스트림에 전달
    model_config = ConfigDict(extra="allow")

    role: Literal["system", "user", "assistant"] = Field(..., description="system|user|assistant 중 하나")
    content: str

class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(..., min_length=1)
    system: Optional[str] = Field(None, description="역할 설정 프롬프트(선택)")

    @field_validator("system", mode="before")
    @classmethod
    def _normalize_system(cls, v):
        # 문자열이 아니면 무시, 공백뿐이면 없는 것으로 취급
        if not isinstance(v, str):
            return None
        return v.strip() or None

class ChatCompletionPayload(BaseModel):
    model: str
    messages: List[Dict[str, Any]]
    temperature: float
    max_tokens: int
    stream: bool = False

class ChatReply(BaseModel):
    reply: str

class ErrorBody(BaseModel):
    error: str

class ProxyResponse(BaseModel):
    status_code: int
    body: Dict[str, Any]
    headers: Dict[str, str] = Field(default_factory=dict)
