"""채팅 프록시 실패 유형. 각 예외가 HTTP 상태코드와 클라이언트용 메시지를 가진다."""


class ChatProxyError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    @property
    def client_message(self) -> str:
        return self.detail


class UnsupportedMethod(ChatProxyError):
    status_code = 405


class MalformedRequest(ChatProxyError):
    status_code = 400

    @property
    def client_message(self) -> str:
        return f"request format error: {self.detail}"


class MissingCredential(ChatProxyError):
    status_code = 500


class UpstreamError(ChatProxyError):
    status_code = 502

    @property
    def client_message(self) -> str:
        return f"AI service temporarily unavailable: {self.detail}"


class UpstreamTransportError(UpstreamError):
    pass


class UpstreamParseError(UpstreamError):
    pass


class UpstreamAPIError(UpstreamError):
    pass
