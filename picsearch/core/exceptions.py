"""커스텀 예외 정의 (Structured Exception Hierarchy)

모든 엔진은 실패를 이 계층으로 모읍니다. 어떤 예외도 내부에서 재시도하지 않습니다.
"""
from typing import Any, Optional


class ImageSearchException(Exception):
    """기본 예외 클래스 - 모든 커스텀 예외의 부모"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class TransportError(ImageSearchException):
    """연결/DNS/TLS/타임아웃 등 전송 계층 실패"""
    def __init__(self, url: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Request to {url} failed: {reason}"
        super().__init__(message, "TRANSPORT_ERROR", details or {"url": url, "reason": reason})
        self.url = url


class HttpStatusError(ImageSearchException):
    """2xx가 아닌 응답"""
    def __init__(self, engine: str, status: int, body: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        message = f"{engine} returned status code: {status}"
        super().__init__(message, "HTTP_STATUS", details or {"engine": engine, "status": status})
        self.engine = engine
        self.status = status
        self.body = body


class RateLimitError(HttpStatusError):
    """429 Too Many Requests"""
    def __init__(self, engine: str, body: Optional[str] = None):
        super().__init__(engine, 429, body)
        self.error_code = "RATE_LIMIT"


class UpstreamChallengeError(ImageSearchException):
    """봇 차단/점검 페이지 감지

    빈 결과로 돌려주면 '매칭 없음'과 구분되지 않으므로 별도 예외로 올립니다.
    """
    def __init__(self, engine: str, marker: str, details: Optional[dict[str, Any]] = None):
        message = f"{engine} answered with a challenge or maintenance page ({marker})"
        super().__init__(message, "UPSTREAM_CHALLENGE", details or {"engine": engine, "marker": marker})
        self.engine = engine
        self.marker = marker


class DecodeError(ImageSearchException):
    """호출자가 넘긴 base64/바이트 입력이 잘못된 경우"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Failed to decode image input: {reason}"
        super().__init__(message, "DECODE_ERROR", details or {"reason": reason})


class ExtractionError(ImageSearchException):
    """필수 HTML 노드/속성/스크립트가 없거나 내장 JSON 파싱 실패"""
    def __init__(self, engine: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Failed to extract {engine} results: {reason}"
        super().__init__(message, "EXTRACTION_ERROR", details or {"engine": engine, "reason": reason})
        self.engine = engine
        self.reason = reason


class UpstreamApiError(ImageSearchException):
    """JSON API가 음수 상태 코드/에러 메시지를 돌려준 경우"""
    def __init__(self, engine: str, status: int, upstream_message: Optional[str] = None):
        upstream_message = upstream_message or "Unknown error"
        message = f"{engine} API error {status}: {upstream_message}"
        super().__init__(message, "UPSTREAM_API_ERROR", {"engine": engine, "status": status})
        self.engine = engine
        self.status = status
        self.upstream_message = upstream_message


class EngineError(ImageSearchException):
    """엔진이 해당 진입점을 지원하지 않음"""
    def __init__(self, engine: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"{engine}: {reason}"
        super().__init__(message, "ENGINE_ERROR", details or {"engine": engine})
        self.engine = engine
