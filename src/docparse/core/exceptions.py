"""
🚨 Document Parser Exceptions
"""
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse


class DocParseException(Exception):
    """문서 파서 기본 예외"""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# 입력 검증 예외 (400)
# =============================================================================


class InputValidationError(DocParseException):
    """클라이언트 입력 오류"""

    status_code = 400


class NoFileProvidedError(InputValidationError):
    """업로드 파일 없음"""

    def __init__(self) -> None:
        super().__init__("No file provided")


class FileTooLargeError(InputValidationError):
    """업로드 크기 초과"""

    def __init__(self, file_size: Optional[int], max_size: int, filename: str = "") -> None:
        max_mb = max_size // (1024 * 1024)
        super().__init__(
            f"File too large. Maximum size is {max_mb}MB.",
            {"file_size": file_size, "max_size": max_size, "filename": filename},
        )


# =============================================================================
# 처리 예외 (파이프라인 내부에서 낮은 신뢰도 결과로 변환됨)
# =============================================================================


class ExtractionError(DocParseException):
    """포맷별 텍스트 추출 실패"""

    pass


class CompletionError(DocParseException):
    """외부 LLM 호출 실패 또는 타임아웃"""

    pass


async def docparse_exception_handler(request: Request, exc: DocParseException) -> JSONResponse:
    """파서 예외를 {error} 응답으로 변환"""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
