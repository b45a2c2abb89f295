from typing import Optional, Dict, Any
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """표준 에러 응답 모델"""
    error: str
    message: str
    details: Optional[Dict[str, Any]] = None
    status_code: int


def create_error_response(
    error: str,
    message: str,
    status_code: int,
    details: Optional[Dict[str, Any]] = None
) -> ErrorResponse:
    """표준 에러 응답 생성"""
    return ErrorResponse(
        error=error,
        message=message,
        details=details,
        status_code=status_code
    )
