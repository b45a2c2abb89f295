"""
API 요청 로깅 미들웨어

모든 API 요청과 응답을 구조화된 형태로 로깅합니다.
"""

import time
import uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from kafkaredis.core.logging import get_logger, set_request_context, clear_request_context, log_api_call

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """API 요청/응답 로깅 미들웨어"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        start_time = time.time()

        set_request_context(request_id)

        try:
            response = await call_next(request)

            duration_ms = (time.time() - start_time) * 1000
            log_api_call(
                logger,
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=duration_ms,
                request_id=request_id,
                query_params=dict(request.query_params) if request.query_params else None,
                client_ip=self._get_client_ip(request)
            )

            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000

            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                extra={
                    "event_type": "api_error",
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": duration_ms,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
                exc_info=True
            )

            raise

        finally:
            clear_request_context()

    @staticmethod
    def _get_client_ip(request: Request) -> str:
        """프록시 헤더를 고려한 클라이언트 IP"""
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip

        return request.client.host if request.client else "unknown"
