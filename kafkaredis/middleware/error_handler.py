import traceback
from typing import Callable
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from aiokafka.errors import KafkaError
from redis.exceptions import ConnectionError as RedisConnectionError, RedisError, TimeoutError as RedisTimeoutError

from kafkaredis.core.config import settings
from kafkaredis.core.errors import create_error_response
from kafkaredis.core.logging import get_logger

logger = get_logger(__name__)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    통합 에러 처리 미들웨어

    라우터 밖으로 전파된 예외(의존성 주입 중 Redis 연결 실패 등)를
    표준화된 에러 응답으로 변환합니다.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.error(f"Redis connection error: {type(e).__name__}: {e}")
            return self._respond(
                "redis_connection_error",
                "Redis connection failed",
                status.HTTP_503_SERVICE_UNAVAILABLE,
                e
            )

        except RedisError as e:
            logger.error(f"Redis error: {type(e).__name__}: {e}")
            return self._respond(
                "redis_error",
                "Redis operation failed",
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                e
            )

        except KafkaError as e:
            logger.error(f"Kafka error: {type(e).__name__}: {e}")
            return self._respond(
                "kafka_error",
                "Kafka broker unavailable",
                status.HTTP_503_SERVICE_UNAVAILABLE,
                e
            )

        except Exception as e:
            # 예상하지 못한 모든 에러들
            logger.error(f"Unhandled exception: {type(e).__name__}: {e}", exc_info=True)

            error_detail = None
            if settings.debug:
                error_detail = {
                    "exception": str(e),
                    "type": type(e).__name__,
                    "traceback": traceback.format_exc()
                }

            error_response = create_error_response(
                "internal_server_error",
                "An unexpected error occurred",
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                error_detail
            )
            return JSONResponse(
                status_code=error_response.status_code,
                content=error_response.model_dump()
            )

    @staticmethod
    def _respond(error: str, message: str, status_code: int, exc: Exception) -> JSONResponse:
        error_response = create_error_response(
            error,
            message,
            status_code,
            {"detail": str(exc)} if settings.debug else None
        )
        return JSONResponse(
            status_code=error_response.status_code,
            content=error_response.model_dump()
        )
