"""
Redis 클라이언트 관리

CacheService와 리스너가 공유하는 문자열 전용(decode_responses) 클라이언트.
"""

import time
from typing import Optional
import redis.asyncio as redis

from kafkaredis.core.config import settings
from kafkaredis.core.logging import get_logger

logger = get_logger(__name__)

redis_client: Optional[redis.Redis] = None


def create_redis_client() -> redis.Redis:
    """설정값으로 연결 풀 기반 클라이언트 생성 (연결은 첫 명령 시점)"""
    return redis.from_url(
        settings.redis_url,
        max_connections=settings.redis_max_connections,
        retry_on_timeout=settings.redis_retry_on_timeout,
        socket_keepalive=settings.redis_socket_keepalive,
        decode_responses=True,
        encoding="utf-8"
    )


async def init_redis():
    """클라이언트 생성 후 PING으로 연결 확인. 실패하면 시작 중단"""
    global redis_client

    client = create_redis_client()
    try:
        await client.ping()
    except Exception as e:
        logger.error(f"Redis unavailable at {settings.redis_url}: {e}")
        await client.aclose()
        raise

    redis_client = client
    logger.info(
        f"✅ Redis connected: {settings.redis_url} "
        f"(max_connections={settings.redis_max_connections})"
    )


async def close_redis():
    global redis_client

    if redis_client is None:
        return

    try:
        # 연결 풀까지 함께 정리
        await redis_client.aclose(close_connection_pool=True)
        logger.info("Redis connection closed")
    except Exception as e:
        logger.error(f"Error closing Redis connection: {e}")
    finally:
        redis_client = None


async def get_redis() -> redis.Redis:
    """공유 클라이언트 반환 (없으면 초기화)"""
    if redis_client is None:
        await init_redis()
    return redis_client


async def health_check() -> dict:
    """readiness 판단용 PING 결과와 응답 시간"""
    try:
        client = await get_redis()
        started = time.perf_counter()
        await client.ping()
        return {
            "status": "healthy",
            "ping_ms": round((time.perf_counter() - started) * 1000, 2),
        }
    except Exception as e:
        logger.warning(f"Redis health check failed: {e}")
        return {"status": "unhealthy", "error": str(e)}
