"""
Kafka/Redis 테스트 API 엔드포인트

요청 본문은 가공하지 않은 문자열로 받습니다.
"""

import time
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from kafkaredis.api.dependencies import get_cache_service, get_producer
from kafkaredis.core.config import settings
from kafkaredis.core.logging import get_logger
from kafkaredis.infrastructure.kafka import MessageProducer, kafka_config
from kafkaredis.schemas import IntegrationTestResponse, ServiceHealthResponse
from kafkaredis.services.cache_service import CacheService, TEST_USER_KEY_PREFIX

logger = get_logger(__name__)

router = APIRouter(prefix="/api/test", tags=["Test"])


async def _read_body(request: Request) -> str:
    return (await request.body()).decode("utf-8", errors="replace")


@router.post("/kafka/send", response_class=PlainTextResponse)
async def send_kafka_message(
    request: Request,
    topic: str = Query(...),
    key: Optional[str] = Query(None),
    producer: MessageProducer = Depends(get_producer)
):
    """
    Kafka 메시지 발행

    - **topic**: 발행할 토픽
    - **key**: 파티션 키 (선택사항)
    - body: 메시지 문자열
    """
    try:
        message = await _read_body(request)
        logger.info(f"Kafka send requested: topic={topic}, key={key}, length={len(message)}")

        if key and key.strip():
            await producer.send_message(topic, message, key=key)
        else:
            await producer.send_message(topic, message)

        return PlainTextResponse(f"Message sent to Kafka topic: {topic}")

    except Exception as e:
        logger.error(f"Kafka send failed: topic={topic}, error={e}", exc_info=True)
        return PlainTextResponse(
            f"Error sending message: {e}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@router.post("/redis/set", response_class=PlainTextResponse)
async def set_redis_value(
    request: Request,
    key: str = Query(...),
    cache: CacheService = Depends(get_cache_service)
):
    """Redis 값 저장 (만료 없음)"""
    try:
        value = await _read_body(request)
        logger.info(f"Redis set requested: key={key}, length={len(value)}")

        await cache.set_string(key, value)
        return PlainTextResponse(f"Value set in Redis for key: {key}")

    except Exception as e:
        logger.error(f"Redis set failed: key={key}, error={e}", exc_info=True)
        return PlainTextResponse(
            f"Error setting value: {e}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@router.get("/redis/get", response_class=PlainTextResponse)
async def get_redis_value(
    key: str = Query(...),
    cache: CacheService = Depends(get_cache_service)
):
    """Redis 값 조회. 키가 없으면 404"""
    try:
        value = await cache.get_string(key)
        if value is None:
            logger.info(f"Redis get miss: key={key}")
            return Response(status_code=status.HTTP_404_NOT_FOUND)

        return PlainTextResponse(value)

    except Exception as e:
        logger.error(f"Redis get failed: key={key}, error={e}", exc_info=True)
        return PlainTextResponse(
            f"Error getting value: {e}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@router.post("/integration/test")
async def integration_test(
    request: Request,
    user_id: str = Query(..., alias="userId"),
    producer: MessageProducer = Depends(get_producer),
    cache: CacheService = Depends(get_cache_service)
):
    """
    통합 테스트

    user-events 토픽에 사용자 이벤트를 발행하고
    같은 데이터를 test:user:{userId} 키로 Redis에 저장합니다.
    """
    try:
        data = await _read_body(request)
        logger.info(f"Integration test requested: user_id={user_id}, length={len(data)}")

        await producer.send_message(kafka_config.topic_user_events, data, key=user_id)

        redis_key = f"{TEST_USER_KEY_PREFIX}{user_id}"
        await cache.set_string(redis_key, data)

        result = IntegrationTestResponse(
            status="success",
            message="Data sent to Kafka and stored in Redis",
            user_id=user_id,
            redis_key=redis_key
        )
        return JSONResponse(content=result.model_dump(by_alias=True))

    except Exception as e:
        logger.error(f"Integration test failed: user_id={user_id}, error={e}", exc_info=True)
        result = IntegrationTestResponse(status="error", message=str(e), user_id=user_id)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=result.model_dump(by_alias=True, exclude_none=True)
        )


@router.get("/health", response_model=ServiceHealthResponse)
async def health_check():
    return ServiceHealthResponse(
        status="UP",
        service=settings.app_name,
        timestamp=str(int(time.time() * 1000))
    )
