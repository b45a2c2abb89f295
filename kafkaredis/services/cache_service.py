"""
캐시 서비스

Redis 문자열 저장/조회, 객체 JSON 저장, 키 관리와
사용자 이벤트 캐싱을 제공합니다. 모든 메서드는 실패 시 로그를 남기고
None 또는 False를 반환합니다.
"""

import json
from datetime import timedelta
from typing import Any, Optional, Type
import redis.asyncio as redis
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel

from kafkaredis.core.logging import get_logger, log_cache_operation

logger = get_logger(__name__)

# Redis 키 패턴
USER_EVENT_KEY_PREFIX = "user:event:"
TEST_USER_KEY_PREFIX = "test:user:"

# 캐시 설정
USER_EVENT_TTL = timedelta(hours=24)


class CacheService:
    """Redis 캐시 서비스"""

    def __init__(self, client: redis.Redis):
        self.redis = client

    async def set_string(
        self,
        key: str,
        value: str,
        expiration: Optional[timedelta] = None
    ) -> bool:
        """
        문자열 저장

        Args:
            key: Redis 키
            value: 저장할 문자열
            expiration: 만료 시간 (없으면 영구 저장)
        """
        logger.debug(
            f"Set string: {key}, length={len(value) if value is not None else 0}, "
            f"expiration={expiration}"
        )
        try:
            if expiration is None:
                await self.redis.set(key, value)
            else:
                await self.redis.set(key, value, ex=expiration)
            log_cache_operation(logger, "set", key, expiration=str(expiration))
            return True
        except Exception as e:
            logger.error(f"Failed to set string {key}: {e}", exc_info=True)
            return False

    async def get_string(self, key: str) -> Optional[str]:
        """문자열 조회"""
        try:
            value = await self.redis.get(key)
            if value is not None:
                logger.debug(f"Cache hit: {key}")
            else:
                logger.debug(f"Cache miss: {key}")
            return value
        except Exception as e:
            logger.error(f"Failed to get string {key}: {e}", exc_info=True)
            return None

    async def set_object(
        self,
        key: str,
        obj: Any,
        expiration: Optional[timedelta] = None
    ) -> bool:
        """객체를 JSON으로 변환하여 저장 (날짜는 ISO-8601)"""
        try:
            json_value = json.dumps(jsonable_encoder(obj), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize object for {key} ({type(obj).__name__}): {e}")
            return False

        logger.debug(f"Object serialized for {key}: type={type(obj).__name__}, length={len(json_value)}")
        return await self.set_string(key, json_value, expiration)

    async def get_object(
        self,
        key: str,
        model: Optional[Type[BaseModel]] = None
    ) -> Any:
        """
        JSON으로 저장된 객체 조회

        Args:
            key: Redis 키
            model: 변환할 pydantic 모델 (없으면 dict/list 그대로 반환)
        """
        try:
            json_value = await self.redis.get(key)
            if json_value is None:
                logger.debug(f"Cache miss: {key}")
                return None

            if model is not None:
                return model.model_validate_json(json_value)
            return json.loads(json_value)
        except Exception as e:
            logger.error(f"Failed to get object {key}: {e}", exc_info=True)
            return None

    async def exists(self, key: str) -> bool:
        try:
            result = bool(await self.redis.exists(key))
            logger.debug(f"Key exists: {key} = {result}")
            return result
        except Exception as e:
            logger.error(f"Failed to check key {key}: {e}", exc_info=True)
            return False

    async def delete(self, key: str) -> bool:
        try:
            await self.redis.delete(key)
            log_cache_operation(logger, "delete", key)
            return True
        except Exception as e:
            logger.error(f"Failed to delete {key}: {e}", exc_info=True)
            return False

    async def set_expiration(self, key: str, expiration: timedelta) -> bool:
        """기존 키의 만료 시간 설정"""
        try:
            await self.redis.expire(key, expiration)
            log_cache_operation(logger, "expire", key, expiration=str(expiration))
            return True
        except Exception as e:
            logger.error(f"Failed to set expiration for {key} ({expiration}): {e}", exc_info=True)
            return False

    # =========================================================================
    # 사용자 이벤트 캐싱
    # =========================================================================

    async def cache_user_event(self, user_id: str, event_data: str) -> bool:
        """사용자 이벤트를 24시간 동안 캐싱"""
        cache_key = f"{USER_EVENT_KEY_PREFIX}{user_id}"
        logger.info(f"Caching user event: user_id={user_id}, key={cache_key}")
        return await self.set_string(cache_key, event_data, USER_EVENT_TTL)

    async def get_user_event(self, user_id: str) -> Optional[str]:
        return await self.get_string(f"{USER_EVENT_KEY_PREFIX}{user_id}")
