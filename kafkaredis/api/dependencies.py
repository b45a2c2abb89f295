"""
API Dependencies

라우터에 Producer와 CacheService를 주입하는 FastAPI dependency 함수
"""

from kafkaredis.database import get_redis
from kafkaredis.infrastructure.kafka import MessageProducer, get_message_producer
from kafkaredis.services.cache_service import CacheService


def get_producer() -> MessageProducer:
    return get_message_producer()


async def get_cache_service() -> CacheService:
    """공유 Redis 클라이언트로 CacheService 생성"""
    return CacheService(await get_redis())
