import asyncio
import pytest
import pytest_asyncio
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock
from httpx import AsyncClient, ASGITransport

from kafkaredis.main import app
from kafkaredis.api.dependencies import get_cache_service, get_producer
from kafkaredis.infrastructure.kafka import MessageProducer
from kafkaredis.services.cache_service import CacheService


@pytest.fixture
def mock_redis() -> AsyncMock:
    """redis.asyncio.Redis 대역"""
    return AsyncMock()


@pytest.fixture
def cache_service(mock_redis) -> CacheService:
    return CacheService(mock_redis)


@pytest_asyncio.fixture
async def send_future() -> asyncio.Future:
    """AIOKafkaProducer.send()가 돌려주는 전송 완료 future"""
    return asyncio.get_running_loop().create_future()


@pytest_asyncio.fixture
async def mock_kafka_producer(send_future) -> MagicMock:
    """AIOKafkaProducer 대역"""
    client = MagicMock()
    client.send = AsyncMock(return_value=send_future)
    client.start = AsyncMock()
    client.stop = AsyncMock()
    return client


@pytest_asyncio.fixture
async def message_producer(mock_kafka_producer) -> MessageProducer:
    """시작된 상태의 MessageProducer"""
    producer = MessageProducer()
    producer.producer = mock_kafka_producer
    producer._started = True
    return producer


@pytest.fixture
def mock_producer_service() -> MagicMock:
    """라우터에 주입할 MessageProducer 대역"""
    producer = MagicMock(spec=MessageProducer)
    producer.send_message = AsyncMock(return_value=None)
    producer.send_string_message = AsyncMock(return_value=None)
    return producer


@pytest.fixture
def mock_cache_service() -> MagicMock:
    """라우터에 주입할 CacheService 대역"""
    cache = MagicMock(spec=CacheService)
    cache.set_string = AsyncMock(return_value=True)
    cache.get_string = AsyncMock(return_value=None)
    return cache


@pytest_asyncio.fixture
async def client(mock_producer_service, mock_cache_service) -> AsyncGenerator[AsyncClient, None]:
    """테스트용 비동기 HTTP 클라이언트 (lifespan 없이 실행)"""
    app.dependency_overrides[get_producer] = lambda: mock_producer_service
    app.dependency_overrides[get_cache_service] = lambda: mock_cache_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


def make_record(
    value: str,
    key: str = None,
    topic: str = "test-topic",
    partition: int = 0,
    offset: int = 0
) -> MagicMock:
    """aiokafka ConsumerRecord 대역"""
    record = MagicMock()
    record.topic = topic
    record.partition = partition
    record.offset = offset
    record.key = key
    record.value = value
    return record


@pytest.fixture
def record_factory():
    return make_record
