"""
kafka-redis-test - FastAPI Application

Kafka 메시지 발행/소비와 Redis 캐싱을 REST API로 시험하는 서비스
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from kafkaredis.api import health_router, kafka_redis_router
from kafkaredis.core.config import settings
from kafkaredis.core.logging import get_logger, setup_logging
from kafkaredis.database import init_redis, close_redis, get_redis
from kafkaredis.infrastructure.kafka import get_message_producer, provision_topics
from kafkaredis.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from kafkaredis.services import CacheService, MessageListener

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management"""
    # Startup
    setup_logging()
    logger.info(f"🚀 {settings.app_name} starting up...")

    await init_redis()
    await provision_topics()

    producer = get_message_producer()
    await producer.start()

    listener = MessageListener(CacheService(await get_redis()))
    consumers = listener.build_consumers()
    for consumer in consumers:
        await consumer.start()
    app.state.consumers = consumers

    logger.info(f"✅ {settings.app_name} started")

    yield

    # Shutdown
    logger.info(f"🛑 {settings.app_name} shutting down...")

    for consumer in consumers:
        await consumer.stop()

    await producer.stop()
    await close_redis()


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    lifespan=lifespan
)

app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health_router)
app.include_router(kafka_redis_router)

# Prometheus metrics
Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    return {
        "service": settings.app_name,
        "version": settings.version,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "kafkaredis.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
