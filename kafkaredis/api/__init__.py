from .health import router as health_router
from .kafka_redis import router as kafka_redis_router

__all__ = [
    "health_router",
    "kafka_redis_router",
]
