from fastapi import APIRouter, Depends, HTTPException
from datetime import datetime, timezone

from kafkaredis.api.dependencies import get_producer
from kafkaredis.core.config import settings
from kafkaredis.database import health_check as redis_health_check
from kafkaredis.infrastructure.kafka import MessageProducer

router = APIRouter(tags=["Health"])


async def check_dependencies(producer: MessageProducer) -> dict:
    """Redis와 Kafka Producer 상태 확인"""
    redis_status = await redis_health_check()
    redis_ok = redis_status.get("status") == "healthy"
    kafka_ok = producer.is_started

    return {
        "redis": redis_status,
        "kafka": "connected" if kafka_ok else "disconnected",
        "overall": redis_ok and kafka_ok
    }


@router.get("/health")
async def health_check(producer: MessageProducer = Depends(get_producer)):
    """Application health check endpoint"""
    try:
        dependencies = await check_dependencies(producer)

        return {
            "status": "healthy" if dependencies["overall"] else "unhealthy",
            "timestamp": datetime.now(timezone.utc),
            "redis": dependencies["redis"],
            "kafka": dependencies["kafka"],
            "service": settings.app_name
        }
    except Exception as e:
        raise HTTPException(
            status_code=503,
            detail=f"Health check failed: {str(e)}"
        )


@router.get("/health/ready")
async def readiness_check(producer: MessageProducer = Depends(get_producer)):
    """Kubernetes readiness probe endpoint"""
    dependencies = await check_dependencies(producer)

    if not dependencies["overall"]:
        raise HTTPException(
            status_code=503,
            detail="Service not ready - Redis or Kafka unavailable"
        )

    return {"status": "ready"}


@router.get("/health/live")
async def liveness_check():
    """Kubernetes liveness probe endpoint"""
    return {"status": "alive", "timestamp": datetime.now(timezone.utc)}
