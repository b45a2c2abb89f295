from .kafka_redis import IntegrationTestResponse, ServiceHealthResponse

__all__ = [
    "IntegrationTestResponse",
    "ServiceHealthResponse",
]
