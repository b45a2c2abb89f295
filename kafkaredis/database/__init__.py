from .redis import init_redis, close_redis, get_redis, health_check

__all__ = [
    "init_redis",
    "close_redis",
    "get_redis",
    "health_check",
]
