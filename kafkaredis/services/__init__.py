from .cache_service import CacheService
from .message_listener import MessageListener

__all__ = [
    "CacheService",
    "MessageListener",
]
