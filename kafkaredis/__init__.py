"""
kafka-redis-test

Kafka 발행/소비와 Redis 캐싱을 시험하는 FastAPI 서비스
"""

__version__ = "1.0.0"
