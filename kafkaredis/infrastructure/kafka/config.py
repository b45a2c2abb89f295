"""
Kafka Configuration
"""

from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings


class KafkaConfig(BaseSettings):
    """Kafka 설정"""

    # Kafka 브로커 주소
    bootstrap_servers: List[str] = Field(
        default=["localhost:9092"],
        description="Kafka bootstrap servers"
    )

    # Producer 설정
    producer_acks: str = Field(
        default="all",
        description="Producer acks: 'all', '1', '0'"
    )
    producer_request_timeout_ms: int = Field(
        default=30000,
        description="Request timeout in milliseconds"
    )

    # Consumer 설정
    consumer_auto_offset_reset: str = Field(
        default="earliest",
        description="Auto offset reset: 'earliest', 'latest'"
    )
    consumer_enable_auto_commit: bool = Field(
        default=False,
        description="Enable auto commit (listeners acknowledge manually when off)"
    )
    consumer_session_timeout_ms: int = Field(
        default=30000,
        description="Session timeout in milliseconds"
    )

    # Topic 설정
    topic_test: str = "test-topic"
    topic_user_events: str = "user-events"
    topic_partitions: int = 3
    topic_replication_factor: int = 1

    # Consumer group 설정
    group_test: str = "test-group"
    group_user: str = "user-group"

    class Config:
        env_prefix = "KAFKA_"
        case_sensitive = False


# Singleton instance
kafka_config = KafkaConfig()
