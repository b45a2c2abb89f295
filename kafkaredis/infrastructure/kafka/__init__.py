"""
Kafka Infrastructure

Producer, Consumer, Admin, Config 등 Kafka 관련 인프라 코드
"""

from .producer import MessageProducer, get_message_producer
from .consumer import MessageConsumer, Acknowledgment
from .admin import provision_topics
from .config import KafkaConfig, kafka_config

__all__ = [
    'MessageProducer',
    'get_message_producer',
    'MessageConsumer',
    'Acknowledgment',
    'provision_topics',
    'KafkaConfig',
    'kafka_config',
]
