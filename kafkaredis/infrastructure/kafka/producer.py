"""
Kafka Producer

문자열 메시지와 JSON 직렬화된 객체를 Kafka로 발행하는 Producer
"""

import asyncio
import json
import logging
from functools import partial
from typing import Any, Optional
from aiokafka import AIOKafkaProducer
from fastapi.encoders import jsonable_encoder

from .config import kafka_config

logger = logging.getLogger(__name__)


def _encode(value: Optional[str]) -> Optional[bytes]:
    return value.encode('utf-8') if value is not None else None


class MessageProducer:
    """Kafka로 메시지를 발행하는 Producer"""

    def __init__(self):
        self.producer: Optional[AIOKafkaProducer] = None
        self._started = False

    @property
    def is_started(self) -> bool:
        return self._started

    async def start(self):
        """Producer 시작"""
        if self._started:
            logger.warning("Producer already started")
            return

        try:
            self.producer = AIOKafkaProducer(
                bootstrap_servers=kafka_config.bootstrap_servers,
                value_serializer=_encode,
                key_serializer=_encode,
                acks=kafka_config.producer_acks,
                request_timeout_ms=kafka_config.producer_request_timeout_ms
            )
            await self.producer.start()
            self._started = True
            logger.info("✅ Kafka Producer started successfully")

        except Exception as e:
            logger.error(f"❌ Failed to start Kafka Producer: {e}")
            raise

    async def stop(self):
        """Producer 중지"""
        if self.producer and self._started:
            await self.producer.stop()
            self._started = False
            logger.info("Kafka Producer stopped")

    async def send_message(
        self,
        topic: str,
        message: Any,
        key: Optional[str] = None
    ) -> Optional[asyncio.Future]:
        """
        객체를 JSON으로 변환하여 발행

        Args:
            topic: Kafka topic
            message: 발행할 객체 (문자열, dict, pydantic 모델 등)
            key: Partition key (없으면 브로커가 파티션을 선택)

        Returns:
            전송 완료 future. 실패 시 None
        """
        logger.info(
            f"[Send] Topic: {topic}, Key: {key}, "
            f"Message type: {type(message).__name__}"
        )

        try:
            json_message = json.dumps(jsonable_encoder(message), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error(f"[Serialization Error] Message: {message!r}, Error: {e}")
            return None

        logger.debug(f"Message serialized: {json_message}")
        return await self._send(topic, json_message, key)

    async def send_string_message(self, topic: str, message: str) -> Optional[asyncio.Future]:
        """문자열을 변환 없이 그대로 발행"""
        logger.info(
            f"[Send String] Topic: {topic}, "
            f"Length: {len(message) if message is not None else 0}"
        )
        return await self._send(topic, message)

    async def _send(
        self,
        topic: str,
        value: Optional[str],
        key: Optional[str] = None
    ) -> Optional[asyncio.Future]:
        if not self._started or not self.producer:
            logger.error(f"[Producer Not Started] Topic: {topic}, dropping message")
            return None

        try:
            future = await self.producer.send(topic, value=value, key=key)
            future.add_done_callback(partial(self._on_send_complete, topic, value))
            return future

        except Exception as e:
            logger.error(f"[Unexpected Error] Topic: {topic}, Error: {e}", exc_info=True)
            return None

    @staticmethod
    def _on_send_complete(topic: str, value: Optional[str], future: asyncio.Future):
        """전송 완료 콜백 (로깅 전용)"""
        if future.cancelled():
            logger.warning(f"[Send Cancelled] Topic: {topic}, Message: {value}")
            return

        error = future.exception()
        if error is not None:
            logger.error(f"[Send Failed] Topic: {topic}, Message: {value}, Error: {error}")
            return

        metadata = future.result()
        logger.info(
            f"[Message Published] "
            f"Topic: {topic}, "
            f"Partition: {metadata.partition}, "
            f"Offset: {metadata.offset}, "
            f"Message: {value}"
        )


# Singleton instance
_message_producer: Optional[MessageProducer] = None


def get_message_producer() -> MessageProducer:
    """Singleton Producer 인스턴스 반환"""
    global _message_producer
    if _message_producer is None:
        _message_producer = MessageProducer()
    return _message_producer
