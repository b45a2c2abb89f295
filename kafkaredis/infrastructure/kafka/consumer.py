"""
Kafka Consumer

토픽을 구독하고 메시지를 한 건씩 핸들러에 전달하는 Consumer.
오프셋은 핸들러가 Acknowledgment로 직접 커밋합니다.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional
from aiokafka import AIOKafkaConsumer, ConsumerRecord, TopicPartition

from .config import kafka_config

logger = logging.getLogger(__name__)


def _decode(value: Optional[bytes]) -> Optional[str]:
    return value.decode('utf-8') if value is not None else None


class Acknowledgment:
    """수신한 레코드 한 건에 대한 수동 커밋 핸들"""

    def __init__(self, consumer: AIOKafkaConsumer, record: ConsumerRecord):
        self._consumer = consumer
        self._record = record

    async def acknowledge(self):
        """레코드의 다음 오프셋을 커밋"""
        tp = TopicPartition(self._record.topic, self._record.partition)
        await self._consumer.commit({tp: self._record.offset + 1})


MessageHandler = Callable[[ConsumerRecord, Optional[Acknowledgment]], Awaitable[Any]]


class MessageConsumer:
    """Kafka 토픽을 소비하는 Consumer"""

    def __init__(
        self,
        topics: List[str],
        group_id: str,
        handler: MessageHandler
    ):
        """
        Args:
            topics: 구독할 Kafka topics
            group_id: Consumer group ID
            handler: 메시지 처리 함수 (record, acknowledgment)
        """
        self.topics = topics
        self.group_id = group_id
        self.handler = handler
        self.consumer: Optional[AIOKafkaConsumer] = None
        self._running = False
        self._task: Optional[asyncio.Task] = None

    async def start(self):
        """Consumer 시작"""
        if self._running:
            logger.warning(f"Consumer {self.group_id} already running")
            return

        try:
            self.consumer = AIOKafkaConsumer(
                *self.topics,
                bootstrap_servers=kafka_config.bootstrap_servers,
                group_id=self.group_id,
                value_deserializer=_decode,
                key_deserializer=_decode,
                auto_offset_reset=kafka_config.consumer_auto_offset_reset,
                enable_auto_commit=kafka_config.consumer_enable_auto_commit,
                session_timeout_ms=kafka_config.consumer_session_timeout_ms
            )

            await self.consumer.start()
            self._running = True

            # 백그라운드 태스크로 메시지 소비
            self._task = asyncio.create_task(self._consume_loop())

            logger.info(
                f"✅ Kafka Consumer started: "
                f"group_id={self.group_id}, "
                f"topics={self.topics}"
            )

        except Exception as e:
            logger.error(f"❌ Failed to start Consumer {self.group_id}: {e}")
            raise

    async def stop(self):
        """Consumer 중지"""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self.consumer:
            await self.consumer.stop()
            logger.info(f"Kafka Consumer stopped: {self.group_id}")

    async def _consume_loop(self):
        """메시지 소비 루프"""
        try:
            async for msg in self.consumer:
                await self._handle_message(msg)

        except asyncio.CancelledError:
            logger.info(f"Consumer loop cancelled: {self.group_id}")
            raise

        except Exception as e:
            logger.error(f"[Consumer Loop Error] {self.group_id}: {e}", exc_info=True)
            self._running = False

    async def _handle_message(self, msg: ConsumerRecord):
        """메시지 한 건 처리. 실패해도 루프는 계속됨"""
        acknowledgment = None
        if not kafka_config.consumer_enable_auto_commit:
            acknowledgment = Acknowledgment(self.consumer, msg)

        try:
            await self.handler(msg, acknowledgment)

        except Exception as e:
            logger.error(
                f"[Message Processing Error] "
                f"Group: {self.group_id}, "
                f"Topic: {msg.topic}, "
                f"Partition: {msg.partition}, "
                f"Offset: {msg.offset}, "
                f"Error: {e}"
            )
