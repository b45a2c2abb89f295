"""
Kafka 메시지 리스너

test-topic 메시지와 user-events 이벤트를 처리합니다.
처리에 성공한 경우에만 오프셋을 커밋하고, 실패하면 커밋하지 않아
브로커가 메시지를 다시 전달할 수 있게 둡니다.
"""

from typing import List, Optional
from aiokafka import ConsumerRecord

from kafkaredis.core.logging import get_logger
from kafkaredis.infrastructure.kafka import Acknowledgment, MessageConsumer, kafka_config
from kafkaredis.services.cache_service import CacheService

logger = get_logger(__name__)


class MessageListener:
    """Kafka 메시지 리스너"""

    def __init__(self, cache_service: CacheService):
        self.cache_service = cache_service

    def build_consumers(self) -> List[MessageConsumer]:
        """리스너별 Consumer 구성"""
        return [
            MessageConsumer(
                topics=[kafka_config.topic_test],
                group_id=kafka_config.group_test,
                handler=self.consume_test_message
            ),
            MessageConsumer(
                topics=[kafka_config.topic_user_events],
                group_id=kafka_config.group_user,
                handler=self.consume_user_event
            ),
        ]

    async def consume_test_message(
        self,
        record: ConsumerRecord,
        acknowledgment: Optional[Acknowledgment]
    ):
        """test-topic 메시지 처리"""
        logger.info(
            f"[Test Message Received] "
            f"Topic: {record.topic}, "
            f"Partition: {record.partition}, "
            f"Offset: {record.offset}"
        )
        logger.debug(f"Message payload: {record.value}")

        try:
            self._process_message(record.value)
            await self._acknowledge(acknowledgment, record)
            logger.info(f"[Test Message Processed] Offset: {record.offset}")

        except Exception as e:
            logger.error(
                f"[Test Message Error] Message: {record.value}, Error: {e}",
                exc_info=True
            )
            logger.warning("Offset not committed; message may be redelivered")

    async def consume_user_event(
        self,
        record: ConsumerRecord,
        acknowledgment: Optional[Acknowledgment]
    ):
        """user-events 이벤트를 Redis에 캐싱"""
        user_id = record.key
        logger.info(f"[User Event Received] user_id={user_id}, Topic: {record.topic}")
        logger.debug(f"Event payload: {record.value}")

        try:
            await self.cache_service.cache_user_event(user_id, record.value)
            await self._acknowledge(acknowledgment, record)
            logger.info(f"[User Event Processed] user_id={user_id}")

        except Exception as e:
            logger.error(
                f"[User Event Error] user_id={user_id}, Message: {record.value}, Error: {e}",
                exc_info=True
            )
            logger.warning("Offset not committed; user event may be redelivered")

    @staticmethod
    async def _acknowledge(acknowledgment: Optional[Acknowledgment], record: ConsumerRecord):
        if acknowledgment is None:
            logger.warning("Acknowledgment is None; auto commit may be in use")
            return

        await acknowledgment.acknowledge()
        logger.debug(f"Offset committed: {record.topic}[{record.partition}]@{record.offset}")

    @staticmethod
    def _process_message(message: str):
        # 처리 로직 자리. 현재는 로그만 남김
        logger.debug(f"Processing message: {message}")
