import asyncio
import pytest
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

from aiokafka import TopicPartition

from kafkaredis.infrastructure.kafka import Acknowledgment, MessageConsumer, kafka_config
from kafkaredis.services.message_listener import MessageListener


@pytest.fixture
def listener(cache_service) -> MessageListener:
    return MessageListener(cache_service)


@pytest.fixture
def acknowledgment() -> MagicMock:
    ack = MagicMock(spec=Acknowledgment)
    ack.acknowledge = AsyncMock()
    return ack


class TestConsumeTestMessage:
    """test-topic 리스너 테스트"""

    @pytest.mark.asyncio
    async def test_acknowledges_after_processing(self, listener, acknowledgment, record_factory):
        record = record_factory("hello", offset=7)

        await listener.consume_test_message(record, acknowledgment)

        acknowledgment.acknowledge.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_processing_failure_skips_acknowledgment(self, listener, acknowledgment, record_factory, monkeypatch):
        def failing_process(message):
            raise RuntimeError("processing failed")

        monkeypatch.setattr(listener, "_process_message", failing_process)

        await listener.consume_test_message(record_factory("hello"), acknowledgment)

        acknowledgment.acknowledge.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_acknowledgment_is_tolerated(self, listener, record_factory):
        await listener.consume_test_message(record_factory("hello"), None)


class TestConsumeUserEvent:
    """user-events 리스너 테스트"""

    @pytest.mark.asyncio
    async def test_caches_event_and_acknowledges(self, listener, mock_redis, acknowledgment, record_factory):
        record = record_factory("event data", key="user123", topic="user-events")

        await listener.consume_user_event(record, acknowledgment)

        mock_redis.set.assert_awaited_once_with(
            "user:event:user123", "event data", ex=timedelta(hours=24)
        )
        acknowledgment.acknowledge.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cache_exception_skips_acknowledgment(self, listener, acknowledgment, record_factory):
        listener.cache_service = MagicMock()
        listener.cache_service.cache_user_event = AsyncMock(side_effect=RuntimeError("boom"))

        record = record_factory("event data", key="user123", topic="user-events")
        await listener.consume_user_event(record, acknowledgment)

        acknowledgment.acknowledge.assert_not_awaited()


class TestBuildConsumers:

    def test_consumers_for_both_topics(self, listener):
        consumers = listener.build_consumers()

        assert [(c.topics, c.group_id) for c in consumers] == [
            (["test-topic"], "test-group"),
            (["user-events"], "user-group"),
        ]
        assert consumers[0].handler == listener.consume_test_message
        assert consumers[1].handler == listener.consume_user_event


class TestAcknowledgment:

    @pytest.mark.asyncio
    async def test_commits_next_offset(self, record_factory):
        kafka_consumer = MagicMock()
        kafka_consumer.commit = AsyncMock()
        record = record_factory("hello", topic="test-topic", partition=1, offset=9)

        await Acknowledgment(kafka_consumer, record).acknowledge()

        kafka_consumer.commit.assert_awaited_once_with({TopicPartition("test-topic", 1): 10})


class TestMessageConsumerHandling:
    """Consumer가 메시지 한 건을 핸들러에 넘기는 방식 테스트"""

    @pytest.mark.asyncio
    async def test_handler_receives_record_and_acknowledgment(self, record_factory):
        handler = AsyncMock()
        consumer = MessageConsumer(["test-topic"], "test-group", handler)
        consumer.consumer = MagicMock()
        record = record_factory("hello")

        await consumer._handle_message(record)

        handler.assert_awaited_once()
        received_record, ack = handler.await_args.args
        assert received_record is record
        assert isinstance(ack, Acknowledgment)

    @pytest.mark.asyncio
    async def test_handler_error_does_not_propagate(self, record_factory):
        handler = AsyncMock(side_effect=RuntimeError("handler failed"))
        consumer = MessageConsumer(["test-topic"], "test-group", handler)
        consumer.consumer = MagicMock()

        await consumer._handle_message(record_factory("hello"))

        handler.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_auto_commit_passes_no_acknowledgment(self, record_factory, monkeypatch):
        monkeypatch.setattr(kafka_config, "consumer_enable_auto_commit", True)
        handler = AsyncMock()
        consumer = MessageConsumer(["test-topic"], "test-group", handler)
        consumer.consumer = MagicMock()
        record = record_factory("hello")

        await consumer._handle_message(record)

        handler.assert_awaited_once_with(record, None)


def fake_kafka_consumer(records=(), error=None):
    """AIOKafkaConsumer 대역 클래스와 생성된 인스턴스 목록"""
    created = []

    class FakeKafkaConsumer:
        def __init__(self, *topics, **kwargs):
            self.topics = topics
            self.kwargs = kwargs
            self.start = AsyncMock()
            self.stop = AsyncMock()
            self.commit = AsyncMock()
            created.append(self)

        def __aiter__(self):
            return self._records()

        async def _records(self):
            for record in records:
                yield record
            if error is not None:
                raise error
            # 새 메시지 대기
            await asyncio.Event().wait()

    return FakeKafkaConsumer, created


class TestMessageConsumerLifecycle:
    """start/stop과 백그라운드 소비 루프 테스트"""

    @pytest.mark.asyncio
    async def test_start_consumes_and_stop_cancels(self, record_factory, monkeypatch):
        record = record_factory("hello", offset=3)
        consumer_cls, created = fake_kafka_consumer([record])
        monkeypatch.setattr("kafkaredis.infrastructure.kafka.consumer.AIOKafkaConsumer", consumer_cls)

        handled = asyncio.Event()
        handler = AsyncMock(side_effect=lambda msg, ack: handled.set())
        consumer = MessageConsumer(["test-topic"], "test-group", handler)

        await consumer.start()
        await asyncio.wait_for(handled.wait(), timeout=1)

        kafka_consumer = created[0]
        assert kafka_consumer.topics == ("test-topic",)
        assert kafka_consumer.kwargs["group_id"] == "test-group"
        assert kafka_consumer.kwargs["enable_auto_commit"] is False
        kafka_consumer.start.assert_awaited_once()

        received_record, ack = handler.await_args.args
        assert received_record is record
        assert isinstance(ack, Acknowledgment)

        await consumer.stop()

        assert consumer._task is None
        assert consumer._running is False
        kafka_consumer.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_start_twice_creates_one_client(self, monkeypatch):
        consumer_cls, created = fake_kafka_consumer()
        monkeypatch.setattr("kafkaredis.infrastructure.kafka.consumer.AIOKafkaConsumer", consumer_cls)
        consumer = MessageConsumer(["test-topic"], "test-group", AsyncMock())

        await consumer.start()
        await consumer.start()

        assert len(created) == 1
        await consumer.stop()

    @pytest.mark.asyncio
    async def test_loop_error_marks_consumer_stopped(self, monkeypatch):
        consumer_cls, created = fake_kafka_consumer(error=RuntimeError("fetch failed"))
        monkeypatch.setattr("kafkaredis.infrastructure.kafka.consumer.AIOKafkaConsumer", consumer_cls)
        consumer = MessageConsumer(["test-topic"], "test-group", AsyncMock())

        await consumer.start()
        await consumer._task

        assert consumer._running is False

        await consumer.stop()
        created[0].stop.assert_awaited_once()
