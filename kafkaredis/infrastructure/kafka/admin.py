"""
Kafka Topic Provisioning

애플리케이션 시작 시 필요한 토픽을 생성합니다.
"""

import logging
from typing import List, Optional
from aiokafka.admin import AIOKafkaAdminClient, NewTopic

from .config import kafka_config

logger = logging.getLogger(__name__)


def build_topics() -> List[NewTopic]:
    """서비스가 사용하는 토픽 정의"""
    return [
        NewTopic(
            name=name,
            num_partitions=kafka_config.topic_partitions,
            replication_factor=kafka_config.topic_replication_factor
        )
        for name in (kafka_config.topic_test, kafka_config.topic_user_events)
    ]


async def provision_topics(admin: Optional[AIOKafkaAdminClient] = None) -> List[str]:
    """
    없는 토픽만 생성

    브로커에 연결할 수 없으면 로그만 남기고 계속 진행합니다.

    Returns:
        새로 생성한 토픽 이름 목록
    """
    admin = admin or AIOKafkaAdminClient(
        bootstrap_servers=kafka_config.bootstrap_servers
    )

    try:
        await admin.start()
        existing = set(await admin.list_topics())

        missing = [topic for topic in build_topics() if topic.name not in existing]
        if not missing:
            logger.info("All Kafka topics already exist")
            return []

        for topic in missing:
            logger.info(
                f"Creating topic '{topic.name}' "
                f"(partitions: {topic.num_partitions}, "
                f"replication: {topic.replication_factor})"
            )
        await admin.create_topics(missing)

        created = [topic.name for topic in missing]
        logger.info(f"✅ Kafka topics created: {created}")
        return created

    except Exception as e:
        logger.error(f"❌ Topic provisioning failed: {e}")
        return []

    finally:
        await admin.close()
