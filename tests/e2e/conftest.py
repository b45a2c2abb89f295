"""
E2E Test Configuration and Fixtures

실행 중인 서비스(와 Kafka/Redis)를 대상으로 합니다.
서비스에 연결할 수 없으면 테스트를 건너뜁니다.
"""

import os
import uuid
import pytest
import httpx
from typing import Generator

SERVICE_URL = os.getenv("KAFKA_REDIS_SERVICE_URL", "http://localhost:8080")


@pytest.fixture(scope="session")
def service_url() -> str:
    return SERVICE_URL


@pytest.fixture(scope="session")
def http_client(service_url: str) -> Generator[httpx.Client, None, None]:
    """Shared HTTP client for all tests"""
    with httpx.Client(base_url=service_url, timeout=30.0) as client:
        try:
            client.get("/health/live")
        except httpx.TransportError:
            pytest.skip(f"Service not reachable at {service_url}")
        yield client


@pytest.fixture
def unique_id() -> str:
    return str(uuid.uuid4())[:8]
