"""
Service Configuration

환경 변수를 통한 설정 관리
"""

from typing import List
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()  # .env 파일 로드


class Settings(BaseSettings):
    """kafka-redis-test 서비스 설정"""

    # Application
    app_name: str = "kafka-redis-test"
    version: str = "1.0.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    redis_max_connections: int = 20
    redis_retry_on_timeout: bool = True
    redis_socket_keepalive: bool = True

    # CORS
    cors_origins: List[str] = ["http://localhost:3000"]

    # Logging
    log_dir: str = "logs"
    log_to_file: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
