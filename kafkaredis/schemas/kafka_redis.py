from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class IntegrationTestResponse(BaseModel):
    """통합 테스트 응답 스키마"""
    model_config = ConfigDict(populate_by_name=True)

    status: str
    message: str
    user_id: str = Field(alias="userId")
    redis_key: Optional[str] = Field(default=None, alias="redisKey")


class ServiceHealthResponse(BaseModel):
    """헬스 체크 응답 스키마"""
    status: str
    service: str
    timestamp: str = Field(description="Epoch milliseconds")
