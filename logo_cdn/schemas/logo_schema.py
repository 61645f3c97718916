"""Pydantic 스키마 정의 (Cache Metadata & API Responses)"""
from typing import Optional
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class LogoMetadata(BaseModel):
    """캐시에 저장되는 로고 메타데이터

    - domain / company_name 중 정확히 하나만 설정 (캐시 키의 기준)
    - 한 번 쓰이면 불변. 갱신은 같은 키에 새 레코드를 덮어씁니다.
    - fast tier(KV)와 durable tier(sidecar JSON) 양쪽에 같은 JSON으로 저장됩니다.
    """

    model_config = ConfigDict(frozen=True)

    domain: Optional[str] = Field(None, description="정규화된 도메인")
    company_name: Optional[str] = Field(None, description="회사명 (도메인이 없을 때만)")
    provider: str = Field(..., description="로고를 가져온 프로바이더")
    format: str = Field("png", description="요청 포맷 (캐시 키 구성요소)")
    size: Optional[int] = Field(None, description="요청 크기")
    original_url: str = Field(..., description="프로바이더 원본 URL")
    retrieved_at: datetime = Field(..., description="조회 시각 (UTC)")
    response_time_ms: Optional[float] = Field(None, ge=0, description="프로바이더 응답 시간")
    file_size: Optional[int] = Field(None, ge=0, description="바이트 크기")
    width: Optional[int] = Field(None, ge=0)
    height: Optional[int] = Field(None, ge=0)
    content_type: Optional[str] = Field(None, description="실제 응답 Content-Type")

    @field_validator("retrieved_at")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        # naive datetime은 UTC로 간주
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def _exactly_one_identity(self) -> "LogoMetadata":
        if bool(self.domain) == bool(self.company_name):
            raise ValueError("exactly one of domain or company_name must be set")
        return self

    @property
    def identifier(self) -> str:
        """로깅용 식별자"""
        return self.domain or self.company_name or ""

    def age_seconds(self, now: datetime) -> float:
        """now 기준 경과 시간 (초)"""
        return (now - self.retrieved_at).total_seconds()


class LogoErrorResponse(BaseModel):
    """로고 조회 실패 응답"""
    status: str = Field("error", description="항상 error")
    message: str = Field(..., description="응답 메시지")
    error_code: str = Field(..., description="에러 코드")
    reset_at: Optional[int] = Field(None, description="rate limit 해제 시각 (epoch seconds)")


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    timestamp: datetime
    version: str
    kv: bool = Field(..., description="fast tier(Redis) 연결 여부")
    blob: bool = Field(..., description="durable tier(S3) 연결 여부")
