"""로깅 설정 (Security Enhanced)

- 요청 URL에 실린 프로바이더 키/토큰은 마스킹
- 회사명 등 사용자 입력의 제어 문자는 제거 (로그 라인 위조 방지)
- 프로바이더/스토리지 작업은 JSON 한 줄로 기록
"""
import json
import logging
import os
import re
import sys
from datetime import datetime, timezone
from typing import Any, Optional

from logo_cdn.core.config import settings


# Production 환경에서는 DEBUG 로그 비활성화
IS_PRODUCTION = os.getenv("ENVIRONMENT", "development") == "production"

# 자체 로그 레벨과 무관하게 WARNING 이상만 남길 서드파티 로거
_NOISY_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3", "curl_cffi")

_SECRET_PARAM = re.compile(r"(?i)\b(key|token|api_key|secret|password)=([^&\s]+)")
_BEARER = re.compile(r"(?i)bearer\s+\S+")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def _build_formatter() -> logging.Formatter:
    if IS_PRODUCTION:
        return logging.Formatter(
            fmt="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
    return logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """logo_cdn 로거 초기화

    Args:
        level: 로그 레벨 (기본값: settings.log_level, production에서는 최소 INFO)

    Returns:
        logo_cdn 로거
    """
    logger = logging.getLogger("logo_cdn")

    log_level = (level or settings.log_level).upper()
    if IS_PRODUCTION and log_level == "DEBUG":
        log_level = "INFO"
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(_build_formatter())
        logger.addHandler(console_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


logger = setup_logging()


def sanitize_for_log(value: Optional[str], max_length: int = 100) -> str:
    """로깅용 문자열 정리

    URL 쿼리의 key/token 값과 Bearer 토큰은 마스킹하고, 제어 문자는 제거합니다.

    Args:
        value: 로깅할 문자열
        max_length: 최대 길이

    Returns:
        정리된 문자열
    """
    if not value:
        return "[empty]"

    result = _CONTROL_CHARS.sub("", str(value))
    result = _SECRET_PARAM.sub(lambda m: f"{m.group(1)}=***", result)
    result = _BEARER.sub("Bearer ***", result)

    if len(result) > max_length:
        result = result[:max_length] + "..."

    return result


def log_provider_operation(
    provider: str,
    action: str,
    success: bool,
    *,
    domain: Optional[str] = None,
    company_name: Optional[str] = None,
    duration_ms: Optional[float] = None,
    error: Optional[str] = None,
    metadata: Optional[dict[str, Any]] = None,
) -> None:
    """프로바이더/스토리지 작업을 구조화된 한 줄 JSON으로 기록

    관측용 훅이므로 어떤 경우에도 예외를 올리지 않습니다.

    Args:
        provider: 프로바이더 이름
        action: "fetch" | "store" | "retrieve" | "error"
        success: 성공 여부
        domain: 요청 도메인
        company_name: 요청 회사명
        duration_ms: 소요 시간 (밀리초)
        error: 오류 메시지
        metadata: 추가 필드
    """
    try:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "provider": provider,
            "action": action,
            "success": success,
            "domain": domain,
            "company_name": company_name,
            "duration_ms": round(duration_ms, 2) if duration_ms is not None else None,
            "error": error,
        }
        if metadata:
            entry["metadata"] = metadata

        payload = json.dumps(entry, ensure_ascii=False, default=str)
        if success:
            logger.info(f"[LogoProvider] {payload}")
        else:
            logger.warning(f"[LogoProvider] {payload}")
    except Exception:
        # 로깅 싱크 장애는 요청 처리에 영향을 주지 않음
        pass
