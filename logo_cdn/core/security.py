"""
입력 검증 및 API 키 추출
보안 미들웨어 및 검증 함수
"""

import hashlib
import re
from typing import Optional
from fastapi import Request
from logo_cdn.core.logging import logger, sanitize_for_log


class InputValidator:
    """입력 보안 검증

    모든 메서드는 정규화된 값 또는 None(유효하지 않음)을 반환합니다.
    """

    MAX_DOMAIN_LENGTH = 253
    MAX_COMPANY_NAME_LENGTH = 100
    MIN_SIZE = 64
    MAX_SIZE = 512
    SUPPORTED_FORMATS = ("png", "svg", "webp")

    _DOMAIN_PATTERN = re.compile(
        r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?(\.[a-z0-9]([a-z0-9-]*[a-z0-9])?)*$"
    )
    _API_KEY_PATTERN = re.compile(r"^[a-zA-Z0-9\-_]+$")

    @staticmethod
    def sanitize_domain(domain: Optional[str]) -> Optional[str]:
        """도메인 정규화

        프로토콜, 경로, 쿼리, 포트, 앞뒤 점을 제거하고 소문자로 바꿉니다.

        Args:
            domain: 입력 도메인 (예: "https://www.Example.com/about")

        Returns:
            정규화된 도메인 또는 None
        """
        if not domain or not isinstance(domain, str):
            return None

        sanitized = domain.strip().lower()
        sanitized = re.sub(r"^https?://", "", sanitized)
        sanitized = sanitized.split("/")[0]
        sanitized = sanitized.split("?")[0]
        sanitized = sanitized.split("#")[0]
        sanitized = sanitized.split(":")[0]
        sanitized = sanitized.strip(".")

        if not InputValidator._DOMAIN_PATTERN.match(sanitized):
            return None

        if len(sanitized) > InputValidator.MAX_DOMAIN_LENGTH:
            return None

        # TLD가 없는 값은 도메인으로 보지 않음
        if "." not in sanitized:
            return None

        return sanitized

    @staticmethod
    def sanitize_company_name(name: Optional[str]) -> Optional[str]:
        """회사명 정규화

        Args:
            name: 입력 회사명

        Returns:
            정리된 회사명 또는 None
        """
        if not name or not isinstance(name, str):
            return None

        sanitized = name.strip()
        # HTML 태그 제거
        sanitized = re.sub(r"<[^>]*>", "", sanitized)
        # 허용 문자만 남김
        sanitized = re.sub(r"[^a-zA-Z0-9\s\-_.,&()]", "", sanitized)
        sanitized = re.sub(r"\s+", " ", sanitized).strip()

        if not sanitized or len(sanitized) > InputValidator.MAX_COMPANY_NAME_LENGTH:
            return None

        return sanitized

    @staticmethod
    def validate_format(fmt: Optional[str]) -> Optional[str]:
        """이미지 포맷 검증 (png | svg | webp)"""
        if not fmt or not isinstance(fmt, str):
            return None

        normalized = fmt.strip().lower()
        if normalized in InputValidator.SUPPORTED_FORMATS:
            return normalized
        return None

    @staticmethod
    def validate_size(size: Optional[str]) -> Optional[int]:
        """크기 검증 (64 ~ 512)"""
        if size is None or size == "":
            return None

        try:
            parsed = int(str(size).strip())
        except (TypeError, ValueError):
            return None

        if parsed < InputValidator.MIN_SIZE or parsed > InputValidator.MAX_SIZE:
            return None
        return parsed

    @staticmethod
    def validate_greyscale(greyscale: Optional[str]) -> bool:
        """greyscale 플래그 파싱"""
        if not greyscale:
            return False
        return str(greyscale).strip().lower() in ("true", "1", "yes")

    @staticmethod
    def sanitize_api_key(key: Optional[str]) -> Optional[str]:
        """API 키 형식 검증 (불투명 토큰으로만 취급)"""
        if not key or not isinstance(key, str):
            return None

        sanitized = key.strip()
        if not InputValidator._API_KEY_PATTERN.match(sanitized):
            return None

        if len(sanitized) < 16 or len(sanitized) > 256:
            return None

        return sanitized

    @staticmethod
    def hash_input(input_str: str) -> str:
        """입력값 해시 (로깅용)

        Args:
            input_str: 입력 문자열

        Returns:
            SHA256 해시값
        """
        return hashlib.sha256(input_str.encode()).hexdigest()[:16]


def extract_api_key(request: Request) -> Optional[str]:
    """요청에서 API 키 추출

    우선순위: ?key= 쿼리 → X-Api-Key 헤더 → Authorization: Bearer

    Args:
        request: FastAPI Request 객체

    Returns:
        형식 검증을 통과한 API 키 또는 None
    """
    raw = request.query_params.get("key")

    if not raw:
        raw = request.headers.get("X-Api-Key")

    if not raw:
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            raw = auth_header[len("Bearer "):]

    if not raw:
        return None

    key = InputValidator.sanitize_api_key(raw)
    if key is None:
        logger.debug(f"Rejected malformed API key: {sanitize_for_log(raw, max_length=8)}")
    return key


def resolve_client_key(request: Request) -> str:
    """Rate limit 카운터 키 결정 (API 키 우선, 없으면 클라이언트 IP)"""
    api_key = extract_api_key(request)
    if api_key:
        return f"key:{InputValidator.hash_input(api_key)}"

    host = request.client.host if request.client else "unknown"
    return f"ip:{host}"
