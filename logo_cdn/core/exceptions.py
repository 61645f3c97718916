"""커스텀 예외 정의 (Structured Exception Hierarchy)"""
from typing import Any, Optional


# 기본 예외 클래스
class LogoCdnException(Exception):
    """기본 예외 클래스 - 모든 커스텀 예외의 부모"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class LogoNotFoundException(LogoCdnException):
    """모든 프로바이더와 도메인 폴백이 실패한 경우"""
    def __init__(self, identifier: str, details: Optional[dict[str, Any]] = None):
        message = f"Logo not found for: {identifier}"
        super().__init__(message, "LOGO_NOT_FOUND", details or {"identifier": identifier})


class RateLimitExceededException(LogoCdnException):
    """요청 한도 초과"""
    def __init__(self, client_key: str, reset_at: int, details: Optional[dict[str, Any]] = None):
        message = f"Rate limit exceeded (resets at {reset_at})"
        super().__init__(message, "RATE_LIMITED",
                        details or {"client_key": client_key, "reset_at": reset_at})


# 스토리지 관련 예외
class StorageException(LogoCdnException):
    """스토리지(KV/Blob) 관련 예외"""
    def __init__(self, message: str, error_code: str = "STORAGE_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "STORAGE_ERROR", details)


class StorageConnectionException(StorageException):
    """스토리지 연결/호출 실패"""
    def __init__(self, tier: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"{tier} storage unavailable: {reason}"
        super().__init__(message, "STORAGE_CONNECTION_ERROR",
                        details or {"tier": tier, "reason": reason})


class StorageSerializationException(StorageException):
    """메타데이터 직렬화/역직렬화 오류"""
    def __init__(self, operation: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Metadata {operation} failed: {reason}"
        super().__init__(message, "STORAGE_SERIALIZATION_ERROR",
                        details or {"operation": operation, "reason": reason})


# 유효성 검증 관련 예외
class ValidationException(LogoCdnException):
    """유효성 검증 예외"""
    def __init__(self, field: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Validation failed for '{field}': {reason}"
        super().__init__(message, "VALIDATION_ERROR",
                        details or {"field": field, "reason": reason})


class InvalidDomainException(ValidationException):
    """유효하지 않은 도메인"""
    def __init__(self, domain: str, details: Optional[dict[str, Any]] = None):
        super().__init__("domain", f"invalid domain (value: {domain})", details)


class InvalidCompanyNameException(ValidationException):
    """유효하지 않은 회사명"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        super().__init__("company_name", reason, details)


class InvalidFormatException(ValidationException):
    """지원하지 않는 이미지 포맷"""
    def __init__(self, fmt: str, details: Optional[dict[str, Any]] = None):
        super().__init__("format", f"unsupported format (value: {fmt})", details)


class InvalidSizeException(ValidationException):
    """허용 범위를 벗어난 크기"""
    def __init__(self, size: Any, details: Optional[dict[str, Any]] = None):
        super().__init__("size", f"size must be between 64 and 512 (value: {size})", details)
