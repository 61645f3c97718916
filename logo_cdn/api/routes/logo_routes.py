"""Logo Routes (Engine Layer)

HTTP Layer는 쿼리 파라미터를 LogoRequest로 바꾸고,
ResolutionResult를 상태 코드/헤더로 바꾸는 Translator 역할만 수행합니다.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from logo_cdn.core.config import settings
from logo_cdn.core.exceptions import (
    InvalidCompanyNameException,
    InvalidDomainException,
    InvalidFormatException,
    InvalidSizeException,
    LogoNotFoundException,
    RateLimitExceededException,
    ValidationException,
)
from logo_cdn.core.logging import logger, sanitize_for_log
from logo_cdn.core.security import InputValidator, resolve_client_key
from logo_cdn.engine import (
    CacheManager,
    LogoRequest,
    LogoResolutionService,
    ProviderOrchestrator,
    RateLimiter,
    ResolutionResult,
    ResolutionStatus,
)
from logo_cdn.engine.cache_manager import content_type_for_format
from logo_cdn.providers import build_default_providers, get_shared_http_client
from logo_cdn.schemas.logo_schema import LogoErrorResponse
from logo_cdn.search import DomainResolver
from logo_cdn.storage import RedisKeyValueStore, S3BlobStore

router = APIRouter(prefix="/api/v1", tags=["logo"])

# 싱글톤 서비스
_kv_store: Optional[RedisKeyValueStore] = None
_blob_store: Optional[S3BlobStore] = None
_resolution_service: Optional[LogoResolutionService] = None


def get_kv_store() -> RedisKeyValueStore:
    """RedisKeyValueStore 싱글톤"""
    global _kv_store
    if _kv_store is None:
        _kv_store = RedisKeyValueStore()
    return _kv_store


def get_blob_store() -> S3BlobStore:
    """S3BlobStore 싱글톤"""
    global _blob_store
    if _blob_store is None:
        _blob_store = S3BlobStore()
    return _blob_store


def get_resolution_service(
    kv_store: RedisKeyValueStore = Depends(get_kv_store),
    blob_store: S3BlobStore = Depends(get_blob_store),
) -> LogoResolutionService:
    """LogoResolutionService 싱글톤

    프로바이더 목록은 여기서 한 번만 만들어지고 이후 바뀌지 않습니다.
    """
    global _resolution_service
    if _resolution_service is None:
        http_client = get_shared_http_client()
        orchestrator = ProviderOrchestrator(
            providers=build_default_providers(http_client=http_client),
            http_client=http_client,
            domain_resolver=DomainResolver(),
        )
        _resolution_service = LogoResolutionService(
            orchestrator=orchestrator,
            cache_manager=CacheManager(kv_store, blob_store),
            rate_limiter=RateLimiter(kv_store),
        )
    return _resolution_service


def _error_response(
    status_code: int,
    error: Exception,
    message: Optional[str] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    body = LogoErrorResponse(
        message=message or getattr(error, "message", str(error)),
        error_code=getattr(error, "error_code", "UNKNOWN_ERROR"),
        reset_at=(getattr(error, "details", None) or {}).get("reset_at"),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def _parse_options(fmt: Optional[str], size: Optional[str]) -> tuple[str, Optional[int]]:
    """format/size 쿼리 검증

    Raises:
        InvalidFormatException, InvalidSizeException
    """
    validated_format = "png"
    if fmt:
        validated_format = InputValidator.validate_format(fmt)
        if validated_format is None:
            raise InvalidFormatException(fmt)

    validated_size = None
    if size:
        validated_size = InputValidator.validate_size(size)
        if validated_size is None:
            raise InvalidSizeException(size)

    return validated_format, validated_size


def _to_http_response(
    result: ResolutionResult,
    identifier: str,
    service: LogoResolutionService,
    request_format: str,
) -> Response:
    rate_headers = result.rate_limit.headers() if result.rate_limit is not None else {}

    if result.status == ResolutionStatus.RATE_LIMITED:
        decision = result.rate_limit
        return _error_response(
            429,
            RateLimitExceededException(client_key="", reset_at=decision.reset_at),
            message="Rate limit exceeded",
            headers=rate_headers,
        )

    if result.status == ResolutionStatus.INVALID_REQUEST:
        return _error_response(
            400, ValidationException("identifier", result.error or "invalid request"), headers=rate_headers
        )

    if result.logo_bytes:
        headers = service.cache.cache_control_headers(result.metadata)
        headers.update(rate_headers)
        media_type = (
            result.metadata.content_type
            if result.metadata is not None and result.metadata.content_type
            else content_type_for_format(request_format)
        )
        return Response(content=result.logo_bytes, media_type=media_type, headers=headers)

    if result.logo_url:
        return RedirectResponse(url=result.logo_url, status_code=302, headers=rate_headers)

    return _error_response(
        404,
        LogoNotFoundException(identifier),
        message=result.error or "Logo not found",
        headers=rate_headers,
    )


async def _serve_logo(
    request: Request,
    logo_request: LogoRequest,
    service: LogoResolutionService,
) -> Response:
    """엔진 호출 + 서버 측 하드 타임아웃"""
    client_key = resolve_client_key(request)
    identifier = logo_request.identifier

    try:
        result = await asyncio.wait_for(
            service.resolve(logo_request, client_key=client_key),
            timeout=settings.api_resolve_timeout_s,
        )
    except asyncio.TimeoutError:
        logger.warning(
            f"[API] Logo resolution timeout: identifier='{sanitize_for_log(identifier)}', "
            f"timeout={settings.api_resolve_timeout_s}s"
        )
        return _error_response(
            504,
            LogoNotFoundException(identifier),
            message="Logo resolution timed out",
        )

    logger.info(
        f"[API] Logo request: identifier='{sanitize_for_log(identifier)}', "
        f"status={result.status.value}, elapsed={result.elapsed_ms or 0:.0f}ms"
    )
    return _to_http_response(result, identifier, service, logo_request.format)


@router.get("/logo/name/{company_name}")
async def get_logo_by_name(
    company_name: str,
    request: Request,
    format: Optional[str] = None,
    size: Optional[str] = None,
    greyscale: Optional[str] = None,
    cache: Optional[str] = None,
    service: LogoResolutionService = Depends(get_resolution_service),
):
    """회사명으로 로고 조회

    프로바이더가 모두 실패하면 검색으로 도메인을 찾아 한 번 더 시도합니다.
    """
    try:
        name = InputValidator.sanitize_company_name(company_name)
        if name is None:
            raise InvalidCompanyNameException("company name is empty or too long")
        fmt, validated_size = _parse_options(format, size)
    except ValidationException as e:
        logger.warning(f"[API] Input validation failed: {e.error_code}")
        return _error_response(400, e)

    logo_request = LogoRequest(
        company_name=name,
        format=fmt,
        size=validated_size,
        greyscale=InputValidator.validate_greyscale(greyscale),
        use_cache=(cache or "true").strip().lower() != "false",
    )
    return await _serve_logo(request, logo_request, service)


@router.get("/logo/{domain}")
async def get_logo_by_domain(
    domain: str,
    request: Request,
    format: Optional[str] = None,
    size: Optional[str] = None,
    greyscale: Optional[str] = None,
    cache: Optional[str] = None,
    service: LogoResolutionService = Depends(get_resolution_service),
):
    """도메인으로 로고 조회

    - 200: 이미지 바이너리 + 캐시 헤더
    - 302: URL만 확보한 경우 프로바이더 원본으로 리다이렉트
    - 404: 모든 프로바이더 실패
    - 429: 요청 한도 초과
    """
    try:
        clean_domain = InputValidator.sanitize_domain(domain)
        if clean_domain is None:
            raise InvalidDomainException(sanitize_for_log(domain))
        fmt, validated_size = _parse_options(format, size)
    except ValidationException as e:
        logger.warning(f"[API] Input validation failed: {e.error_code}")
        return _error_response(400, e)

    logo_request = LogoRequest(
        domain=clean_domain,
        format=fmt,
        size=validated_size,
        greyscale=InputValidator.validate_greyscale(greyscale),
        use_cache=(cache or "true").strip().lower() != "false",
    )
    return await _serve_logo(request, logo_request, service)
