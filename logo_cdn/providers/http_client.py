"""공유 HTTP 클라이언트 (curl_cffi)

- 프로바이더/검색 요청마다 AsyncSession을 만들면 TLS/커넥션 오버헤드가 커지므로
  프로세스 단위로 세션을 재사용합니다.
- 앱 종료 시 close()로 정리합니다.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from curl_cffi.requests import AsyncSession

from logo_cdn.core.config import settings
from logo_cdn.core.logging import logger


@dataclass(frozen=True)
class ImageProbe:
    """이미지 URL 검증 결과 (본문은 버리고 크기만 기록)"""

    status: int
    content_type: str
    byte_length: int
    truncated: bool = False

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_image(self) -> bool:
        return self.content_type.lower().startswith("image/")


class SharedHttpClient:
    def __init__(self, max_bytes: Optional[int] = None) -> None:
        self._lock = asyncio.Lock()
        self._session: Optional[AsyncSession] = None
        self.max_bytes = max_bytes or settings.max_logo_bytes

    async def _ensure_session(self) -> AsyncSession:
        async with self._lock:
            if self._session is not None:
                return self._session
            self._session = AsyncSession(
                impersonate=settings.http_impersonate,
                headers=self.default_headers(),
                allow_redirects=True,
                max_clients=int(getattr(settings, "http_max_clients", 20)),
                trust_env=False,
            )
            return self._session

    def default_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": settings.http_user_agent,
            "Accept": "image/*,application/json;q=0.9,text/html;q=0.8,*/*;q=0.5",
            "Accept-Language": "en-US,en;q=0.9",
        }

    async def probe_image(
        self,
        url: str,
        *,
        timeout_s: float,
        headers: Optional[Dict[str, str]] = None,
    ) -> ImageProbe:
        """스트리밍 GET으로 상태/Content-Type 확인

        응답 본문은 상태와 관계없이 읽어서 버리되, max_bytes를 넘으면 중단합니다.
        전송 오류는 호출자(프로바이더)가 실패 사유로 기록하도록 그대로 올립니다.
        """
        sess = await self._ensure_session()
        async with sess.stream("GET", url, headers=headers, timeout=timeout_s) as resp:
            status = getattr(resp, "status_code", 0) or 0
            content_type = resp.headers.get("content-type") or ""
            byte_length = 0
            truncated = False
            async for chunk in resp.aiter_content():
                byte_length += len(chunk)
                if byte_length > self.max_bytes:
                    truncated = True
                    break
        return ImageProbe(
            status=status, content_type=content_type, byte_length=byte_length, truncated=truncated
        )

    async def get_bytes(
        self,
        url: str,
        *,
        timeout_s: float,
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[tuple[int, bytes, str]]:
        """스트리밍 GET으로 본문 수집. 전송 실패나 max_bytes 초과 시 None"""
        sess = await self._ensure_session()
        try:
            async with sess.stream("GET", url, headers=headers, timeout=timeout_s) as resp:
                status = getattr(resp, "status_code", 0) or 0
                content_type = resp.headers.get("content-type") or ""

                declared = resp.headers.get("content-length")
                if declared and declared.isdigit() and int(declared) > self.max_bytes:
                    logger.info(f"[HTTP_CLIENT] GET bytes too large: declared={declared}, limit={self.max_bytes}")
                    return None

                chunks = []
                received = 0
                async for chunk in resp.aiter_content():
                    received += len(chunk)
                    if received > self.max_bytes:
                        logger.info(f"[HTTP_CLIENT] GET bytes aborted: received>{self.max_bytes}")
                        return None
                    chunks.append(chunk)
            return status, b"".join(chunks), content_type
        except Exception as e:
            logger.info(f"[HTTP_CLIENT] GET bytes failed: {type(e).__name__}: {repr(e)}")
            return None

    async def get_json(
        self,
        url: str,
        *,
        timeout_s: float,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Optional[tuple[int, Any]]:
        """JSON GET. 전송 실패 시 None, 본문이 JSON이 아니면 (status, None)"""
        sess = await self._ensure_session()
        try:
            resp = await sess.get(url, headers=headers, params=params, timeout=timeout_s)
        except Exception as e:
            logger.info(f"[HTTP_CLIENT] GET json failed: {type(e).__name__}: {repr(e)}")
            return None

        status = getattr(resp, "status_code", 0) or 0
        try:
            return status, json.loads(getattr(resp, "text", "") or "")
        except ValueError:
            return status, None

    async def get_text(
        self,
        url: str,
        *,
        timeout_s: float,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        follow_redirects: bool = True,
    ) -> Optional[tuple[int, str]]:
        sess = await self._ensure_session()
        try:
            resp = await sess.get(
                url,
                headers=headers,
                params=params,
                timeout=timeout_s,
                allow_redirects=follow_redirects,
            )
            status = getattr(resp, "status_code", 0) or 0
            text = getattr(resp, "text", "") or ""
            return status, text
        except Exception as e:
            logger.info(f"[HTTP_CLIENT] GET failed: {type(e).__name__}: {repr(e)}")
            return None

    async def close(self) -> None:
        async with self._lock:
            if self._session is None:
                return
            try:
                await self._session.close()
            except Exception as e:
                logger.debug(f"[HTTP_CLIENT] close failed: {type(e).__name__}: {e}")
            self._session = None


_shared_http_client = SharedHttpClient()


def get_shared_http_client() -> SharedHttpClient:
    return _shared_http_client


async def shutdown_shared_http_client() -> None:
    await _shared_http_client.close()
