"""S3 호환 durable tier (AWS S3, Cloudflare R2, MinIO).

로고 바이너리와 sidecar 메타데이터 JSON을 같은 버킷에 저장합니다.
"""

from typing import Any, Optional

import boto3
from botocore.exceptions import ClientError

from logo_cdn.core.config import settings
from logo_cdn.core.logging import logger
from logo_cdn.core.exceptions import StorageConnectionException

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


class S3BlobStore:
    """S3 호환 오브젝트 저장소

    모든 키 앞에 prefix를 붙입니다. 없는 오브젝트는 예외가 아니라 None/False로 돌려줍니다.
    """

    def __init__(
        self,
        bucket: Optional[str] = None,
        prefix: Optional[str] = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        s3_client: Optional[Any] = None,
    ) -> None:
        """
        Args:
            bucket: 버킷 이름 (기본값: settings.blob_bucket)
            prefix: 키 prefix (예: "cdn/")
            region: 리전
            endpoint_url: R2/MinIO 엔드포인트
            s3_client: 이미 만들어진 boto3 클라이언트 (테스트 주입용)
        """
        self._bucket = bucket or settings.blob_bucket
        raw_prefix = settings.blob_prefix if prefix is None else prefix
        self._prefix = raw_prefix.rstrip("/") + "/" if raw_prefix else ""

        if s3_client is not None:
            self._s3 = s3_client
        else:
            kwargs: dict = {}
            region = region or settings.blob_region
            endpoint_url = endpoint_url or settings.blob_endpoint_url
            if region:
                kwargs["region_name"] = region
            if endpoint_url:
                kwargs["endpoint_url"] = endpoint_url
            self._s3 = boto3.client("s3", **kwargs)

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    @staticmethod
    def _is_not_found(error: ClientError) -> bool:
        code = str(error.response.get("Error", {}).get("Code", ""))
        return code in _NOT_FOUND_CODES

    def get(self, key: str) -> Optional[bytes]:
        """오브젝트 본문 조회 (없으면 None)"""
        full_key = self._full_key(key)
        try:
            response = self._s3.get_object(Bucket=self._bucket, Key=full_key)
            return response["Body"].read()
        except ClientError as e:
            if self._is_not_found(e):
                return None
            logger.error(f"Blob read error: key={full_key}, error={e}")
            raise StorageConnectionException(tier="blob", reason=str(e), details={"key": full_key})
        except Exception as e:
            logger.error(f"Blob read error: key={full_key}, error={type(e).__name__}: {e}")
            raise StorageConnectionException(tier="blob", reason=str(e), details={"key": full_key})

    def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        cache_control: Optional[str] = None,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        """오브젝트 저장 (같은 키는 덮어씀)"""
        full_key = self._full_key(key)
        params: dict[str, Any] = {
            "Bucket": self._bucket,
            "Key": full_key,
            "Body": data,
            "ContentType": content_type,
        }
        if cache_control:
            params["CacheControl"] = cache_control
        if metadata:
            params["Metadata"] = metadata

        try:
            self._s3.put_object(**params)
        except Exception as e:
            logger.error(f"Blob write error: key={full_key}, error={type(e).__name__}: {e}")
            raise StorageConnectionException(tier="blob", reason=str(e), details={"key": full_key})

        logger.debug(f"Blob write: s3://{self._bucket}/{full_key} ({len(data)} bytes)")

    def head(self, key: str) -> bool:
        """오브젝트 존재 여부"""
        full_key = self._full_key(key)
        try:
            self._s3.head_object(Bucket=self._bucket, Key=full_key)
            return True
        except ClientError as e:
            if self._is_not_found(e):
                return False
            raise StorageConnectionException(tier="blob", reason=str(e), details={"key": full_key})
        except Exception as e:
            raise StorageConnectionException(tier="blob", reason=str(e), details={"key": full_key})

    def delete(self, key: str) -> None:
        """오브젝트 삭제 (S3는 없는 키 삭제도 성공)"""
        full_key = self._full_key(key)
        try:
            self._s3.delete_object(Bucket=self._bucket, Key=full_key)
        except Exception as e:
            logger.error(f"Blob delete error: key={full_key}, error={type(e).__name__}: {e}")
            raise StorageConnectionException(tier="blob", reason=str(e), details={"key": full_key})

    def health_check(self) -> bool:
        """버킷 접근 가능 여부"""
        try:
            self._s3.head_bucket(Bucket=self._bucket)
            return True
        except Exception as e:
            logger.warning(f"Blob health check failed: bucket={self._bucket}, error={type(e).__name__}")
            return False
