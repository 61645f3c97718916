"""Redis / S3 어댑터 테스트 (클라이언트는 Mock)"""

import io
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from redis.exceptions import ConnectionError as RedisConnectionError

from logo_cdn.core.exceptions import StorageConnectionException
from logo_cdn.storage.blob_store import S3BlobStore
from logo_cdn.storage.kv_store import RedisKeyValueStore


def client_error(code: str, operation: str = "GetObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class TestRedisKeyValueStore:
    def test_get_decodes_bytes(self):
        redis_client = MagicMock()
        redis_client.get.return_value = b'{"provider": "logo.dev"}'

        assert RedisKeyValueStore(redis_client=redis_client).get("logo:x:png") == '{"provider": "logo.dev"}'

    def test_get_missing(self):
        redis_client = MagicMock()
        redis_client.get.return_value = None

        assert RedisKeyValueStore(redis_client=redis_client).get("logo:x:png") is None

    def test_put_with_ttl_uses_setex(self):
        redis_client = MagicMock()

        RedisKeyValueStore(redis_client=redis_client).put("k", "v", ttl_seconds=60)

        redis_client.setex.assert_called_once_with("k", 60, "v")
        redis_client.set.assert_not_called()

    def test_put_without_ttl(self):
        redis_client = MagicMock()

        RedisKeyValueStore(redis_client=redis_client).put("k", "v")

        redis_client.set.assert_called_once_with("k", "v")

    @pytest.mark.parametrize("method, args", [("get", ("k",)), ("put", ("k", "v", 10)), ("delete", ("k",))])
    def test_connection_errors_are_wrapped(self, method, args):
        redis_client = MagicMock()
        for name in ("get", "setex", "set", "delete"):
            getattr(redis_client, name).side_effect = RedisConnectionError("down")
        store = RedisKeyValueStore(redis_client=redis_client)

        with pytest.raises(StorageConnectionException) as exc_info:
            getattr(store, method)(*args)

        assert exc_info.value.error_code == "STORAGE_CONNECTION_ERROR"

    def test_health_check(self):
        redis_client = MagicMock()
        store = RedisKeyValueStore(redis_client=redis_client)
        assert store.health_check() is True

        redis_client.ping.side_effect = RedisConnectionError("down")
        assert store.health_check() is False


class TestS3BlobStore:
    def test_health_check(self):
        s3 = MagicMock()
        store = S3BlobStore(bucket="logos", prefix="", s3_client=s3)

        assert store.health_check() is True
        s3.head_bucket.assert_called_once_with(Bucket="logos")

        s3.head_bucket.side_effect = client_error("403", "HeadBucket")
        assert store.health_check() is False

    def test_get_reads_prefixed_key(self):
        s3 = MagicMock()
        s3.get_object.return_value = {"Body": io.BytesIO(b"png-bytes")}
        store = S3BlobStore(bucket="logos", prefix="cdn", s3_client=s3)

        assert store.get("logos/example.com.png") == b"png-bytes"
        s3.get_object.assert_called_once_with(Bucket="logos", Key="cdn/logos/example.com.png")

    @pytest.mark.parametrize("code", ["NoSuchKey", "404", "NotFound"])
    def test_missing_object_is_none(self, code):
        s3 = MagicMock()
        s3.get_object.side_effect = client_error(code)
        s3.head_object.side_effect = client_error(code, "HeadObject")
        store = S3BlobStore(bucket="logos", prefix="", s3_client=s3)

        assert store.get("missing") is None
        assert store.head("missing") is False

    def test_other_client_errors_raise(self):
        s3 = MagicMock()
        s3.get_object.side_effect = client_error("AccessDenied")
        store = S3BlobStore(bucket="logos", prefix="", s3_client=s3)

        with pytest.raises(StorageConnectionException):
            store.get("logos/example.com.png")

    def test_put_sets_headers_and_metadata(self):
        s3 = MagicMock()
        store = S3BlobStore(bucket="logos", prefix="", s3_client=s3)

        store.put(
            "logos/example.com.png",
            b"data",
            "image/png",
            cache_control="public, max-age=31536000, immutable",
            metadata={"provider": "logo.dev"},
        )

        s3.put_object.assert_called_once_with(
            Bucket="logos",
            Key="logos/example.com.png",
            Body=b"data",
            ContentType="image/png",
            CacheControl="public, max-age=31536000, immutable",
            Metadata={"provider": "logo.dev"},
        )

    def test_put_without_optional_fields(self):
        s3 = MagicMock()
        S3BlobStore(bucket="logos", prefix="", s3_client=s3).put("k", b"{}", "application/json")

        kwargs = s3.put_object.call_args.kwargs
        assert "CacheControl" not in kwargs
        assert "Metadata" not in kwargs

    def test_put_failure_raises(self):
        s3 = MagicMock()
        s3.put_object.side_effect = client_error("InternalError", "PutObject")

        with pytest.raises(StorageConnectionException):
            S3BlobStore(bucket="logos", prefix="", s3_client=s3).put("k", b"x", "image/png")

    def test_head_and_delete(self):
        s3 = MagicMock()
        store = S3BlobStore(bucket="logos", prefix="cdn/", s3_client=s3)

        assert store.head("k") is True
        store.delete("k")

        s3.delete_object.assert_called_once_with(Bucket="logos", Key="cdn/k")
