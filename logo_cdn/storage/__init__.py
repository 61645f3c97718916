"""Store adapters - export only."""

from .base import BlobStore, KeyValueStore
from .blob_store import S3BlobStore
from .kv_store import RedisKeyValueStore

__all__ = ["KeyValueStore", "BlobStore", "RedisKeyValueStore", "S3BlobStore"]
