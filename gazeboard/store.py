from __future__ import annotations
from typing import Dict, Optional, Protocol

import redis

from .config import DEFAULTS


class BlobStore(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...
    def set(self, key: str, value: bytes) -> None: ...
    def remove(self, key: str) -> None: ...


class RedisStore:
    """Key-value blobs in Redis; values stay raw bytes."""

    def __init__(self, client: Optional[redis.Redis] = None):
        self.r = client or redis.Redis(
            host=DEFAULTS["redis_host"], port=DEFAULTS["redis_port"], db=DEFAULTS["redis_db"],
            decode_responses=False,
        )

    def get(self, key: str) -> Optional[bytes]:
        return self.r.get(key)

    def set(self, key: str, value: bytes) -> None:
        self.r.set(key, value)

    def remove(self, key: str) -> None:
        self.r.delete(key)

    def ping(self) -> bool:
        try:
            return bool(self.r.ping())
        except redis.RedisError:
            return False


class MemoryStore:
    def __init__(self, data: Optional[Dict[str, bytes]] = None):
        self.data: Dict[str, bytes] = dict(data or {})

    def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)

    def ping(self) -> bool:
        return True
