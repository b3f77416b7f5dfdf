"""Key/value backends holding named JSON blobs."""

import json
from typing import Any, Protocol

from redis.asyncio import Redis
from redis.exceptions import RedisError

from opstracker.core.errors import CorruptValueError, StorageError
from opstracker.storage.redis_client import get_redis


class JsonStore(Protocol):
    """Backend interface: durable get/set/delete of JSON values by key.

    Implementations raise ``StorageError`` for every failure, and its
    ``CorruptValueError`` subclass for values that are not valid JSON.
    """

    async def get_json(self, key: str) -> Any | None:
        """Return the decoded value, or None if the key is absent."""

    async def set_json(self, key: str, value: Any) -> None:
        """Encode and store a value, replacing any prior one."""

    async def delete(self, key: str) -> None:
        """Remove a key. Missing keys are not an error."""

    async def ping(self) -> bool:
        """Return True if the backend is reachable."""


class RedisJsonStore:
    """JSON blobs stored as plain Redis strings."""

    def __init__(self, redis: Redis | None = None):
        self._redis = redis

    @property
    def redis(self) -> Redis:
        return self._redis or get_redis()

    async def get_json(self, key: str) -> Any | None:
        try:
            data = await self.redis.get(key)
        except RedisError as e:
            raise StorageError(f"Redis read failed: {e}", key=key) from e
        except UnicodeDecodeError as e:
            raise CorruptValueError(f"Stored value is not UTF-8: {e}", key=key) from e
        if data is None:
            return None
        return _decode(key, data)

    async def set_json(self, key: str, value: Any) -> None:
        try:
            await self.redis.set(key, json.dumps(value))
        except RedisError as e:
            raise StorageError(f"Redis write failed: {e}", key=key) from e

    async def delete(self, key: str) -> None:
        try:
            await self.redis.delete(key)
        except RedisError as e:
            raise StorageError(f"Redis delete failed: {e}", key=key) from e

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except RedisError:
            return False


class MemoryJsonStore:
    """Process-local backend for tests and single-tab deployments.

    Values are kept serialized, so every read decodes a fresh copy and
    writes to ``raw`` are observed on the next read.
    """

    def __init__(self) -> None:
        self.raw: dict[str, str] = {}

    async def get_json(self, key: str) -> Any | None:
        data = self.raw.get(key)
        if data is None:
            return None
        return _decode(key, data)

    async def set_json(self, key: str, value: Any) -> None:
        self.raw[key] = json.dumps(value)

    async def delete(self, key: str) -> None:
        self.raw.pop(key, None)

    async def ping(self) -> bool:
        return True


def _decode(key: str, data: str | bytes) -> Any:
    try:
        return json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CorruptValueError(f"Corrupt JSON value: {e}", key=key) from e
