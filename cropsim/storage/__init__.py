"""Storage backends for chunk persistence."""

from __future__ import annotations

from redis.asyncio import Redis

from cropsim.config import Settings, StorageBackendKind
from cropsim.storage.base import StorageBackend, StorageError
from cropsim.storage.memory import InMemoryStorage
from cropsim.storage.redis_backend import RedisStorage


def build_storage(settings: Settings, redis_client: Redis | None = None) -> StorageBackend:
	"""Pick the backend named by ``settings.storage_backend``."""
	if settings.storage_backend == StorageBackendKind.redis:
		client = redis_client or Redis.from_url(settings.redis_url)
		return RedisStorage(client, key_prefix=settings.redis_key_prefix)
	return InMemoryStorage()


__all__ = [
	"InMemoryStorage",
	"RedisStorage",
	"StorageBackend",
	"StorageError",
	"build_storage",
]
