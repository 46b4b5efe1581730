"""Redis-backed chunk storage."""

from __future__ import annotations

from redis.asyncio import Redis
from redis.exceptions import RedisError

from cropsim.storage.base import StorageError


class RedisStorage:
	"""Stores each chunk payload as a plain Redis string under a prefixed key."""

	def __init__(self, redis_client: Redis, key_prefix: str = ""):
		self.redis_client = redis_client
		self.key_prefix = key_prefix

	def _key(self, key: str) -> str:
		return f"{self.key_prefix}{key}"

	async def save(self, key: str, data: str) -> None:
		try:
			await self.redis_client.set(self._key(key), data)
		except RedisError as exc:
			raise StorageError(f"redis save failed for {key}: {exc}") from exc

	async def load(self, key: str) -> str | bytes | None:
		"""Return the stored payload as-is; decoding is left to the caller."""
		try:
			return await self.redis_client.get(self._key(key))
		except RedisError as exc:
			raise StorageError(f"redis load failed for {key}: {exc}") from exc

	async def delete(self, key: str) -> None:
		try:
			await self.redis_client.delete(self._key(key))
		except RedisError as exc:
			raise StorageError(f"redis delete failed for {key}: {exc}") from exc

	async def exists(self, key: str) -> bool:
		try:
			count = await self.redis_client.exists(self._key(key))
		except RedisError as exc:
			raise StorageError(f"redis exists failed for {key}: {exc}") from exc
		return bool(count)
