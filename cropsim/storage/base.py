"""Async key/value storage contract used by chunk persistence."""

from __future__ import annotations

from typing import Protocol


class StorageError(RuntimeError):
	"""Raised when a storage backend cannot complete an operation."""


class StorageBackend(Protocol):
	async def save(self, key: str, data: str) -> None: ...

	async def load(self, key: str) -> str | bytes | None: ...

	async def delete(self, key: str) -> None: ...

	async def exists(self, key: str) -> bool: ...
