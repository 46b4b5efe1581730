"""Dict-backed storage for tests and single-process runs."""

from __future__ import annotations


class InMemoryStorage:
	def __init__(self) -> None:
		self._data: dict[str, str] = {}

	async def save(self, key: str, data: str) -> None:
		self._data[key] = data

	async def load(self, key: str) -> str | None:
		return self._data.get(key)

	async def delete(self, key: str) -> None:
		self._data.pop(key, None)

	async def exists(self, key: str) -> bool:
		return key in self._data

	def clear(self) -> None:
		self._data.clear()

	def size(self) -> int:
		return len(self._data)

	def keys(self) -> list[str]:
		return list(self._data)
