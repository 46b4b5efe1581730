"""Biome compatibility rules."""

from __future__ import annotations

from collections.abc import Callable

from cropsim.schemas.crop_config import CropConfig

BiomeCheck = Callable[[str], bool]


class BiomePolicy:
	"""Decides where a species may be planted.

	By default a biome is allowed unless it appears in the species'
	``incompatible_biomes``. Species with inverted rules (desert-only,
	cave-only, ...) pass their own ``check``.
	"""

	def __init__(self, config: CropConfig, check: BiomeCheck | None = None):
		self.config = config
		self._check = check

	def is_compatible_biome(self, biome: str) -> bool:
		if self._check is not None:
			return self._check(biome)
		return biome not in self.config.incompatible_biomes

	def incompatible_biomes(self) -> list[str]:
		return sorted(self.config.incompatible_biomes)

	@classmethod
	def only(cls, config: CropConfig, allowed: set[str] | frozenset[str]) -> BiomePolicy:
		allowed_biomes = frozenset(allowed)
		return cls(config, check=lambda biome: biome in allowed_biomes)
