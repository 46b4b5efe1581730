"""Probabilistic harvest yields."""

from __future__ import annotations

from numpy.random import Generator

from cropsim.models.enums import ItemType
from cropsim.models.results import HarvestYield
from cropsim.schemas.crop_config import CropConfig


class YieldCalculator:
	"""Maps ``(stage, enchantment_level)`` to a harvest bundle.

	Immature crops always return no primary items and a fixed seed count.
	Mature crops draw from a two-point distribution (max with the configured
	high chance, else min). An enchantment level with a table entry replaces
	the primary draw with a uniform integer over
	``[fortune_min_primary, primary_max_base + bonus]``. Levels missing from
	the table count as level 0.
	"""

	def __init__(self, config: CropConfig, rng: Generator):
		self.config = config
		self.rng = rng

	def calculate_yield(self, stage: int, enchantment_level: int = 0) -> HarvestYield:
		primary = self.calculate_item_count(stage, enchantment_level, ItemType.primary)
		seeds = self.calculate_item_count(stage, enchantment_level, ItemType.seed)
		return HarvestYield(primary=primary, seeds=seeds)

	def calculate_item_count(self, stage: int, enchantment_level: int, item_type: ItemType) -> int:
		if stage < self.config.resolved_mature_stage:
			if item_type == ItemType.seed:
				return self.config.immature_seed_count
			return 0

		level = self.effective_level(enchantment_level)
		if item_type == ItemType.primary:
			return self._primary_count(level)
		return self._seed_count(level)

	def effective_level(self, enchantment_level: int) -> int:
		if 0 <= enchantment_level < len(self.config.fortune_primary_bonus):
			return enchantment_level
		return 0

	def _primary_count(self, level: int) -> int:
		cfg = self.config
		if level == 0:
			return self._two_point(cfg.primary_min_base, cfg.primary_max_base, cfg.primary_high_chance)
		upper = cfg.primary_max_base + cfg.fortune_primary_bonus[level]
		return self._uniform(cfg.fortune_min_primary, upper)

	def _seed_count(self, level: int) -> int:
		cfg = self.config
		if cfg.fortune_affects_seeds and level > 0:
			upper = cfg.seed_max_base + cfg.fortune_primary_bonus[level]
			return self._uniform(cfg.seed_min_base, upper)
		return self._two_point(cfg.seed_min_base, cfg.seed_max_base, cfg.seed_high_chance)

	def _two_point(self, low: int, high: int, high_chance: float) -> int:
		return high if self.rng.random() < high_chance else low

	def _uniform(self, low: int, high: int) -> int:
		return int(self.rng.integers(low, high, endpoint=True))
