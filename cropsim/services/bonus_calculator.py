"""Environmental growth-speed bonuses: nearby water and rain."""

from __future__ import annotations

from cropsim.models.crop import BlockPosition
from cropsim.models.results import GrowthBonuses
from cropsim.schemas.crop_config import CropConfig
from cropsim.world import WATER_BLOCKS, WeatherState, WorldQuery


class BonusCalculator:
	def __init__(self, config: CropConfig, world: WorldQuery):
		self.config = config
		self.world = world

	def has_water_nearby(self, position: BlockPosition, radius: int) -> bool:
		"""Scan the Manhattan diamond of ``radius`` on the crop's own y-level."""
		for dx in range(-radius, radius + 1):
			for dz in range(-radius, radius + 1):
				if abs(dx) + abs(dz) > radius:
					continue
				block = self.world.get_block(position.offset(dx=dx, dz=dz))
				if block.type in WATER_BLOCKS:
					return True
		return False

	def is_raining(self, position: BlockPosition, weather: WeatherState) -> bool:
		if not self.world.is_exposed_to_sky(position):
			return False
		return weather.raining

	def calculate_bonuses(self, position: BlockPosition, weather: WeatherState) -> GrowthBonuses:
		has_water = self.has_water_nearby(position, self.config.water_detection_radius)
		raining = self.is_raining(position, weather)
		return GrowthBonuses(
			water_bonus=self.config.water_bonus_multiplier if has_water else 1.0,
			rain_bonus=self.config.rain_bonus_multiplier if raining else 1.0,
		)
