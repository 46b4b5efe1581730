"""Soil, space and light rules for planting and growth."""

from __future__ import annotations

from cropsim.models.crop import BlockPosition
from cropsim.models.results import ValidationResult
from cropsim.schemas.crop_config import CropConfig
from cropsim.world import NON_OBSTRUCTING_BLOCKS, WorldQuery


class ConditionValidator:
	"""Stateless checks against the host world for one species."""

	def __init__(self, config: CropConfig, world: WorldQuery):
		self.config = config
		self.world = world

	def can_plant(self, position: BlockPosition) -> ValidationResult:
		# Space at the planting cell is checked by the crop system so the
		# failure reason can tell soil and space apart.
		if not self.is_valid_soil(position):
			return ValidationResult(
				valid=False,
				reason="Invalid soil type. This crop requires specific soil conditions.",
			)
		return ValidationResult(valid=True)

	def can_grow(self, position: BlockPosition) -> ValidationResult:
		light_level = self.get_light_level(position)
		if light_level < self.config.min_light_level:
			return ValidationResult(
				valid=False,
				reason=(
					f"Insufficient light. Requires at least {self.config.min_light_level}, "
					f"current: {light_level}"
				),
			)

		if not self.has_space_above(position, check_above=True):
			return ValidationResult(
				valid=False,
				reason="Space above is obstructed. Remove the obstruction for growth to continue.",
			)

		return ValidationResult(valid=True)

	def is_valid_soil(self, position: BlockPosition) -> bool:
		soil = self.world.get_block(position.offset(dy=-1))
		return soil.type in self.config.valid_soil_types

	def has_space_above(self, position: BlockPosition, check_above: bool = False) -> bool:
		target = position.offset(dy=1) if check_above else position
		return self.world.get_block(target).type in NON_OBSTRUCTING_BLOCKS

	def get_light_level(self, position: BlockPosition) -> int:
		return self.world.get_light_level(position)

	def is_exposed_to_sky(self, position: BlockPosition) -> bool:
		return self.world.is_exposed_to_sky(position)
