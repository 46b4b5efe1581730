"""Stage progression state machine for planted crops."""

from __future__ import annotations

from numpy.random import Generator

from cropsim.clock import Clock, wall_clock_ms
from cropsim.models.crop import Crop
from cropsim.models.enums import GrowthOutcome
from cropsim.models.results import GrowthBonuses
from cropsim.schemas.crop_config import CropConfig
from cropsim.services.condition_validator import ConditionValidator


class GrowthEngine:
	"""Advances crops through ``1..stage_count``.

	Growth is gated by :meth:`ConditionValidator.can_grow`. A gated crop is
	suspended rather than reset, and the terminal stage absorbs no further
	time. Elapsed time is scaled by the additive bonus multiplier and any
	excess over a stage's duration carries into the next stage, so one call
	may cross several boundaries.
	"""

	def __init__(
		self,
		config: CropConfig,
		validator: ConditionValidator,
		rng: Generator | None = None,
		clock: Clock = wall_clock_ms,
	):
		self.config = config
		self.validator = validator
		self.rng = rng
		self.clock = clock

	def update_growth(self, crop: Crop, delta_time: float, bonuses: GrowthBonuses) -> GrowthOutcome:
		if not self.can_grow(crop):
			return GrowthOutcome.SUSPENDED

		if crop.stage >= self.config.stage_count:
			return GrowthOutcome.MATURE

		progress = self.calculate_stage_progress(delta_time, bonuses)
		crop.stage_progress += progress
		crop.total_age += progress

		starting_stage = crop.stage
		while self.should_advance_stage(crop):
			self.advance_stage(crop)

		if crop.stage >= self.config.stage_count:
			crop.stage_progress = min(crop.stage_progress, self.stage_duration(crop.stage))

		crop.last_update_time = self.clock()
		return GrowthOutcome.ADVANCED if crop.stage > starting_stage else GrowthOutcome.GREW

	def can_grow(self, crop: Crop) -> bool:
		return self.validator.can_grow(crop.position).valid

	def calculate_stage_progress(self, delta_time: float, bonuses: GrowthBonuses) -> float:
		return delta_time * bonuses.multiplier

	def should_advance_stage(self, crop: Crop) -> bool:
		if crop.stage >= self.config.stage_count:
			return False
		return crop.stage_progress >= self.stage_duration(crop.stage)

	def advance_stage(self, crop: Crop) -> None:
		stage_time = self.stage_duration(crop.stage)
		if crop.stage >= self.config.stage_count:
			crop.stage_progress = min(crop.stage_progress, stage_time)
			return

		excess = crop.stage_progress - stage_time
		crop.stage += 1
		crop.stage_progress = max(0.0, excess)
		self.refresh_visual_height(crop)

	def stage_duration(self, stage: int) -> float:
		return self.config.stage_duration(stage)

	def refresh_visual_height(self, crop: Crop) -> None:
		height = self.config.visual_height(crop.stage, self.rng)
		if height is not None:
			crop.visual_height = height
