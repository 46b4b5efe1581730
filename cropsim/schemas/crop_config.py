"""Per-species crop configuration schemas."""

from __future__ import annotations

import math

from numpy.random import Generator
from pydantic import BaseModel, ConfigDict, Field, model_validator

from cropsim.models.enums import Orientation

_DISTRIBUTION_TOLERANCE = 1e-6


class StageVisual(BaseModel):
	model_config = ConfigDict(frozen=True)

	stage: int = Field(ge=1)
	color: str = Field(pattern=r"^#[0-9a-fA-F]{6}$")
	height: float = Field(ge=0)
	height_variation: float | None = Field(default=None, ge=0)
	orientation: Orientation = Orientation.UPRIGHT
	transition_color: str | None = Field(default=None, pattern=r"^#[0-9a-fA-F]{6}$")

	@property
	def has_color_transition(self) -> bool:
		return self.transition_color is not None


class CropConfig(BaseModel):
	"""Immutable tuning for one crop species."""

	model_config = ConfigDict(frozen=True)

	species: str = Field(min_length=1, pattern=r"^[a-z0-9_]+$")

	# ── Growth ──────────────────────────────────────────────────────────────
	base_growth_time: float = Field(gt=0)
	stage_distribution: tuple[float, ...]
	stage_count: int = Field(ge=1)

	# ── Environmental bonuses ───────────────────────────────────────────────
	water_bonus_multiplier: float = Field(default=1.0, ge=1.0)
	rain_bonus_multiplier: float = Field(default=1.0, ge=1.0)
	water_detection_radius: int = Field(default=4, ge=0)

	# ── Yield ───────────────────────────────────────────────────────────────
	primary_min_base: int = Field(ge=0)
	primary_max_base: int = Field(ge=0)
	primary_high_chance: float = Field(ge=0, le=1)
	seed_min_base: int = Field(ge=0)
	seed_max_base: int = Field(ge=0)
	seed_high_chance: float = Field(ge=0, le=1)
	immature_seed_count: int = Field(default=1, ge=0)
	mature_stage: int | None = Field(default=None, ge=1)

	# ── Enchantment ─────────────────────────────────────────────────────────
	fortune_primary_bonus: tuple[int, ...] = (0,)
	fortune_min_primary: int = Field(default=0, ge=0)
	fortune_affects_seeds: bool = False

	# ── Conditions ──────────────────────────────────────────────────────────
	min_light_level: int = Field(default=0, ge=0, le=15)
	valid_soil_types: frozenset[str]
	incompatible_biomes: frozenset[str] = frozenset()

	# ── Visuals ─────────────────────────────────────────────────────────────
	stage_visuals: tuple[StageVisual, ...] = ()

	@model_validator(mode="after")
	def _check_consistency(self) -> CropConfig:
		if len(self.stage_distribution) != self.stage_count:
			raise ValueError("stage_distribution must have one entry per stage")
		if any(share < 0 for share in self.stage_distribution):
			raise ValueError("stage_distribution entries must be non-negative")
		if not math.isclose(sum(self.stage_distribution), 1.0, abs_tol=_DISTRIBUTION_TOLERANCE):
			raise ValueError("stage_distribution must sum to 1.0")
		if self.primary_min_base > self.primary_max_base:
			raise ValueError("primary_min_base cannot exceed primary_max_base")
		if self.seed_min_base > self.seed_max_base:
			raise ValueError("seed_min_base cannot exceed seed_max_base")
		for level, bonus in enumerate(self.fortune_primary_bonus[1:], start=1):
			if self.fortune_min_primary > self.primary_max_base + bonus:
				raise ValueError(f"fortune level {level} range is empty")
		if self.mature_stage is not None and self.mature_stage > self.stage_count:
			raise ValueError("mature_stage cannot exceed stage_count")
		for visual in self.stage_visuals:
			if visual.stage > self.stage_count:
				raise ValueError(f"stage visual {visual.stage} is beyond stage_count")
		return self

	@property
	def resolved_mature_stage(self) -> int:
		return self.mature_stage if self.mature_stage is not None else self.stage_count

	def stage_duration(self, stage: int) -> float:
		"""Seconds required to finish ``stage``; 0 outside the configured range."""
		index = stage - 1
		if index < 0 or index >= len(self.stage_distribution):
			return 0.0
		return self.base_growth_time * self.stage_distribution[index]

	def visual_for(self, stage: int) -> StageVisual | None:
		for visual in self.stage_visuals:
			if visual.stage == stage:
				return visual
		return None

	def visual_height(self, stage: int, rng: Generator | None = None) -> float | None:
		visual = self.visual_for(stage)
		if visual is None:
			return None
		height = visual.height
		if visual.height_variation and rng is not None:
			height += float(rng.random()) * visual.height_variation
		return height


OAT_CONFIG = CropConfig(
	species="oat",
	# 4 in-game days
	base_growth_time=345_600,
	stage_distribution=(0.25, 0.25, 0.25, 0.25),
	stage_count=4,
	water_bonus_multiplier=1.15,
	rain_bonus_multiplier=1.10,
	water_detection_radius=4,
	primary_min_base=3,
	primary_max_base=4,
	primary_high_chance=0.80,
	seed_min_base=1,
	seed_max_base=2,
	seed_high_chance=0.70,
	immature_seed_count=1,
	fortune_primary_bonus=(0, 1, 2, 3),
	fortune_min_primary=4,
	min_light_level=9,
	valid_soil_types=frozenset({"FARMLAND", "TILLED_SOIL"}),
	incompatible_biomes=frozenset({"EXTREME_DESERT", "FROZEN_TUNDRA", "NETHER", "END"}),
	stage_visuals=(
		StageVisual(stage=1, color="#90EE90", height=0.15),
		StageVisual(stage=2, color="#228B22", height=0.40),
		StageVisual(stage=3, color="#228B22", height=0.70, transition_color="#F0E68C"),
		StageVisual(
			stage=4,
			color="#DAA520",
			height=0.90,
			height_variation=0.10,
			orientation=Orientation.DROOPING,
		),
	),
)
