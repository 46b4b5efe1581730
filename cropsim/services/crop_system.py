"""Crop system coordinator: planting, ticking, harvesting and chunk I/O."""

from __future__ import annotations

import asyncio
import uuid

import structlog
from numpy.random import Generator

from cropsim.clock import Clock, wall_clock_ms
from cropsim.logging import get_logger
from cropsim.models.crop import BlockPosition, ChunkCoords, Crop, PositionKey
from cropsim.models.enums import CropEventType, GrowthOutcome, PlantFailureReason
from cropsim.models.results import HarvestRecord, PersistenceResult, PlantResult
from cropsim.schemas.chunk import ChunkBundle
from cropsim.schemas.crop_config import CropConfig
from cropsim.services.biome_policy import BiomePolicy
from cropsim.services.bonus_calculator import BonusCalculator
from cropsim.services.condition_validator import ConditionValidator
from cropsim.services.growth_engine import GrowthEngine
from cropsim.services.persistence import CropPersistenceManager, crop_from_record, crop_to_record
from cropsim.services.yield_calculator import YieldCalculator
from cropsim.world import WeatherState, WorldQuery

_logger = get_logger("crop_system")


class CropSystem:
	"""Owns every loaded crop of one species, keyed by ``(world, x, y, z)``."""

	def __init__(
		self,
		config: CropConfig,
		world: WorldQuery,
		validator: ConditionValidator,
		bonus_calculator: BonusCalculator,
		growth_engine: GrowthEngine,
		yield_calculator: YieldCalculator,
		persistence: CropPersistenceManager,
		biome_policy: BiomePolicy,
		weather: WeatherState | None = None,
		rng: Generator | None = None,
		clock: Clock = wall_clock_ms,
	):
		self.config = config
		self.world = world
		self.validator = validator
		self.bonus_calculator = bonus_calculator
		self.growth_engine = growth_engine
		self.yield_calculator = yield_calculator
		self.persistence = persistence
		self.biome_policy = biome_policy
		self.weather = weather or WeatherState()
		self.rng = rng
		self.clock = clock
		self._crops: dict[PositionKey, Crop] = {}
		self._chunk_locks: dict[ChunkCoords, asyncio.Lock] = {}

	# ── Planting ────────────────────────────────────────────────────────────

	def plant_seed(self, position: BlockPosition) -> PlantResult:
		if position.key in self._crops:
			return PlantResult.fail(PlantFailureReason.ALREADY_PLANTED)

		if not self.validator.can_plant(position).valid:
			return PlantResult.fail(PlantFailureReason.INVALID_SOIL)

		if not self.biome_policy.is_compatible_biome(self.world.get_biome(position)):
			return PlantResult.fail(PlantFailureReason.INVALID_BIOME)

		if not self.validator.has_space_above(position):
			return PlantResult.fail(PlantFailureReason.OBSTRUCTED_SPACE)

		now = self.clock()
		crop = Crop(
			id=f"crop_{uuid.uuid4().hex}",
			position=position,
			planted_at=now,
			last_update_time=now,
		)
		height = self.config.visual_height(crop.stage, self.rng)
		if height is not None:
			crop.visual_height = height

		self._crops[position.key] = crop
		_logger.info(
			"crop_planted",
			event_type=CropEventType.PLANTED.value,
			species=self.config.species,
			crop_id=crop.id,
			chunk=str(position.chunk),
		)
		return PlantResult.ok(crop)

	# ── Queries ─────────────────────────────────────────────────────────────

	def get_crop(self, position: BlockPosition) -> Crop | None:
		return self._crops.get(position.key)

	def get_all_crops(self) -> list[Crop]:
		return list(self._crops.values())

	@property
	def crop_count(self) -> int:
		return len(self._crops)

	def remove_crop(self, position: BlockPosition) -> bool:
		"""Destroy a crop without producing any yield."""
		crop = self._crops.pop(position.key, None)
		if crop is None:
			return False
		_logger.info("crop_removed", event_type=CropEventType.DESTROYED.value, crop_id=crop.id)
		return True

	# ── Simulation ──────────────────────────────────────────────────────────

	def set_raining(self, raining: bool) -> None:
		self.weather.raining = raining

	def on_tick(self, delta_time: float) -> int:
		"""Advance every loaded crop; returns how many changed stage."""
		advanced = 0
		for crop in list(self._crops.values()):
			try:
				bonuses = self.bonus_calculator.calculate_bonuses(crop.position, self.weather)
				outcome = self.growth_engine.update_growth(crop, delta_time, bonuses)
			except Exception:
				_logger.exception("crop_update_failed", crop_id=crop.id, position=crop.position.key)
				continue

			if outcome == GrowthOutcome.ADVANCED:
				advanced += 1
				_logger.debug(
					"crop_stage_advanced",
					event_type=CropEventType.STAGE_ADVANCED.value,
					crop_id=crop.id,
					stage=crop.stage,
				)
		return advanced

	def on_plant_harvested(self, position: BlockPosition, enchantment_level: int = 0) -> HarvestRecord | None:
		crop = self.get_crop(position)
		if crop is None:
			_logger.warning("harvest_missing_crop", position=position.key)
			return None

		harvest_yield = self.yield_calculator.calculate_yield(crop.stage, enchantment_level)
		del self._crops[position.key]

		_logger.info(
			"crop_harvested",
			event_type=CropEventType.HARVESTED.value,
			crop_id=crop.id,
			stage=crop.stage,
			enchantment_level=enchantment_level,
			primary=harvest_yield.primary,
			seeds=harvest_yield.seeds,
		)
		return HarvestRecord(
			crop=crop,
			harvest_yield=harvest_yield,
			enchantment_level=enchantment_level,
			timestamp=self.clock(),
		)

	# ── Chunk lifecycle ─────────────────────────────────────────────────────

	def crops_in_chunk(self, chunk_coords: ChunkCoords) -> list[Crop]:
		return [crop for crop in self._crops.values() if crop.position.chunk == chunk_coords]

	async def on_chunk_load(self, chunk_coords: ChunkCoords) -> PersistenceResult[ChunkBundle]:
		async with self._lock_for(chunk_coords):
			with structlog.contextvars.bound_contextvars(chunk_x=chunk_coords.chunk_x, chunk_z=chunk_coords.chunk_z):
				result = await self.persistence.load_chunk(chunk_coords)
				if not result.success or result.data is None:
					error = result.error
					_logger.error(
						"chunk_load_failed",
						error_type=error.type.value if error else None,
						message=error.message if error else None,
					)
					return result

				restored = 0
				for entry in result.data.crops:
					try:
						crop = crop_from_record(entry, self.config, self.rng)
					except Exception:
						_logger.exception("crop_restore_failed")
						continue

					if crop.position.chunk != chunk_coords:
						_logger.warning(
							"crop_restore_wrong_chunk",
							crop_id=crop.id,
							crop_chunk=str(crop.position.chunk),
						)
						continue

					self._crops[crop.key] = crop
					restored += 1

				_logger.info("chunk_loaded", restored=restored, saved=len(result.data.crops))
				return result

	async def on_chunk_unload(self, chunk_coords: ChunkCoords) -> PersistenceResult[None]:
		async with self._lock_for(chunk_coords):
			with structlog.contextvars.bound_contextvars(chunk_x=chunk_coords.chunk_x, chunk_z=chunk_coords.chunk_z):
				crops = self.crops_in_chunk(chunk_coords)
				records = [crop_to_record(crop) for crop in crops]
				result = await self.persistence.save_crops(chunk_coords, records)
				if not result.success:
					_logger.error(
						"chunk_unload_failed",
						kept_in_memory=len(crops),
						message=result.error.message if result.error else None,
					)
					return result

				for crop in crops:
					self._crops.pop(crop.key, None)
				_logger.info("chunk_unloaded", saved=len(records))
				return result

	def _lock_for(self, chunk_coords: ChunkCoords) -> asyncio.Lock:
		lock = self._chunk_locks.get(chunk_coords)
		if lock is None:
			lock = asyncio.Lock()
			self._chunk_locks[chunk_coords] = lock
		return lock
