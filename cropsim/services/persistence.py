"""Chunk-scoped crop persistence over an async key/value backend."""

from __future__ import annotations

import json
from typing import Any

from numpy.random import Generator
from pydantic import ValidationError

from cropsim.clock import Clock, wall_clock_ms
from cropsim.logging import get_logger
from cropsim.models.crop import ChunkCoords, Crop
from cropsim.models.enums import PersistenceErrorType
from cropsim.models.results import PersistenceResult
from cropsim.schemas.chunk import (
	CHUNK_DATA_VERSION,
	ChunkBundle,
	ChunkPayload,
	CropRecord,
	PositionPayload,
)
from cropsim.schemas.crop_config import CropConfig
from cropsim.storage.base import StorageBackend

_logger = get_logger("persistence")


def crop_to_record(crop: Crop) -> CropRecord:
	return CropRecord(
		id=crop.id,
		position=PositionPayload.from_position(crop.position),
		stage=crop.stage,
		stage_progress=crop.stage_progress,
		total_age=crop.total_age,
		planted_at=crop.planted_at,
		last_update_time=crop.last_update_time,
	)


def crop_from_record(
	raw: CropRecord | dict[str, Any],
	config: CropConfig,
	rng: Generator | None = None,
) -> Crop:
	"""Rebuild a crop from a saved entry; visual fields are recomputed.

	Raises ``pydantic.ValidationError`` for malformed entries and
	``ValueError`` for stages the species does not have.
	"""
	record = raw if isinstance(raw, CropRecord) else CropRecord.model_validate(raw)
	if record.stage > config.stage_count:
		raise ValueError(
			f"crop {record.id} has stage {record.stage}, species {config.species} "
			f"only has {config.stage_count}"
		)

	crop = Crop(
		id=record.id,
		position=record.position.to_position(),
		planted_at=record.planted_at,
		last_update_time=record.last_update_time,
		stage=record.stage,
		stage_progress=record.stage_progress,
		total_age=record.total_age,
	)
	height = config.visual_height(crop.stage, rng)
	if height is not None:
		crop.visual_height = height
	return crop


class CropPersistenceManager:
	"""Saves and loads one species' crops, one storage key per chunk.

	Every failure is returned as a :class:`PersistenceResult` carrying the
	chunk coordinates; nothing is raised and no state is shared between
	calls, so a bad chunk never blocks the next operation.
	"""

	def __init__(self, storage: StorageBackend, species: str, clock: Clock = wall_clock_ms):
		self.storage = storage
		self.species = species
		self.clock = clock

	def chunk_key(self, chunk_coords: ChunkCoords) -> str:
		return f"chunk_{self.species}_{chunk_coords.chunk_x}_{chunk_coords.chunk_z}"

	async def save_chunk(self, bundle: ChunkBundle) -> PersistenceResult[None]:
		coords = bundle.chunk_coords
		try:
			bundle.last_saved = self.clock()
			payload = bundle.to_payload().model_dump(mode="json", by_alias=True)
			await self.storage.save(self.chunk_key(coords), json.dumps(payload))
		except Exception as exc:
			_logger.error(
				"chunk_save_failed",
				species=self.species,
				chunk=str(coords),
				error=str(exc),
			)
			return PersistenceResult.fail(
				PersistenceErrorType.STORAGE_ERROR,
				f"Failed to save chunk data: {exc}",
				coords,
				exc,
			)

		_logger.debug("chunk_saved", species=self.species, chunk=str(coords), crops=len(bundle.crops))
		return PersistenceResult.ok()

	async def load_chunk(self, chunk_coords: ChunkCoords) -> PersistenceResult[ChunkBundle]:
		try:
			raw = await self.storage.load(self.chunk_key(chunk_coords))
		except Exception as exc:
			return PersistenceResult.fail(
				PersistenceErrorType.STORAGE_ERROR,
				f"Failed to load chunk data: {exc}",
				chunk_coords,
				exc,
			)

		if raw is None:
			return PersistenceResult.ok(ChunkBundle(chunk_coords=chunk_coords))

		try:
			text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
			decoded = json.loads(text)
		except (UnicodeDecodeError, json.JSONDecodeError, TypeError) as exc:
			return PersistenceResult.fail(
				PersistenceErrorType.CORRUPTED_DATA,
				"Failed to parse chunk data JSON",
				chunk_coords,
				exc,
			)

		try:
			payload = ChunkPayload.model_validate(decoded)
		except ValidationError as exc:
			return PersistenceResult.fail(
				PersistenceErrorType.INVALID_FORMAT,
				f"Chunk data has invalid format ({exc.error_count()} errors)",
				chunk_coords,
				exc,
			)

		if payload.version != CHUNK_DATA_VERSION:
			return PersistenceResult.fail(
				PersistenceErrorType.INCOMPATIBLE_VERSION,
				f"Incompatible chunk data version: {payload.version} (current: {CHUNK_DATA_VERSION})",
				chunk_coords,
			)

		return PersistenceResult.ok(ChunkBundle.from_payload(payload))

	async def delete_chunk(self, chunk_coords: ChunkCoords) -> PersistenceResult[None]:
		try:
			await self.storage.delete(self.chunk_key(chunk_coords))
		except Exception as exc:
			return PersistenceResult.fail(
				PersistenceErrorType.STORAGE_ERROR,
				f"Failed to delete chunk data: {exc}",
				chunk_coords,
				exc,
			)
		return PersistenceResult.ok()

	async def has_chunk(self, chunk_coords: ChunkCoords) -> bool:
		try:
			return await self.storage.exists(self.chunk_key(chunk_coords))
		except Exception as exc:
			_logger.warning("chunk_exists_check_failed", chunk=str(chunk_coords), error=str(exc))
			return False

	async def save_crops(self, chunk_coords: ChunkCoords, records: list[CropRecord]) -> PersistenceResult[None]:
		bundle = ChunkBundle(
			chunk_coords=chunk_coords,
			crops=[record.model_dump(mode="json", by_alias=True) for record in records],
		)
		return await self.save_chunk(bundle)

	async def load_crops(self, chunk_coords: ChunkCoords) -> PersistenceResult[list[Any]]:
		result = await self.load_chunk(chunk_coords)
		if not result.success or result.data is None:
			return PersistenceResult(success=False, error=result.error)
		return PersistenceResult.ok(result.data.crops)
