from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING

import pytest

from cropsim.models.crop import BlockPosition, ChunkCoords
from cropsim.models.enums import CropEventType, PersistenceErrorType, PlantFailureReason
from cropsim.services.crop_system import CropSystem
from cropsim.services.persistence import crop_to_record
from cropsim.storage.base import StorageError
from cropsim.storage.memory import InMemoryStorage

if TYPE_CHECKING:
	from conftest import FakeClock, FakeWorld

STAGE_SECONDS = 86_400.0


def test_plant_seed_creates_stage_one_crop(crop_system: CropSystem, soil_at, clock: FakeClock) -> None:
	position = soil_at(0, 64, 0)
	result = crop_system.plant_seed(position)

	assert result.success is True
	assert result.reason is None
	crop = result.crop
	assert crop.id.startswith("crop_")
	assert crop.stage == 1
	assert crop.stage_progress == 0.0
	assert crop.planted_at == clock.now
	assert crop.visual_height == pytest.approx(0.15)
	assert crop_system.get_crop(position) is crop
	assert crop_system.crop_count == 1


def test_plant_seed_ids_are_unique(crop_system: CropSystem, soil_at) -> None:
	first = crop_system.plant_seed(soil_at(0, 64, 0)).crop
	second = crop_system.plant_seed(soil_at(1, 64, 0)).crop
	assert first.id != second.id


def test_plant_twice_is_rejected(crop_system: CropSystem, soil_at) -> None:
	position = soil_at(0, 64, 0)
	crop_system.plant_seed(position)
	result = crop_system.plant_seed(position)
	assert result.success is False
	assert result.reason == PlantFailureReason.ALREADY_PLANTED
	assert crop_system.crop_count == 1


def test_plant_on_dirt_is_invalid_soil(crop_system: CropSystem, soil_at) -> None:
	result = crop_system.plant_seed(soil_at(0, 64, 0, "DIRT"))
	assert result.success is False
	assert result.reason == PlantFailureReason.INVALID_SOIL
	assert crop_system.crop_count == 0


@pytest.mark.parametrize("biome", ["EXTREME_DESERT", "FROZEN_TUNDRA", "NETHER", "END"])
def test_plant_in_incompatible_biome(crop_system: CropSystem, world: FakeWorld, soil_at, biome: str) -> None:
	world.default_biome = biome
	result = crop_system.plant_seed(soil_at(0, 64, 0))
	assert result.reason == PlantFailureReason.INVALID_BIOME


def test_plant_into_occupied_cell(crop_system: CropSystem, world: FakeWorld, soil_at) -> None:
	position = soil_at(0, 64, 0)
	world.set_block(0, 64, 0, "stone")
	assert crop_system.plant_seed(position).reason == PlantFailureReason.OBSTRUCTED_SPACE


def test_failure_reasons_follow_check_order(crop_system: CropSystem, world: FakeWorld, soil_at) -> None:
	position = soil_at(0, 64, 0, "DIRT")
	world.default_biome = "NETHER"
	world.set_block(0, 64, 0, "stone")
	assert crop_system.plant_seed(position).reason == PlantFailureReason.INVALID_SOIL


def test_biome_is_reported_before_obstruction(crop_system: CropSystem, world: FakeWorld, soil_at) -> None:
	position = soil_at(0, 64, 0, "FARMLAND")
	world.default_biome = "NETHER"
	world.set_block(0, 64, 0, "stone")
	assert crop_system.plant_seed(position).reason == PlantFailureReason.INVALID_BIOME
	assert crop_system.crop_count == 0


def test_plant_into_water_cell_is_allowed(crop_system: CropSystem, world: FakeWorld, soil_at) -> None:
	position = soil_at(0, 64, 0)
	world.set_block(0, 64, 0, "water")
	assert crop_system.plant_seed(position).success is True


def test_remove_crop_yields_nothing(crop_system: CropSystem, soil_at) -> None:
	position = soil_at(0, 64, 0)
	crop_system.plant_seed(position)
	assert crop_system.remove_crop(position) is True
	assert crop_system.remove_crop(position) is False
	assert crop_system.get_crop(position) is None


def test_on_tick_advances_all_crops(crop_system: CropSystem, soil_at) -> None:
	for x in range(3):
		crop_system.plant_seed(soil_at(x, 64, 0))

	assert crop_system.on_tick(STAGE_SECONDS / 2) == 0
	assert crop_system.on_tick(STAGE_SECONDS / 2) == 3
	assert {crop.stage for crop in crop_system.get_all_crops()} == {2}


def test_on_tick_applies_rain_and_water(crop_system: CropSystem, world: FakeWorld, soil_at) -> None:
	wet = soil_at(0, 64, 0)
	dry = soil_at(20, 64, 20)
	world.set_block(1, 64, 0, "water")
	crop_system.set_raining(True)
	crop_system.plant_seed(wet)
	crop_system.plant_seed(dry)

	crop_system.on_tick(1_000.0)
	assert crop_system.get_crop(wet).stage_progress == pytest.approx(1_250.0)
	assert crop_system.get_crop(dry).stage_progress == pytest.approx(1_100.0)

	crop_system.set_raining(False)
	crop_system.on_tick(1_000.0)
	assert crop_system.get_crop(dry).stage_progress == pytest.approx(2_100.0)


def test_on_tick_skips_failing_crop(
	crop_system: CropSystem,
	soil_at,
	monkeypatch: pytest.MonkeyPatch,
) -> None:
	bad = soil_at(0, 64, 0)
	good = soil_at(5, 64, 5)
	crop_system.plant_seed(bad)
	crop_system.plant_seed(good)
	original = crop_system.bonus_calculator.calculate_bonuses

	def flaky(position: BlockPosition, weather):
		if position == bad:
			raise RuntimeError("world query failed")
		return original(position, weather)

	monkeypatch.setattr(crop_system.bonus_calculator, "calculate_bonuses", flaky)
	crop_system.on_tick(STAGE_SECONDS)

	assert crop_system.get_crop(bad).stage == 1
	assert crop_system.get_crop(good).stage == 2


def test_harvest_mature_crop(crop_system: CropSystem, soil_at, clock: FakeClock) -> None:
	position = soil_at(0, 64, 0)
	crop_system.plant_seed(position)
	crop_system.on_tick(4 * STAGE_SECONDS)

	record = crop_system.on_plant_harvested(position, enchantment_level=2)
	assert record is not None
	assert record.type == CropEventType.HARVESTED
	assert record.crop.stage == 4
	assert record.enchantment_level == 2
	assert 4 <= record.harvest_yield.primary <= 6
	assert record.harvest_yield.seeds in {1, 2}
	assert record.timestamp == clock.now
	assert crop_system.get_crop(position) is None


def test_harvest_immature_crop_still_removes(crop_system: CropSystem, soil_at) -> None:
	position = soil_at(0, 64, 0)
	crop_system.plant_seed(position)
	record = crop_system.on_plant_harvested(position)
	assert record.harvest_yield.primary == 0
	assert record.harvest_yield.seeds == 1
	assert crop_system.crop_count == 0


def test_harvest_missing_crop(crop_system: CropSystem, soil_at) -> None:
	assert crop_system.on_plant_harvested(soil_at(0, 64, 0)) is None


@pytest.mark.asyncio
async def test_unload_then_load_restores_crops(crop_system: CropSystem, soil_at) -> None:
	here = soil_at(1, 64, 1)
	elsewhere = soil_at(40, 64, 40)
	crop_system.plant_seed(here)
	crop_system.plant_seed(elsewhere)
	crop_system.on_tick(STAGE_SECONDS + 10.0)
	before = crop_system.get_crop(here)

	coords = ChunkCoords(chunk_x=0, chunk_z=0)
	unloaded = await crop_system.on_chunk_unload(coords)
	assert unloaded.success is True
	assert crop_system.get_crop(here) is None
	assert crop_system.get_crop(elsewhere) is not None

	loaded = await crop_system.on_chunk_load(coords)
	assert loaded.success is True
	restored = crop_system.get_crop(here)
	assert restored.id == before.id
	assert restored.stage == 2
	assert restored.stage_progress == pytest.approx(10.0)
	assert restored.total_age == pytest.approx(before.total_age)
	assert restored.visual_height == pytest.approx(0.40)


@pytest.mark.asyncio
async def test_unload_empty_chunk_clears_stale_data(crop_system: CropSystem, soil_at, storage: InMemoryStorage) -> None:
	position = soil_at(1, 64, 1)
	coords = ChunkCoords(chunk_x=0, chunk_z=0)
	crop_system.plant_seed(position)
	await crop_system.on_chunk_unload(coords)
	await crop_system.on_chunk_load(coords)
	crop_system.on_plant_harvested(position)

	await crop_system.on_chunk_unload(coords)
	payload = json.loads(await storage.load("chunk_oat_0_0"))
	assert payload["crops"] == []


@pytest.mark.asyncio
async def test_failed_unload_keeps_crops(crop_system: CropSystem, soil_at, monkeypatch: pytest.MonkeyPatch) -> None:
	position = soil_at(1, 64, 1)
	crop_system.plant_seed(position)

	async def broken_save(key: str, data: str) -> None:
		raise StorageError("disk full")

	monkeypatch.setattr(crop_system.persistence.storage, "save", broken_save)
	result = await crop_system.on_chunk_unload(ChunkCoords(chunk_x=0, chunk_z=0))

	assert result.success is False
	assert result.error.type == PersistenceErrorType.STORAGE_ERROR
	assert crop_system.get_crop(position) is not None


@pytest.mark.asyncio
async def test_load_skips_bad_entries(crop_system: CropSystem, storage: InMemoryStorage, soil_at) -> None:
	position = soil_at(2, 64, 2)
	crop_system.plant_seed(position)
	good = crop_to_record(crop_system.get_crop(position)).model_dump(mode="json", by_alias=True)
	crop_system.remove_crop(position)

	too_far = dict(good, stage=7, id="crop_stage7")
	payload = {
		"chunkCoords": {"chunkX": 0, "chunkZ": 0},
		"crops": [good, {"id": "broken"}, too_far, 42],
		"version": 1,
	}
	await storage.save("chunk_oat_0_0", json.dumps(payload))

	result = await crop_system.on_chunk_load(ChunkCoords(chunk_x=0, chunk_z=0))
	assert result.success is True
	assert crop_system.crop_count == 1
	assert crop_system.get_crop(position).id == good["id"]


@pytest.mark.asyncio
async def test_load_reports_corruption(crop_system: CropSystem, storage: InMemoryStorage) -> None:
	await storage.save("chunk_oat_0_0", "%%%")
	result = await crop_system.on_chunk_load(ChunkCoords(chunk_x=0, chunk_z=0))
	assert result.success is False
	assert result.error.type == PersistenceErrorType.CORRUPTED_DATA
	assert crop_system.crop_count == 0


@pytest.mark.asyncio
async def test_concurrent_unload_and_load_are_serialized(crop_system: CropSystem, soil_at) -> None:
	position = soil_at(3, 64, 3)
	crop_system.plant_seed(position)
	coords = ChunkCoords(chunk_x=0, chunk_z=0)

	unloaded, loaded = await asyncio.gather(
		crop_system.on_chunk_unload(coords),
		crop_system.on_chunk_load(coords),
	)
	assert unloaded.success is True
	assert loaded.success is True
	assert crop_system.get_crop(position) is not None
