"""Shared pytest fixtures: fake world, fake Redis, seeded RNG, wired crop system."""

from __future__ import annotations

from typing import Any

import numpy as np
import pytest

from cropsim.models.crop import BlockPosition
from cropsim.schemas.crop_config import OAT_CONFIG, CropConfig
from cropsim.services.biome_policy import BiomePolicy
from cropsim.services.bonus_calculator import BonusCalculator
from cropsim.services.condition_validator import ConditionValidator
from cropsim.services.crop_system import CropSystem
from cropsim.services.growth_engine import GrowthEngine
from cropsim.services.persistence import CropPersistenceManager
from cropsim.services.yield_calculator import YieldCalculator
from cropsim.storage.memory import InMemoryStorage
from cropsim.world import AIR, Block, WeatherState

WORLD = "overworld"


class FakeClock:
	def __init__(self, start: float = 1_700_000_000_000.0) -> None:
		self.now = start

	def __call__(self) -> float:
		return self.now

	def advance(self, ms: float) -> None:
		self.now += ms


class FakeWorld:
	"""Sparse block grid; unset cells are air, fully lit and open to the sky."""

	def __init__(self) -> None:
		self.blocks: dict[tuple[int, int, int], str] = {}
		self.light: dict[tuple[int, int, int], int] = {}
		self.covered: set[tuple[int, int, int]] = set()
		self.biomes: dict[tuple[int, int, int], str] = {}
		self.default_light = 15
		self.default_biome = "PLAINS"
		self.block_queries = 0

	def set_block(self, x: int, y: int, z: int, block_type: str) -> None:
		self.blocks[(x, y, z)] = block_type

	def get_block(self, position: BlockPosition) -> Block:
		self.block_queries += 1
		return Block(type=self.blocks.get((position.x, position.y, position.z), AIR))

	def get_light_level(self, position: BlockPosition) -> int:
		return self.light.get((position.x, position.y, position.z), self.default_light)

	def is_exposed_to_sky(self, position: BlockPosition) -> bool:
		return (position.x, position.y, position.z) not in self.covered

	def get_biome(self, position: BlockPosition) -> str:
		return self.biomes.get((position.x, position.y, position.z), self.default_biome)


class FakeRedis:
	"""Async stand-in for the subset of ``redis.asyncio.Redis`` the storage uses."""

	def __init__(self) -> None:
		self.store: dict[str, Any] = {}
		self.fail_with: Exception | None = None

	def _maybe_fail(self) -> None:
		if self.fail_with is not None:
			raise self.fail_with

	async def set(self, key: str, value: str) -> bool:
		self._maybe_fail()
		self.store[key] = value
		return True

	async def get(self, key: str) -> Any:
		self._maybe_fail()
		return self.store.get(key)

	async def delete(self, key: str) -> int:
		self._maybe_fail()
		return 1 if self.store.pop(key, None) is not None else 0

	async def exists(self, key: str) -> int:
		self._maybe_fail()
		return 1 if key in self.store else 0


def plant_ready(world: FakeWorld, x: int, y: int, z: int, soil: str = "FARMLAND") -> BlockPosition:
	"""Put soil under ``(x, y, z)`` and return the planting position."""
	world.set_block(x, y - 1, z, soil)
	return BlockPosition.in_world(WORLD, x, y, z)


@pytest.fixture
def oat_config() -> CropConfig:
	return OAT_CONFIG


@pytest.fixture
def world() -> FakeWorld:
	return FakeWorld()


@pytest.fixture
def rng() -> np.random.Generator:
	return np.random.default_rng(1234)


@pytest.fixture
def clock() -> FakeClock:
	return FakeClock()


@pytest.fixture
def fake_redis() -> FakeRedis:
	return FakeRedis()


@pytest.fixture
def storage() -> InMemoryStorage:
	return InMemoryStorage()


@pytest.fixture
def validator(oat_config: CropConfig, world: FakeWorld) -> ConditionValidator:
	return ConditionValidator(oat_config, world)


@pytest.fixture
def growth_engine(
	oat_config: CropConfig,
	validator: ConditionValidator,
	rng: np.random.Generator,
	clock: FakeClock,
) -> GrowthEngine:
	return GrowthEngine(oat_config, validator, rng=rng, clock=clock)


@pytest.fixture
def persistence(storage: InMemoryStorage, clock: FakeClock) -> CropPersistenceManager:
	return CropPersistenceManager(storage, "oat", clock=clock)


@pytest.fixture
def crop_system(
	oat_config: CropConfig,
	world: FakeWorld,
	validator: ConditionValidator,
	growth_engine: GrowthEngine,
	persistence: CropPersistenceManager,
	rng: np.random.Generator,
	clock: FakeClock,
) -> CropSystem:
	return CropSystem(
		config=oat_config,
		world=world,
		validator=validator,
		bonus_calculator=BonusCalculator(oat_config, world),
		growth_engine=growth_engine,
		yield_calculator=YieldCalculator(oat_config, rng),
		persistence=persistence,
		biome_policy=BiomePolicy(oat_config),
		weather=WeatherState(),
		rng=rng,
		clock=clock,
	)


@pytest.fixture
def soil_at(world: FakeWorld):
	def _prepare(x: int, y: int, z: int, soil: str = "FARMLAND") -> BlockPosition:
		return plant_ready(world, x, y, z, soil)

	return _prepare
