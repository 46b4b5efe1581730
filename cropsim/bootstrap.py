"""Wiring for a ready-to-use crop system."""

from __future__ import annotations

import numpy as np
from numpy.random import Generator

from cropsim.clock import Clock, wall_clock_ms
from cropsim.config import Settings, get_settings
from cropsim.logging import configure_structured_logging, get_logger
from cropsim.schemas.crop_config import OAT_CONFIG, CropConfig
from cropsim.services.biome_policy import BiomePolicy
from cropsim.services.bonus_calculator import BonusCalculator
from cropsim.services.condition_validator import ConditionValidator
from cropsim.services.crop_system import CropSystem
from cropsim.services.growth_engine import GrowthEngine
from cropsim.services.persistence import CropPersistenceManager
from cropsim.services.yield_calculator import YieldCalculator
from cropsim.storage import StorageBackend, build_storage
from cropsim.world import WeatherState, WorldQuery

_logger = get_logger("bootstrap")

SPECIES_CONFIGS: dict[str, CropConfig] = {
	OAT_CONFIG.species: OAT_CONFIG,
}


def resolve_species(species: str) -> CropConfig:
	try:
		return SPECIES_CONFIGS[species]
	except KeyError:
		known = ", ".join(sorted(SPECIES_CONFIGS))
		raise ValueError(f"Unknown species '{species}' (known: {known})") from None


def create_crop_system(
	world: WorldQuery,
	settings: Settings | None = None,
	storage: StorageBackend | None = None,
	rng: Generator | None = None,
	config: CropConfig | None = None,
	biome_policy: BiomePolicy | None = None,
	weather: WeatherState | None = None,
	clock: Clock = wall_clock_ms,
) -> CropSystem:
	"""Build a :class:`CropSystem` with every collaborator wired.

	Startup:
	  1. Configure structured logging
	  2. Resolve the species config (explicit ``config`` wins over settings)
	  3. Seed the shared RNG from ``settings.rng_seed`` unless one is given
	  4. Pick the storage backend from settings unless one is given
	"""
	settings = settings or get_settings()
	configure_structured_logging(settings)

	config = config or resolve_species(settings.species)
	rng = rng if rng is not None else np.random.default_rng(settings.rng_seed)
	storage = storage if storage is not None else build_storage(settings)

	validator = ConditionValidator(config, world)
	system = CropSystem(
		config=config,
		world=world,
		validator=validator,
		bonus_calculator=BonusCalculator(config, world),
		growth_engine=GrowthEngine(config, validator, rng=rng, clock=clock),
		yield_calculator=YieldCalculator(config, rng),
		persistence=CropPersistenceManager(storage, config.species, clock=clock),
		biome_policy=biome_policy or BiomePolicy(config),
		weather=weather,
		rng=rng,
		clock=clock,
	)

	_logger.info(
		"crop_system_started",
		species=config.species,
		storage_backend=type(storage).__name__,
		seeded=settings.rng_seed is not None,
	)
	return system
