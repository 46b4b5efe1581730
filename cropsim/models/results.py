"""Typed result records returned by engine operations instead of raising."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from cropsim.models.crop import ChunkCoords, Crop
from cropsim.models.enums import CropEventType, PersistenceErrorType, PlantFailureReason

T = TypeVar("T")


@dataclass(slots=True)
class ValidationResult:
    valid: bool
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class GrowthBonuses:
    water_bonus: float = 1.0
    rain_bonus: float = 1.0

    @property
    def multiplier(self) -> float:
        """Additive combination over the 1.0 baseline."""
        return self.water_bonus + self.rain_bonus - 1.0


@dataclass(slots=True)
class PlantResult:
    success: bool
    crop: Crop | None = None
    reason: PlantFailureReason | None = None

    @classmethod
    def ok(cls, crop: Crop) -> PlantResult:
        return cls(success=True, crop=crop)

    @classmethod
    def fail(cls, reason: PlantFailureReason) -> PlantResult:
        return cls(success=False, reason=reason)


@dataclass(frozen=True, slots=True)
class HarvestYield:
    primary: int
    seeds: int


@dataclass(slots=True)
class HarvestRecord:
    crop: Crop
    harvest_yield: HarvestYield
    enchantment_level: int
    timestamp: float
    type: CropEventType = CropEventType.HARVESTED


@dataclass(slots=True)
class PersistenceError:
    type: PersistenceErrorType
    message: str
    chunk_coords: ChunkCoords
    original_error: BaseException | None = field(default=None, repr=False)


@dataclass(slots=True)
class PersistenceResult(Generic[T]):
    success: bool
    data: T | None = None
    error: PersistenceError | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> PersistenceResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        error_type: PersistenceErrorType,
        message: str,
        chunk_coords: ChunkCoords,
        original_error: BaseException | None = None,
    ) -> PersistenceResult[T]:
        return cls(
            success=False,
            error=PersistenceError(
                type=error_type,
                message=message,
                chunk_coords=chunk_coords,
                original_error=original_error,
            ),
        )
