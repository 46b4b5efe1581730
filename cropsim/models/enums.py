"""Enum types shared across the crop engine.

Values double as the wire/log representation, so they are kept stable.
"""

from enum import StrEnum

# ── Planting ────────────────────────────────────────────────────────────────


class PlantFailureReason(StrEnum):
    """Why a planting attempt was rejected (checked in this order)."""

    ALREADY_PLANTED = "ALREADY_PLANTED"
    INVALID_SOIL = "INVALID_SOIL"
    INVALID_BIOME = "INVALID_BIOME"
    OBSTRUCTED_SPACE = "OBSTRUCTED_SPACE"


# ── Growth ──────────────────────────────────────────────────────────────────


class GrowthOutcome(StrEnum):
    """What a single growth update did to a crop."""

    SUSPENDED = "SUSPENDED"
    MATURE = "MATURE"
    GREW = "GREW"
    ADVANCED = "ADVANCED"


class Orientation(StrEnum):
    """Visual orientation of a crop's stalks."""

    UPRIGHT = "UPRIGHT"
    DROOPING = "DROOPING"


# ── Harvest ─────────────────────────────────────────────────────────────────


class ItemType(StrEnum):
    """Item classes produced by a harvest."""

    primary = "primary"
    seed = "seed"


class CropEventType(StrEnum):
    PLANTED = "PLANTED"
    STAGE_ADVANCED = "STAGE_ADVANCED"
    HARVESTED = "HARVESTED"
    DESTROYED = "DESTROYED"


# ── Persistence ─────────────────────────────────────────────────────────────


class PersistenceErrorType(StrEnum):
    """Failure classes for chunk save/load."""

    CORRUPTED_DATA = "CORRUPTED_DATA"
    INVALID_FORMAT = "INVALID_FORMAT"
    INCOMPATIBLE_VERSION = "INCOMPATIBLE_VERSION"
    STORAGE_ERROR = "STORAGE_ERROR"
