"""Engine data model: entities, enums and typed results.

Application code can import everything from here::

    from cropsim.models import BlockPosition, Crop, PlantResult, ...
"""

# ── Entities ────────────────────────────────────────────────────────────────
from cropsim.models.crop import CHUNK_SIZE, BlockPosition, ChunkCoords, Crop, PositionKey

# ── Enums ───────────────────────────────────────────────────────────────────
from cropsim.models.enums import (
    CropEventType,
    GrowthOutcome,
    ItemType,
    Orientation,
    PersistenceErrorType,
    PlantFailureReason,
)

# ── Results ─────────────────────────────────────────────────────────────────
from cropsim.models.results import (
    GrowthBonuses,
    HarvestRecord,
    HarvestYield,
    PersistenceError,
    PersistenceResult,
    PlantResult,
    ValidationResult,
)

__all__ = [
    "CHUNK_SIZE",
    "BlockPosition",
    "ChunkCoords",
    "Crop",
    "CropEventType",
    "GrowthBonuses",
    "GrowthOutcome",
    "HarvestRecord",
    "HarvestYield",
    "ItemType",
    "Orientation",
    "PersistenceError",
    "PersistenceErrorType",
    "PersistenceResult",
    "PlantFailureReason",
    "PlantResult",
    "PositionKey",
    "ValidationResult",
]
