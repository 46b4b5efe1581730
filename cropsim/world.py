"""Host-game contracts the engine consumes but does not implement."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from cropsim.models.crop import BlockPosition

AIR = "air"
WATER = "water"
GRASS = "grass"

NON_OBSTRUCTING_BLOCKS: frozenset[str] = frozenset({AIR, WATER, GRASS})
WATER_BLOCKS: frozenset[str] = frozenset({WATER, "WATER"})


@dataclass(frozen=True, slots=True)
class Block:
    type: str


@dataclass(slots=True)
class WeatherState:
    """Weather owned by the host; the engine only reads it."""

    raining: bool = False


class WorldQuery(Protocol):
    def get_block(self, position: BlockPosition) -> Block: ...

    def get_light_level(self, position: BlockPosition) -> int: ...

    def is_exposed_to_sky(self, position: BlockPosition) -> bool: ...

    def get_biome(self, position: BlockPosition) -> str: ...
