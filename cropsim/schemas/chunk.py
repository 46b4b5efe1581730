"""Pydantic schemas for the persisted chunk record format.

Field names are snake_case in Python and camelCase on the wire. Chunk
coordinates and the version must be real integers. Crop entries stay raw
until each one is restored, so a single bad entry cannot reject the chunk.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel

from cropsim.models.crop import BlockPosition, ChunkCoords

CHUNK_DATA_VERSION = 1


class _WireModel(BaseModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChunkCoordsPayload(_WireModel):
	chunk_x: StrictInt
	chunk_z: StrictInt

	@classmethod
	def from_coords(cls, coords: ChunkCoords) -> ChunkCoordsPayload:
		return cls(chunk_x=coords.chunk_x, chunk_z=coords.chunk_z)

	def to_coords(self) -> ChunkCoords:
		return ChunkCoords(chunk_x=self.chunk_x, chunk_z=self.chunk_z)


class PositionPayload(_WireModel):
	x: int
	y: int
	z: int
	world: str
	chunk: ChunkCoordsPayload

	@classmethod
	def from_position(cls, position: BlockPosition) -> PositionPayload:
		return cls(
			x=position.x,
			y=position.y,
			z=position.z,
			world=position.world,
			chunk=ChunkCoordsPayload.from_coords(position.chunk),
		)

	def to_position(self) -> BlockPosition:
		return BlockPosition(
			x=self.x,
			y=self.y,
			z=self.z,
			world=self.world,
			chunk=self.chunk.to_coords(),
		)


class CropRecord(_WireModel):
	id: str = Field(min_length=1)
	position: PositionPayload
	stage: int = Field(ge=1)
	stage_progress: float = Field(ge=0)
	total_age: float = Field(ge=0)
	planted_at: float
	last_update_time: float


class ChunkPayload(_WireModel):
	chunk_coords: ChunkCoordsPayload
	crops: list[Any]
	version: StrictInt
	last_saved: float | None = None


@dataclass(slots=True)
class ChunkBundle:
	"""Decoded chunk with typed coordinates and raw crop entries."""

	chunk_coords: ChunkCoords
	crops: list[Any] = field(default_factory=list)
	version: int = CHUNK_DATA_VERSION
	last_saved: float | None = None

	def to_payload(self) -> ChunkPayload:
		return ChunkPayload(
			chunk_coords=ChunkCoordsPayload.from_coords(self.chunk_coords),
			crops=self.crops,
			version=self.version,
			last_saved=self.last_saved,
		)

	@classmethod
	def from_payload(cls, payload: ChunkPayload) -> ChunkBundle:
		return cls(
			chunk_coords=payload.chunk_coords.to_coords(),
			crops=list(payload.crops),
			version=payload.version,
			last_saved=payload.last_saved,
		)
