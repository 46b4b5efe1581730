"""In-memory crop entity and world coordinates."""

from __future__ import annotations

from dataclasses import dataclass, field

CHUNK_SIZE = 16

PositionKey = tuple[str, int, int, int]


@dataclass(frozen=True, slots=True)
class ChunkCoords:
    chunk_x: int
    chunk_z: int

    @classmethod
    def containing(cls, x: int, z: int) -> ChunkCoords:
        """Chunk that holds block column ``(x, z)``."""
        return cls(chunk_x=x // CHUNK_SIZE, chunk_z=z // CHUNK_SIZE)

    def __str__(self) -> str:
        return f"{self.chunk_x},{self.chunk_z}"


@dataclass(frozen=True, slots=True)
class BlockPosition:
    x: int
    y: int
    z: int
    world: str
    chunk: ChunkCoords

    @classmethod
    def in_world(cls, world: str, x: int, y: int, z: int) -> BlockPosition:
        return cls(x=x, y=y, z=z, world=world, chunk=ChunkCoords.containing(x, z))

    @property
    def key(self) -> PositionKey:
        return (self.world, self.x, self.y, self.z)

    def offset(self, dx: int = 0, dy: int = 0, dz: int = 0) -> BlockPosition:
        """Shifted position, re-tagged with the chunk it lands in."""
        return BlockPosition.in_world(self.world, self.x + dx, self.y + dy, self.z + dz)


@dataclass(slots=True)
class Crop:
    """A planted crop instance.

    ``visual_height`` is derived from the stage visual and ``particle_timer``
    is transient; neither is persisted.
    """

    id: str
    position: BlockPosition
    planted_at: float
    last_update_time: float
    stage: int = 1
    stage_progress: float = 0.0
    total_age: float = 0.0
    visual_height: float = 0.0
    particle_timer: float = field(default=0.0, compare=False)

    @property
    def key(self) -> PositionKey:
        return self.position.key

    def is_mature(self, stage_count: int) -> bool:
        return self.stage >= stage_count
