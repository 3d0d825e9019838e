from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Protocol, Tuple, Union

from scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

# 800px 캔버스 / 16px 셀 = 50칸
ARENA_SIZE = 50
FRUIT_SPAWN_RANGE = 50
FRUIT_RETRY_LIMIT = 1000
FRUIT_EXPIRE_MIN_SEC = 4
FRUIT_EXPIRE_MAX_SEC = 10
BORDER_SHRINK_STEP = 113 / 16
BORDER_MIN_SIZE = 113 / 16
INITIAL_SEGMENTS = 4

Size = Union[int, float]


class Direction(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"


DIRECTION_DELTAS: Dict[Direction, Tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


class Box(Protocol):
    x: Size
    y: Size
    size: Size


@dataclass
class Entity:
    """A positioned, sized axis-aligned box on the grid."""

    kind: str
    ident: Union[int, str]
    x: Size = 0
    y: Size = 0
    size: Size = 1

    def move(self, x: Size, y: Size) -> None:
        self.x = x
        self.y = y

    def resize(self, size: Size) -> None:
        self.size = size

    def box(self) -> Tuple[Size, Size, Size]:
        return (self.x, self.y, self.size)


@dataclass
class Position:
    """A sampled candidate location, collidable like an entity."""

    x: int
    y: int
    size: int = 1


CollisionFn = Callable[[Box, Box], bool]


def is_collided(a: Box, b: Box) -> bool:
    """Axis-aligned overlap test; touching edges do not count."""
    return a.x < b.x + b.size and a.x + a.size > b.x and a.y < b.y + b.size and a.y + a.size > b.y


class Snake:
    """Ordered chain of segments; the head is ``segments[0]``."""

    def __init__(self, segment_amount: int = INITIAL_SEGMENTS) -> None:
        self.direction: Direction = Direction.DOWN
        self.segments: List[Entity] = [Entity("snake", idx) for idx in range(segment_amount)]

    @property
    def head(self) -> Entity:
        return self.segments[0]

    def change_direction(self, direction: Direction) -> None:
        # 역방향 입력도 그대로 받는다(다음 틱에 자기 몸과 부딪힐 수 있음)
        self.direction = direction

    def positions(self) -> List[Tuple[Size, Size]]:
        return [(segment.x, segment.y) for segment in self.segments]

    def move(self) -> None:
        """Advance one cell; followers take their predecessor's pre-move cell."""
        snapshot = self.positions()
        for idx in range(1, len(self.segments)):
            prev_x, prev_y = snapshot[idx - 1]
            self.segments[idx].move(prev_x, prev_y)

        delta = DIRECTION_DELTAS.get(self.direction)
        if delta is None:
            return
        head = self.head
        head.move(head.x + delta[0], head.y + delta[1])

    def grow(self, length: int) -> None:
        tail = self.segments[-1]
        current_length = len(self.segments)
        for offset in range(length):
            self.segments.append(Entity("snake", current_length + offset, tail.x, tail.y))

    def collides_with_self(self, collided: CollisionFn = is_collided) -> bool:
        head = self.head
        return any(collided(head, segment) for segment in self.segments[1:])


class _EntityView:
    """Expose the owned entity's box so the owner can be passed to ``is_collided``."""

    entity: Entity

    @property
    def x(self) -> Size:
        return self.entity.x

    @property
    def y(self) -> Size:
        return self.entity.y

    @property
    def size(self) -> Size:
        return self.entity.size


class Border(_EntityView):
    """Square play area that shrinks toward the arena center."""

    def __init__(self) -> None:
        self.entity = Entity("border", "border", 0, 0, ARENA_SIZE)

    def reset(self) -> None:
        self.entity.resize(ARENA_SIZE)

    def shrink(self) -> None:
        size = max(BORDER_MIN_SIZE, self.entity.size - BORDER_SHRINK_STEP)
        self.entity.resize(size)
        offset = (ARENA_SIZE - size) / 2
        self.entity.move(offset, offset)


class Fruit(_EntityView):
    """Relocating fruit that re-arms its own expiry timer after every move."""

    def __init__(
        self,
        border: Box,
        collided: CollisionFn,
        scheduler: Scheduler,
        *,
        ident: str = "regular-fruit",
        x: int = 0,
        y: int = 0,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.entity = Entity("fruit", ident, x, y, 1)
        self.border = border
        self.collided = collided
        self.scheduler = scheduler
        self.rng = rng or random.Random()
        self.timeout: Optional[TimerHandle] = None
        self.expire()

    @property
    def pending(self) -> bool:
        return self.timeout is not None and self.timeout.active

    def random_position(self) -> Position:
        return Position(
            x=math.floor(self.rng.random() * FRUIT_SPAWN_RANGE),
            y=math.floor(self.rng.random() * FRUIT_SPAWN_RANGE),
            size=1,
        )

    def cancel(self) -> None:
        if self.timeout is not None:
            self.timeout.cancel()
            self.timeout = None

    def move_to_new_position(self) -> int:
        """Relocate inside the border, giving up after FRUIT_RETRY_LIMIT resamples.

        Returns the number of resamples taken. When the limit is reached the
        last sample is used even if it lies outside the border.
        """
        self.cancel()

        candidate = self.random_position()
        inside = self.collided(self.border, candidate)
        attempts = 0
        while not inside and attempts < FRUIT_RETRY_LIMIT:
            candidate = self.random_position()
            inside = self.collided(self.border, candidate)
            attempts += 1
        if not inside:
            logger.debug("fruit placed outside the border after %d retries at (%d, %d)", attempts, candidate.x, candidate.y)
        self.entity.move(candidate.x, candidate.y)

        self.expire()
        return attempts

    def expire_delay_ms(self) -> int:
        span = FRUIT_EXPIRE_MAX_SEC - FRUIT_EXPIRE_MIN_SEC
        seconds = math.floor(self.rng.random() * span) + FRUIT_EXPIRE_MIN_SEC
        return seconds * 1000

    def expire(self) -> None:
        self.cancel()
        self.timeout = self.scheduler.set_timeout(self.expire_delay_ms(), self._on_expired)

    def _on_expired(self) -> None:
        self.timeout = None
        logger.debug("fruit %s expired at (%s, %s)", self.entity.ident, self.x, self.y)
        self.move_to_new_position()
