from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Optional, Protocol, Union

from entities import Border, Direction, Entity, Fruit, Snake, is_collided
from scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_TICK_MS = 100
GRACE_PERIOD_MS = 2000
FRUIT_START = (25, 25)
FRUIT_KIND = "regular-fruit"

START = "START"
PAUSE = "PAUSE"
REPLAY = "REPLAY"

Command = Union[Direction, str]


class GameState(str, Enum):
    PAUSE = "PAUSE"
    PLAY = "PLAY"
    END = "END"


class RenderSink(Protocol):
    def draw(self, entity: Entity) -> None: ...

    def clear(self) -> None: ...


class ReplaySink(Protocol):
    def show_replay(self) -> None: ...

    def hide_replay(self) -> None: ...


class ScoreSink(Protocol):
    def update_score(self, points: int) -> None: ...


class HeadlessView:
    """No-op implementation of every sink, for simulations and tests."""

    def draw(self, entity: Entity) -> None:
        pass

    def clear(self) -> None:
        pass

    def show_replay(self) -> None:
        pass

    def hide_replay(self) -> None:
        pass

    def update_score(self, points: int) -> None:
        pass


class Game:
    """Fixed-tick controller for the shrinking-border snake game.

    The tick is registered on ``scheduler`` at construction and keeps running
    in every state; only PLAY runs movement, collisions and scoring. The
    grace-period countdown ticks down in every state.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        renderer: Optional[RenderSink] = None,
        replay: Optional[ReplaySink] = None,
        score: Optional[ScoreSink] = None,
        tick_ms: int = DEFAULT_TICK_MS,
        rng: Optional[random.Random] = None,
    ) -> None:
        headless = HeadlessView()
        self.scheduler = scheduler
        self.renderer: RenderSink = renderer or headless
        self.replay: ReplaySink = replay or headless
        self.score: ScoreSink = score or headless
        self.rng = rng or random.Random()
        self.state = GameState.PAUSE
        self.tick_ms = tick_ms
        self.points = 0
        self.prev_points: Optional[int] = None
        self.grace_period = 0
        self.snake, self.border, self.fruit = self._new_round()
        self.interval: Optional[TimerHandle] = scheduler.set_interval(tick_ms, self.game_loop)

    def _new_round(self) -> tuple[Snake, Border, Fruit]:
        border = Border()
        fruit = Fruit(
            border,
            is_collided,
            self.scheduler,
            ident=FRUIT_KIND,
            x=FRUIT_START[0],
            y=FRUIT_START[1],
            rng=self.rng,
        )
        return Snake(), border, fruit

    def game_loop(self) -> None:
        if self.state == GameState.PLAY:
            self.snake.move()
            head = self.snake.head

            # 1) 경계 밖으로 나감 → 경계 축소 + 유예 시간
            if not is_collided(head, self.border) and not self.grace_period:
                self.border.shrink()
                self.set_grace()
                logger.debug("border shrunk to %.4f at (%.4f, %.4f)", self.border.size, self.border.x, self.border.y)
                if not is_collided(self.fruit, self.border):
                    self.fruit.move_to_new_position()

            # 2) 과일 먹음
            if is_collided(head, self.fruit):
                self.snake.grow(1)
                self.fruit.move_to_new_position()
                self.add_points(1)

            # 3) 자기 몸과 충돌
            if self.snake.collides_with_self(is_collided):
                self.end()

            self.draw()
            self.score.update_score(self.points)

        if self.grace_period:
            self.grace_period = max(0, self.grace_period - self.tick_ms)

    def draw(self) -> None:
        for segment in self.snake.segments:
            self.renderer.draw(segment)
        self.renderer.draw(self.border.entity)
        self.renderer.draw(self.fruit.entity)

    def start(self) -> None:
        self.state = GameState.PLAY
        self.replay.hide_replay()
        logger.info("game started")

    def pause(self) -> None:
        self.state = GameState.PAUSE
        logger.info("game paused")

    def end(self) -> None:
        self.replay.show_replay()
        self.state = GameState.END
        logger.info("game over with %d points", self.points)

    def reset(self) -> None:
        self.prev_points = self.points
        self.fruit.cancel()
        self.snake, self.border, self.fruit = self._new_round()
        self.points = 0
        self.renderer.clear()
        self.pause()
        logger.info("game reset (previous points: %d)", self.prev_points)

    def add_points(self, points: int = 1) -> None:
        self.points += points

    def set_grace(self, period: int = GRACE_PERIOD_MS) -> None:
        self.grace_period = period

    def handle_command(self, command: Command) -> None:
        """Apply one input command; unknown commands are ignored."""
        if isinstance(command, Direction):
            self.snake.change_direction(command)
        elif command == START:
            if self.state == GameState.PAUSE:
                self.start()
        elif command == PAUSE:
            if self.state == GameState.PLAY:
                self.pause()
        elif command == REPLAY:
            self.reset()
            self.start()
        else:
            logger.debug("ignoring unknown command %r", command)

    def stop(self) -> None:
        if self.interval is not None:
            self.interval.cancel()
            self.interval = None
        self.fruit.cancel()
