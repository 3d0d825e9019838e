import os
import random
from typing import List, Sequence

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from entities import Entity  # noqa: E402
from scheduler import Scheduler  # noqa: E402


class SequenceRandom(random.Random):
    """random.Random whose ``random()`` cycles through fixed values."""

    def __init__(self, values: Sequence[float]) -> None:
        super().__init__(0)
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


class RecordingView:
    """Sink spy that records every call the game makes."""

    def __init__(self) -> None:
        self.drawn: List[tuple] = []
        self.clears = 0
        self.replay_calls: List[str] = []
        self.scores: List[int] = []

    def draw(self, entity: Entity) -> None:
        self.drawn.append((entity.kind, entity.ident, entity.x, entity.y, entity.size))

    def clear(self) -> None:
        self.clears += 1

    def show_replay(self) -> None:
        self.replay_calls.append("show")

    def hide_replay(self) -> None:
        self.replay_calls.append("hide")

    def update_score(self, points: int) -> None:
        self.scores.append(points)


@pytest.fixture
def scheduler():
    return Scheduler()


@pytest.fixture
def view():
    return RecordingView()
