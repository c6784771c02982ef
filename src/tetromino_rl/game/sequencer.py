from __future__ import annotations

import random
from collections import deque
from enum import Enum
from typing import Deque, List, Tuple, Union

from .pieces import TetrominoType


class SequencingPolicy(str, Enum):
    RANDOM = "random"
    BAG = "bag"


class RandomSequencer:
    """Uniform draws, independent of history."""

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng

    def draw(self) -> TetrominoType:
        return self.rng.choice(list(TetrominoType))

    def reset(self) -> None:
        pass


class BagSequencer:
    """7-bag: deal one of each type in shuffled order, then reshuffle."""

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng
        self.bag: List[TetrominoType] = []

    @property
    def remaining(self) -> int:
        return len(self.bag)

    def _refill(self) -> None:
        self.bag = list(TetrominoType)
        # random.shuffle is an in-place Fisher-Yates
        self.rng.shuffle(self.bag)

    def draw(self) -> TetrominoType:
        if not self.bag:
            self._refill()
        return self.bag.pop()

    def reset(self) -> None:
        self.bag = []


Sequencer = Union[RandomSequencer, BagSequencer]


def make_sequencer(policy: SequencingPolicy, rng: random.Random) -> Sequencer:
    policy = SequencingPolicy(policy)
    if policy is SequencingPolicy.BAG:
        return BagSequencer(rng)
    return RandomSequencer(rng)


class PiecePreview:
    """Fixed-depth queue of already decided upcoming pieces."""

    def __init__(self, sequencer: Sequencer, lookahead: int = 1) -> None:
        if lookahead < 1:
            raise ValueError("lookahead must be at least 1")
        self.sequencer = sequencer
        self.lookahead = int(lookahead)
        self._slots: Deque[TetrominoType] = deque()

    def _fill(self) -> None:
        while len(self._slots) < self.lookahead:
            self._slots.append(self.sequencer.draw())

    def peek(self) -> Tuple[TetrominoType, ...]:
        self._fill()
        return tuple(self._slots)

    def pop(self) -> TetrominoType:
        self._fill()
        kind = self._slots.popleft()
        self._fill()
        return kind

    def reset(self) -> None:
        self.sequencer.reset()
        self._slots.clear()
