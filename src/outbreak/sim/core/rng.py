from __future__ import annotations

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


class SimulationRng:
    """Single random source for generation and ticks.

    A string seed makes every draw reproducible; ``None`` seeds from system entropy.
    """

    def __init__(self, seed: Optional[str] = None):
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> Optional[str]:
        return self._seed

    def reseed(self, seed: Optional[str]) -> None:
        self._seed = seed
        self._random.seed(seed)

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_float(self) -> float:
        return self._random.random()

    def next_int(self, max_value: int) -> int:
        return self._random.randrange(max_value)

    def next_between(self, low: int, high: int) -> int:
        return self._random.randint(low, high)

    def choice(self, items: Sequence[T]) -> T:
        return self._random.choice(items)

    def sample(self, items: Sequence[T], count: int) -> list[T]:
        return self._random.sample(items, min(count, len(items)))
