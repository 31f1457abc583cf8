from __future__ import annotations

import random
from typing import Sequence


class DeterministicRng:
    def __init__(self, seed: int):
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_float(self) -> float:
        return self._random.random()

    def next_range(self, low: float, high: float) -> float:
        return self._random.uniform(low, high)

    def next_bernoulli(self, probability: float) -> bool:
        return self._random.random() < probability

    def next_weighted_index(self, weights: Sequence[float]) -> int:
        # One underlying draw per call; zero weights can never win.
        return self._random.choices(range(len(weights)), weights=weights)[0]

    def __copy__(self) -> DeterministicRng:
        raise TypeError("DeterministicRng must be shared, not copied")

    def __deepcopy__(self, memo: dict) -> DeterministicRng:
        raise TypeError("DeterministicRng must be shared, not copied")
