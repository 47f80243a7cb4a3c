"""
Seedable random source.

Every roll in the simulator goes through an `Rng` handed down by the caller,
so a battle, a batch or a whole progression run can be replayed from its seed.
"""

import random
from typing import Sequence, TypeVar

T = TypeVar("T")


class Rng:
    """Thin wrapper around `random.Random` exposing the rolls the game needs."""

    def __init__(self, seed: int | str | None = None) -> None:
        self.seed = seed
        self._random = random.Random(seed)

    def random(self) -> float:
        """Returns a float in [0, 1)."""
        return self._random.random()

    def chance(self, probability: float) -> bool:
        """Returns True with the given probability (0..1)."""
        return self.random() < probability

    def d100(self) -> int:
        """Rolls an integer in [1, 100]."""
        return int(self.random() * 100) + 1

    def randint(self, low: int, high: int) -> int:
        """Returns an integer in [low, high]."""
        return low + int(self.random() * (high - low + 1))

    def pick(self, items: Sequence[T]) -> T:
        """Picks one element of a non-empty sequence."""
        if not items:
            raise ValueError("cannot pick from an empty sequence")
        return items[int(self.random() * len(items))]

    def shuffle(self, items: list[T]) -> list[T]:
        """Returns a shuffled copy of the list."""
        shuffled = list(items)
        self._random.shuffle(shuffled)
        return shuffled

    def spawn(self, label: str | int) -> "Rng":
        """
        Creates an independent child stream.

        Args:
            label (str | int): Distinguishes sibling streams (e.g. a battle index).

        Returns:
            Rng: A new generator seeded from this one and the label.

        """
        return Rng(f"{self._random.getrandbits(64)}:{label}")
