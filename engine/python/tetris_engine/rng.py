"""Random piece generators.

The default generator picks every piece uniformly at random. The 7-bag
system is available as an alternative: it shuffles all 7 pieces into a bag,
deals them out, then reshuffles for the next bag.
"""

import random
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from tetris_engine.piece import PIECE_KINDS, PIECE_SHAPES


class PieceGenerator(ABC):
    """Source of piece kinds for a game."""

    def __init__(self, seed: Optional[int] = None, kinds: Sequence[str] = PIECE_KINDS):
        """Initialize with an optional seed for deterministic replay.

        Args:
            seed: Random seed (None seeds from system entropy)
            kinds: Pool of piece kinds to draw from

        Raises:
            ValueError: If the pool is empty or names an unknown kind
        """
        if not kinds:
            raise ValueError("Piece pool must not be empty")
        unknown = [kind for kind in kinds if kind not in PIECE_SHAPES]
        if unknown:
            raise ValueError(f"Invalid piece kinds: {unknown}")
        self.kinds = list(kinds)
        self.seed = seed
        self.rng = random.Random(seed)

    @abstractmethod
    def next(self) -> str:
        """Get the next piece kind."""

    def reset(self, seed: Optional[int] = None) -> None:
        """Reset the generator with a new seed."""
        self.seed = seed
        self.rng = random.Random(seed)


class UniformGenerator(PieceGenerator):
    """Independent uniform pick per call; repeats are allowed."""

    def next(self) -> str:
        return self.rng.choice(self.kinds)


class SevenBagGenerator(PieceGenerator):
    """Bag generator: every piece in the pool once per bag."""

    def __init__(self, seed: Optional[int] = None, kinds: Sequence[str] = PIECE_KINDS):
        super().__init__(seed, kinds)
        self.bag: List[str] = []
        self._refill_bag()

    def _refill_bag(self) -> None:
        """Shuffle the whole pool into the bag."""
        self.bag = self.kinds.copy()
        self.rng.shuffle(self.bag)

    def next(self) -> str:
        if not self.bag:
            self._refill_bag()
        return self.bag.pop()

    def reset(self, seed: Optional[int] = None) -> None:
        super().reset(seed)
        self._refill_bag()


GENERATORS = {
    "uniform": UniformGenerator,
    "7bag": SevenBagGenerator,
}


def make_generator(name: str, seed: Optional[int] = None) -> PieceGenerator:
    """Build a generator by name.

    Args:
        name: "uniform" or "7bag"
        seed: Random seed

    Raises:
        ValueError: If the name is unknown
    """
    try:
        generator_cls = GENERATORS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown randomizer: {name}")
    return generator_cls(seed)
