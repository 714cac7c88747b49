"""Uniform random source injected into seeding and shape placement."""

from typing import Optional
import numpy as np


class RandomSource:
    """Uniform random provider over [0, 1).

    Anything exposing ``random() -> float`` can stand in for this class
    (``random.Random`` and ``numpy.random.Generator`` both do). This wrapper
    adds a vectorised byte draw used when seeding large universes.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        """Initialize the source.

        Args:
            seed: Optional seed for reproducible runs
        """
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def random(self) -> float:
        """Draw one value from [0, 1)."""
        return float(self._rng.random())

    def random_bytes(self, count: int) -> np.ndarray:
        """Draw ``count`` bytes uniformly over [0, 256).

        Args:
            count: Number of bytes to draw

        Returns:
            uint8 array of length ``count``
        """
        return (self._rng.random(count) * 256.0).astype(np.uint8)


_default_source: Optional[RandomSource] = None


def default_source() -> RandomSource:
    """Get the lazily created, unseeded source used when callers pass none."""
    global _default_source
    if _default_source is None:
        _default_source = RandomSource()
    return _default_source


def draw_bytes(source, count: int) -> np.ndarray:
    """Draw ``count`` uniform bytes from any source with a ``random()`` method.

    Each byte is ``floor(u * 256)`` for one uniform draw ``u``.
    """
    if isinstance(source, RandomSource):
        return source.random_bytes(count)
    return np.fromiter(
        (int(source.random() * 256.0) for _ in range(count)), dtype=np.uint8, count=count
    )
