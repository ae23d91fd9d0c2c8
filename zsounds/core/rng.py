"""
Seeded random number generation for weighted rule choices.

Each SeededRNG owns its own ``random.Random`` so tests can inject a
reproducible stream instead of sharing the interpreter-wide generator.
"""

import random
import threading
from typing import Optional, Protocol


class RandomSource(Protocol):
    """Anything that can draw a uniform float in [0.0, 1.0)."""

    def random(self) -> float:
        ...


class SeededRNG:
    """
    A seeded random number generator wrapper.

    Attributes:
        seed: The seed used to initialize this RNG
        name: Optional name for debugging

    Example:
        >>> rng = SeededRNG(seed=42, name="one_of")
        >>> rng.random()  # Always returns same value for seed=42
        0.6394267984578837
    """

    def __init__(self, seed: Optional[int] = None, name: str = "default"):
        """
        Initialize the RNG with an optional seed.

        Args:
            seed: Integer seed for reproducibility. If None, one is drawn
                from the system generator.
            name: Name for this RNG stream (for debugging)
        """
        self.name = name
        self._random = random.Random()
        self._lock = threading.Lock()

        if seed is None:
            seed = random.randint(0, 2**32 - 1)

        self.seed = seed
        self._random.seed(seed)
        self._call_count = 0

    def random(self) -> float:
        """
        Return a random float in [0.0, 1.0).

        Safe to call from several evaluation threads at once.
        """
        with self._lock:
            self._call_count += 1
            return self._random.random()

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Restart the stream, optionally with a new seed.

        Args:
            seed: New seed. If None, reuses the current seed.
        """
        with self._lock:
            if seed is not None:
                self.seed = seed
            self._random.seed(self.seed)
            self._call_count = 0

    @property
    def call_count(self) -> int:
        """Number of values drawn since creation or the last reset."""
        return self._call_count

    def __repr__(self) -> str:
        return f"SeededRNG(seed={self.seed}, name={self.name!r}, calls={self._call_count})"
