"""
Jitter sources - pluggable randomness for simulated signals.

Lane deviation, the off-ideal lane score and per-vehicle speed have no real
sensor behind them; they are drawn from a JitterSource so runs can be seeded
or pinned in tests. `random.Random` satisfies the protocol as-is.
"""

import random
from typing import Protocol, runtime_checkable


@runtime_checkable
class JitterSource(Protocol):
    """Anything with a `random()` returning a float in [0, 1)."""

    def random(self) -> float: ...


class FixedJitter:
    """Returns the same value on every draw."""

    def __init__(self, value: float = 0.5):
        if not 0.0 <= value < 1.0:
            raise ValueError(f"Jitter value must be in [0, 1), got {value}")
        self.value = value

    def random(self) -> float:
        return self.value


class SequenceJitter:
    """Cycles through a fixed list of draws."""

    def __init__(self, values: list[float]):
        if not values:
            raise ValueError("SequenceJitter needs at least one value")
        for v in values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"Jitter value must be in [0, 1), got {v}")
        self.values = list(values)
        self._index = 0

    def random(self) -> float:
        value = self.values[self._index % len(self.values)]
        self._index += 1
        return value


def make_jitter(seed: int | None = None) -> JitterSource:
    """Seeded source for reproducible runs, unseeded otherwise."""
    return random.Random(seed)
