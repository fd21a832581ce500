"""
Bounded random sources ("drivers") that feed every generator.

A driver hands out integers inside explicit bounds and booleans. Generators
never touch a random module directly, so a seeded PRNG, a recorded byte
buffer or a hypothesis search can drive the same generator code.

Every draw raises ``Exhausted`` once the source runs dry.
"""
from __future__ import annotations

import random
from typing import Callable, Optional

from hypothesis import strategies as st

from .errors import Exhausted


def resolve_bounds(min_value: int, max_value: int,
                   min_excluded: bool = False, max_excluded: bool = False) -> tuple[int, int]:
    """Turn independently inclusive/exclusive ends into an inclusive range."""
    lo = min_value + 1 if min_excluded else min_value
    hi = max_value - 1 if max_excluded else max_value
    if lo > hi:
        raise ValueError(f"empty range: min={min_value} max={max_value} "
                         f"min_excluded={min_excluded} max_excluded={max_excluded}")
    return lo, hi


class Driver:
    """Base class of all random sources.

    Subclasses implement ``_draw_int`` (inclusive bounds, already validated)
    and ``_draw_bool``. ``draws`` counts the values handed out so far.
    """

    def __init__(self):
        self.draws = 0

    def gen_int(self, min_value: int, max_value: int, *,
                min_excluded: bool = False, max_excluded: bool = False) -> int:
        lo, hi = resolve_bounds(min_value, max_value, min_excluded, max_excluded)
        value = self._draw_int(lo, hi)
        self.draws += 1
        return value

    def gen_uint(self, bits: int) -> int:
        """Full-width unsigned draw: u8, u32, u64, u128..."""
        return self.gen_int(0, (1 << bits) - 1)

    def gen_bool(self) -> bool:
        value = self._draw_bool()
        self.draws += 1
        return value

    def _draw_int(self, lo: int, hi: int) -> int:
        raise NotImplementedError

    def _draw_bool(self) -> bool:
        raise NotImplementedError


class RandomDriver(Driver):
    """Seeded ``random.Random`` source with an optional draw budget."""

    def __init__(self, seed: Optional[int] = None, max_draws: Optional[int] = None):
        super().__init__()
        self.seed = seed
        self.max_draws = max_draws
        self.rng = random.Random(seed)

    def _spend(self):
        if self.max_draws is not None and self.draws >= self.max_draws:
            raise Exhausted()

    def _draw_int(self, lo, hi):
        self._spend()
        return self.rng.randint(lo, hi)

    def _draw_bool(self):
        self._spend()
        return bool(self.rng.getrandbits(1))

    def __repr__(self):
        return f"RandomDriver(seed={self.seed!r}, max_draws={self.max_draws!r})"


class ByteDriver(Driver):
    """Replays a recorded byte buffer.

    Each integer draw reads just enough big-endian bytes to cover the span of
    the range and reduces the result modulo the span. A single-valued range
    reads nothing. Running off the end of the buffer raises ``Exhausted``.
    """

    def __init__(self, data: bytes):
        super().__init__()
        self.data = bytes(data)
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def _read_exact(self, n: int) -> bytes:
        if self.offset + n > len(self.data):
            raise Exhausted()
        chunk = self.data[self.offset:self.offset + n]
        self.offset += n
        return chunk

    def _draw_int(self, lo, hi):
        span = hi - lo
        if span == 0:
            return lo
        raw = int.from_bytes(self._read_exact((span.bit_length() + 7) // 8), "big")
        return lo + raw % (span + 1)

    def _draw_bool(self):
        return bool(self._read_exact(1)[0] & 1)


class HypothesisDriver(Driver):
    """Forwards draws to hypothesis, which then searches and shrinks.

    ``draw`` is the callable handed out by ``st.composite`` or ``st.data()``.
    """

    def __init__(self, draw: Callable):
        super().__init__()
        self._draw = draw

    def _draw_int(self, lo, hi):
        return self._draw(st.integers(min_value=lo, max_value=hi))

    def _draw_bool(self):
        return self._draw(st.booleans())
