"""
Conversion between protobuf durations and canonical, non-negative durations.

A protobuf ``Duration`` is a signed ``(seconds: i64, nanos: i32)`` pair
whose nanos may be negative or exceed one second. A ``CanonicalDuration`` is
``(seconds: u64, nanos: u32)`` with ``0 <= nanos < 1e9``.
"""
from __future__ import annotations

from dataclasses import dataclass

from .errors import Error
from .schema import Duration

NANOS_PER_SECOND = 1_000_000_000

I64_MIN, I64_MAX = -(1 << 63), (1 << 63) - 1
I32_MIN, I32_MAX = -(1 << 31), (1 << 31) - 1
U64_MAX = (1 << 64) - 1


class DurationConversionError(Error):
    def __init__(self, seconds: int, nanos: int, message: str):
        super().__init__(message)
        self.seconds = seconds
        self.nanos = nanos


class NegativeDuration(DurationConversionError):
    def __init__(self, seconds: int, nanos: int):
        super().__init__(seconds, nanos,
                         f"Duration cannot be negative ({seconds} seconds, {nanos} nanoseconds)")


class DurationOutOfRange(DurationConversionError):
    def __init__(self, seconds: int, nanos: int):
        super().__init__(seconds, nanos,
                         f"Duration components out of range ({seconds} seconds, {nanos} nanoseconds)")


@dataclass(frozen=True)
class CanonicalDuration:
    seconds: int = 0
    nanos: int = 0

    def __post_init__(self):
        if not 0 <= self.seconds <= U64_MAX:
            raise ValueError(f"seconds out of range: {self.seconds}")
        if not 0 <= self.nanos < NANOS_PER_SECOND:
            raise ValueError(f"nanos out of range: {self.nanos}")

    def total_nanos(self) -> int:
        return self.seconds * NANOS_PER_SECOND + self.nanos


def _trunc_div(a: int, b: int) -> int:
    # rounds toward zero, unlike //
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def to_canonical(duration: Duration) -> CanonicalDuration:
    """Normalize a signed duration, failing when it is negative overall."""
    seconds, nanos = duration.seconds, duration.nanos
    if not (I64_MIN <= seconds <= I64_MAX and I32_MIN <= nanos <= I32_MAX):
        raise DurationOutOfRange(seconds, nanos)

    nanos_as_seconds = _trunc_div(nanos, NANOS_PER_SECOND)
    nanos_leftover = nanos - nanos_as_seconds * NANOS_PER_SECOND
    new_seconds = seconds + nanos_as_seconds
    assert abs(nanos_leftover) < NANOS_PER_SECOND

    if new_seconds < 0:
        raise NegativeDuration(seconds, nanos)
    if nanos_leftover < 0:
        # borrow a second to make the remainder non-negative
        if new_seconds < 1:
            raise NegativeDuration(seconds, nanos)
        new_seconds -= 1
        nanos_leftover += NANOS_PER_SECOND
    return CanonicalDuration(new_seconds, nanos_leftover)


def from_canonical(canonical: CanonicalDuration) -> Duration:
    """Reinterpret a canonical duration as signed, range-checked."""
    if canonical.seconds > I64_MAX or canonical.nanos > I32_MAX:
        raise DurationOutOfRange(canonical.seconds, canonical.nanos)
    return Duration(seconds=canonical.seconds, nanos=canonical.nanos)
