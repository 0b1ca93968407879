"""Random numbers (xorshift64*), a stopwatch, and per-thread random helpers."""

from __future__ import annotations

import secrets
import threading
import time

_MASK64 = (1 << 64) - 1
_MULTIPLIER = 2685821657736338717


class PRNG:
    """xorshift64* generator with a single 64-bit state word."""

    def __init__(self, seed: int) -> None:
        state = seed & _MASK64
        if state == 0:
            raise ValueError("seed must be non-zero")
        self._state = state

    def rand64(self) -> int:
        """Next 64-bit output."""
        s = self._state
        s ^= s >> 12
        s ^= (s << 25) & _MASK64
        s ^= s >> 27
        self._state = s
        return (s * _MULTIPLIER) & _MASK64

    def __call__(self) -> int:
        return self.rand64()

    def sparse_rand(self) -> int:
        """A 64-bit value with about one bit in eight set."""
        return self.rand64() & self.rand64() & self.rand64()

    def seed(self) -> int:
        """The current internal state."""
        return self._state

    def set_seed(self, seed: int) -> None:
        self._state = seed & _MASK64


class Timer:
    """Stopwatch on the monotonic clock."""

    def __init__(self) -> None:
        self._start = 0.0
        self.clock()

    def clock(self) -> None:
        """Restart the stopwatch."""
        self._start = time.monotonic()

    def duration_seconds(self) -> int:
        return int(time.monotonic() - self._start)

    def duration_milliseconds(self) -> int:
        return int((time.monotonic() - self._start) * 1000)


_local = threading.local()


def default_rng() -> PRNG:
    """The generator of the calling thread, seeded from the system on first use."""
    rng = getattr(_local, "rng", None)
    if rng is None:
        rng = PRNG(secrets.randbits(32) or 1)
        _local.rng = rng
    return rng


def rand_int(low: int, high: int) -> int:
    """Uniform integer in ``low .. high`` inclusive."""
    if low > high:
        raise ValueError("low must not exceed high")
    span = high - low + 1
    limit = (1 << 64) - ((1 << 64) % span)
    rng = default_rng()
    while True:
        value = rng.rand64()
        if value < limit:
            return low + value % span


def rand01() -> float:
    """Uniform float in ``[0, 1)``."""
    return (default_rng().rand64() >> 11) * (1.0 / (1 << 53))


def rand_sample(low: int, high: int, size: int) -> list[int]:
    """``size`` distinct integers from ``low .. high``, drawn until no repeats occur."""
    if size < 0:
        raise ValueError("size must not be negative")
    if size > high - low + 1:
        raise ValueError("cannot draw more distinct values than the range holds")
    while True:
        result = [rand_int(low, high) for _ in range(size)]
        if len(set(result)) == size:
            return result


def get_current_seed() -> int:
    return default_rng().seed()


def set_current_seed(seed: int) -> None:
    default_rng().set_seed(seed)