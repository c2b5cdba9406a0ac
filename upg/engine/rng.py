"""Seeded random source for reproducible generation.

Uses the Mulberry32 mixing function over a single 32-bit accumulator.
Given the same seed, the sequence of draws is identical on every host.

Usage::

    from upg.engine.rng import SeededRNG

    rng = SeededRNG(42)
    rng.float()                 # always the same value for seed 42
    rng.int(1, 10)
    rng.pick(["a", "b", "c"])
    child = rng.fork()          # advances ``rng`` by exactly one draw
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Mapping, MutableSequence, Sequence
from typing import Any, Generic, Iterable, NamedTuple, TypeVar

from upg.errors import DomainExhausted, EmptyDomain, ZeroWeight

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_TWO_32 = 4294967296
_GOLDEN = 0x6D2B79F5

DEFAULT_CHARSET = "abcdefghijklmnopqrstuvwxyz0123456789"


class WeightedItem(NamedTuple, Generic[T]):
    """A value paired with its relative selection weight."""

    value: T
    weight: float


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def _normalise_weighted(items: Iterable[Any]) -> list[tuple[Any, float]]:
    pairs: list[tuple[Any, float]] = []
    for item in items:
        if isinstance(item, Mapping):
            pairs.append((item["value"], float(item["weight"])))
        else:
            value, weight = item
            pairs.append((value, float(weight)))
    return pairs


class SeededRNG:
    """Deterministic pseudo-random source.

    Parameters
    ----------
    seed:
        Integer seed.  Only the low 32 bits feed the accumulator; the full
        value is kept for reporting and :meth:`reset`.
    """

    __slots__ = ("_seed", "_state")

    def __init__(self, seed: int) -> None:
        self._seed = int(seed)
        self._state = self._seed & _MASK32

    @property
    def seed(self) -> int:
        """The seed this source was created from."""
        return self._seed

    def reset(self) -> None:
        """Rewind to the initial state so the sequence can be replayed."""
        self._state = self._seed & _MASK32

    def next_uint32(self) -> int:
        """Advance the accumulator and return the next raw 32-bit output."""
        self._state = (self._state + _GOLDEN) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return (t ^ (t >> 14)) & _MASK32

    # -- primitive draws -------------------------------------------------------

    def float(self) -> float:
        """Return a float in [0, 1)."""
        return self.next_uint32() / _TWO_32

    def int(self, lo: int, hi: int) -> int:
        """Return an integer in [lo, hi] (inclusive on both ends)."""
        span = hi - lo + 1
        return math.floor(self.float() * span) + lo

    def bool(self, probability: float = 0.5) -> bool:
        """Return ``True`` with the given probability."""
        return self.float() < probability

    # -- collection draws ------------------------------------------------------

    def pick(self, items: Sequence[T]) -> T:
        """Return one element of *items*."""
        if len(items) == 0:
            raise EmptyDomain("Cannot pick from an empty sequence")
        return items[self.int(0, len(items) - 1)]

    def pick_multiple(self, items: Sequence[T], count: int) -> list[T]:
        """Return *count* unique elements, drawn by pick-and-remove."""
        if count > len(items):
            raise DomainExhausted(
                f"Cannot pick {count} items from a sequence of length {len(items)}"
            )
        available = list(items)
        result: list[T] = []
        for _ in range(count):
            index = self.int(0, len(available) - 1)
            result.append(available.pop(index))
        return result

    def pick_weighted(self, items: Iterable[Any]) -> Any:
        """Return a value chosen with probability proportional to its weight.

        *items* may hold :class:`WeightedItem` instances, ``(value, weight)``
        pairs or ``{"value": ..., "weight": ...}`` mappings.

        When floating-point subtraction never crosses zero the last item is
        returned.  This matches the reference sequence exactly and slightly
        favours the last item under extreme weight distributions.
        """
        pairs = _normalise_weighted(items)
        if not pairs:
            raise ZeroWeight("Cannot pick from an empty weighted sequence")
        total = sum(weight for _, weight in pairs)
        if total == 0:
            raise ZeroWeight("Total weight cannot be zero")

        threshold = self.float() * total
        for value, weight in pairs:
            threshold -= weight
            if threshold <= 0:
                return value

        logger.debug("pick_weighted fell through to the last item (threshold=%r)", threshold)
        return pairs[-1][0]

    def shuffle(self, items: MutableSequence[T]) -> MutableSequence[T]:
        """Shuffle *items* in place (Fisher-Yates) and return it."""
        for i in range(len(items) - 1, 0, -1):
            j = self.int(0, i)
            items[i], items[j] = items[j], items[i]
        return items

    def string(self, length: int, charset: str = DEFAULT_CHARSET) -> str:
        """Return a random string of *length* characters from *charset*."""
        return "".join(charset[self.int(0, len(charset) - 1)] for _ in range(length))

    def uuid(self) -> str:
        """Return a version-4-shaped identifier.  Not cryptographically random."""
        parts = [
            f"{self.int(0, 0xFFFFFFFF):08x}",
            f"{self.int(0, 0xFFFF):04x}",
            f"{(self.int(0, 0xFFFF) & 0x0FFF) | 0x4000:04x}",
            f"{(self.int(0, 0xFFFF) & 0x3FFF) | 0x8000:04x}",
            f"{self.int(0, 0xFFFFFFFF):08x}{self.int(0, 0xFFFF):04x}",
        ]
        return "-".join(parts)

    # -- derivation ------------------------------------------------------------

    def fork(self) -> SeededRNG:
        """Return an independent child seeded from the parent's next draw."""
        return SeededRNG(self.next_uint32())

    def __repr__(self) -> str:
        return f"SeededRNG(seed={self._seed})"


class RNGFacade:
    """The draw-only view of a :class:`SeededRNG` handed to strategies.

    Strategies may draw but cannot fork, reset or replace the source, so
    every draw they make stays on the pipeline's single stream.
    """

    __slots__ = ("_rng",)

    def __init__(self, rng: SeededRNG) -> None:
        self._rng = rng

    def float(self) -> float:
        return self._rng.float()

    def int(self, lo: int, hi: int) -> int:
        return self._rng.int(lo, hi)

    def bool(self, probability: float = 0.5) -> bool:
        return self._rng.bool(probability)

    def pick(self, items: Sequence[T]) -> T:
        return self._rng.pick(items)

    def pick_multiple(self, items: Sequence[T], count: int) -> list[T]:
        return self._rng.pick_multiple(items, count)

    def pick_weighted(self, items: Iterable[Any]) -> Any:
        return self._rng.pick_weighted(items)

    def shuffle(self, items: MutableSequence[T]) -> MutableSequence[T]:
        return self._rng.shuffle(items)

    def string(self, length: int, charset: str = DEFAULT_CHARSET) -> str:
        return self._rng.string(length, charset)

    def uuid(self) -> str:
        return self._rng.uuid()


class RNGFactory:
    """Constructors for :class:`SeededRNG` from various seed sources."""

    @staticmethod
    def from_seed(seed: int) -> SeededRNG:
        return SeededRNG(seed)

    @staticmethod
    def from_string(text: str) -> SeededRNG:
        """Hash *text* (31-multiplier over UTF-16 code units) into a seed."""
        h = 0
        data = text.encode("utf-16-le")
        for i in range(0, len(data), 2):
            unit = data[i] | (data[i + 1] << 8)
            h = (((h << 5) - h) + unit) & _MASK32
        if h >= 0x80000000:
            h -= _TWO_32
        return SeededRNG(abs(h))

    @staticmethod
    def from_timestamp() -> SeededRNG:
        """Seed from the wall clock.  Output is NOT reproducible."""
        return SeededRNG(int(time.time() * 1000))
