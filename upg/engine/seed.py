"""Seed parsing and validation."""

from __future__ import annotations

import re

from upg.config import MAX_SEED, MIN_SEED
from upg.errors import InvalidSeed

_CANONICAL_INT = re.compile(r"[0-9]+")


def parse_seed(text: str) -> int:
    """Parse *text* as a seed.

    Only canonical positive decimal integers in ``[MIN_SEED, MAX_SEED]``
    are accepted.  Surrounding whitespace, signs, decimal points and
    exponent notation are all rejected.
    """
    if not isinstance(text, str):
        raise InvalidSeed(f"Seed must be a string, got {type(text).__name__}")
    if text.strip() != text or not text:
        raise InvalidSeed(f"Invalid seed {text!r}: must be a positive integer")
    if "." in text:
        raise InvalidSeed(f"Invalid seed {text!r}: must be an integer, not a decimal")
    if _CANONICAL_INT.fullmatch(text) is None:
        raise InvalidSeed(f"Invalid seed {text!r}: must be a positive integer")

    value = int(text)
    if value < MIN_SEED:
        raise InvalidSeed(f"Invalid seed {text!r}: must be >= {MIN_SEED}")
    if value > MAX_SEED:
        raise InvalidSeed(f"Invalid seed {text!r}: exceeds maximum safe integer {MAX_SEED}")
    return value


def is_valid_seed(value: object) -> bool:
    """Return ``True`` if *value* is an int or string usable as a seed."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return MIN_SEED <= value <= MAX_SEED
    if isinstance(value, str):
        try:
            parse_seed(value)
        except InvalidSeed:
            return False
        return True
    return False
