"""Digit <-> bitmask helpers shared by the grid state and the propagator.

Digits 1..9 map to bits 0..8, so a set of digits fits in a 9-bit integer.
"""

from __future__ import annotations

from typing import Tuple

from contracts.errors import InvariantViolation

DIGITS: Tuple[int, ...] = tuple(range(1, 10))
FULL_MASK = (1 << 9) - 1  # 0b111111111


def digit_to_mask(digit: int) -> int:
    """Return the single-bit mask for ``digit``."""

    if not 1 <= digit <= 9:
        raise InvariantViolation(f"Invalid value for a cell in the puzzle: {digit!r}")
    return 1 << (digit - 1)


def mask_to_digits(mask: int) -> Tuple[int, ...]:
    """Return the digits whose bits are set in ``mask``, ascending."""

    return tuple(digit for digit in DIGITS if mask & (1 << (digit - 1)))


# Popcount of every 9-bit mask.
POPCOUNT: Tuple[int, ...] = tuple(bin(mask).count("1") for mask in range(FULL_MASK + 1))


def popcount(mask: int) -> int:
    return POPCOUNT[mask & FULL_MASK]


def single_digit(mask: int) -> int:
    """Return the only digit of a one-bit ``mask``."""

    digits = mask_to_digits(mask)
    if len(digits) != 1:
        raise InvariantViolation(f"mask {mask:#011b} does not hold exactly one digit")
    return digits[0]


__all__ = [
    "DIGITS",
    "FULL_MASK",
    "POPCOUNT",
    "digit_to_mask",
    "mask_to_digits",
    "popcount",
    "single_digit",
]
