"""Lowball comparison - lower hands are better."""

from typing import Sequence


def compare_lowball(a: Sequence[int], b: Sequence[int]) -> int:
    """Compare two value multisets under 2-7 lowball.

    Both sides are sorted high-first and compared card by card; the first
    difference decides, and the smaller value wins.

    Returns:
        -1 if a is better (lower), 1 if b is better, 0 if equal

    Raises:
        ValueError: if the multisets differ in size
    """
    if len(a) != len(b):
        raise ValueError(f"Cannot compare {len(a)} cards against {len(b)}")

    for x, y in zip(sorted(a, reverse=True), sorted(b, reverse=True)):
        if x < y:
            return -1
        if x > y:
            return 1
    return 0


def is_at_least(candidate: Sequence[int], benchmark: Sequence[int]) -> bool:
    """True if candidate is equal to or better than benchmark."""
    return compare_lowball(candidate, benchmark) <= 0
