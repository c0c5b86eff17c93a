"""Choosing sibling numbers with tiered spacing (100s, then 10s, then 1s)."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable

MAX_SIBLING = 999
INITIAL_SPACING = 100


class MaxSiblingsReachedError(ValueError):
    """Raised when all sibling slots are occupied."""

    def __init__(self, message: str = "maximum siblings reached (999)") -> None:
        super().__init__(message)


class NoSlotAvailableError(ValueError):
    """Raised when no gap exists at the requested position."""

    def __init__(
        self, message: str = "no slot available; compact renumbering recommended"
    ) -> None:
        super().__init__(message)


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


def find_gap(low: int, high: int) -> int | None:
    """The best-tiered number strictly between low and high, or None."""
    if high <= low + 1:
        return None
    for tier in (100, 10):
        candidate = (_trunc_div(low, tier) + 1) * tier
        if low < candidate < high:
            return candidate
    return low + 1


def _tier_of(n: int) -> int:
    if n % 100 == 0:
        return 100
    if n % 10 == 0:
        return 10
    return 1


def _checked_sorted(occupied: Iterable[int]) -> list[int]:
    ordered = sorted(occupied)
    if len(ordered) >= MAX_SIBLING:
        raise MaxSiblingsReachedError()
    return ordered


def next_sibling_number(occupied: Iterable[int]) -> int:
    """The number to use when appending after all existing siblings."""
    ordered = sorted(occupied)
    if not ordered:
        return INITIAL_SPACING
    if len(ordered) >= MAX_SIBLING:
        raise MaxSiblingsReachedError()
    result = find_gap(ordered[-1], MAX_SIBLING + 1)
    if result is None:
        raise NoSlotAvailableError()
    return result


def sibling_number_before(occupied: Iterable[int], target: int) -> int:
    """A number to insert immediately before ``target``."""
    ordered = _checked_sorted(occupied)
    idx = bisect_left(ordered, target)
    predecessor = ordered[idx - 1] if idx > 0 else 0
    result = find_gap(predecessor, target)
    if result is None:
        raise NoSlotAvailableError()
    return result


def sibling_number_after(occupied: Iterable[int], target: int) -> int:
    """A number to insert after ``target``, preferring a higher-tier slot."""
    ordered = _checked_sorted(occupied)
    idx = bisect_left(ordered, target)
    successor = ordered[idx + 1] if idx < len(ordered) - 1 else MAX_SIBLING + 1

    direct = find_gap(target, successor)

    if successor <= MAX_SIBLING:
        second = ordered[idx + 2] if idx + 2 < len(ordered) else MAX_SIBLING + 1
        skip = find_gap(successor, second)
        if skip is not None and (direct is None or _tier_of(skip) > _tier_of(direct)):
            return skip

    if direct is not None:
        return direct
    raise NoSlotAvailableError()


def compact_numbers(count: int) -> list[int]:
    """``count`` numbers at the initial spacing: 100, 200, ..."""
    if count > MAX_SIBLING // INITIAL_SPACING:
        raise MaxSiblingsReachedError()
    return [(i + 1) * INITIAL_SPACING for i in range(count)]