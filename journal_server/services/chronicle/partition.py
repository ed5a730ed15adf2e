from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, List, Sequence, TypeVar

PART_SIZE_DEFAULT = 20

T = TypeVar("T")


@dataclass(frozen=True)
class Partition(Generic[T]):
    closed_parts: List[List[T]] = field(default_factory=list)
    open_part: List[T] = field(default_factory=list)


def partition(entries: Sequence[T], part_size: int = PART_SIZE_DEFAULT) -> Partition[T]:
    """Split oldest-first ``entries`` into full closed parts and the open remainder."""
    if part_size <= 0:
        raise ValueError("part_size must be positive")
    items = list(entries)
    closed_count = len(items) // part_size
    closed_parts = [items[index * part_size : (index + 1) * part_size] for index in range(closed_count)]
    return Partition(closed_parts=closed_parts, open_part=items[closed_count * part_size :])


def part_window(entries: Sequence[T], part_index: int, part_size: int = PART_SIZE_DEFAULT) -> List[T]:
    """Members of the 1-based closed part ``part_index``."""
    start = (part_index - 1) * part_size
    return list(entries[start : start + part_size])


__all__ = ["PART_SIZE_DEFAULT", "Partition", "part_window", "partition"]
