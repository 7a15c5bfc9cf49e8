"""Priority ordering for theme and state axis labels.

Labels listed in a priority table sort by their position in the table. Labels
the table does not know about sort after every known label, in plain
codepoint order among themselves.

Example:
    >>> sort_by_priority({"sepia", "dark", "light"}, THEME_PRIORITY)
    ['light', 'dark', 'sepia']
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

THEME_PRIORITY: tuple[str, ...] = ("light", "dark", "dark1", "dark2")

STATE_PRIORITY: tuple[str, ...] = (
    "default",
    "blue",
    "darkblue",
    "grey",
    "lightgrey",
    "white",
    "black",
    "green",
    "red",
    "purple",
    "on",
)


@dataclass(frozen=True)
class PriorityTable:
    """Canonical label order for one axis."""

    labels: tuple[str, ...]
    _ranks: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        ranks: dict[str, int] = {}
        for index, label in enumerate(self.labels):
            ranks.setdefault(label, index)
        object.__setattr__(self, "_ranks", ranks)

    @classmethod
    def of(cls, table: PriorityTable | Sequence[str]) -> PriorityTable:
        if isinstance(table, PriorityTable):
            return table
        return cls(tuple(table))

    def rank(self, label: str) -> int | None:
        """Index of ``label`` in the table, or None if absent."""
        return self._ranks.get(label)

    def sort_key(self, label: str) -> tuple[int, int, str]:
        rank = self.rank(label)
        if rank is None:
            return (1, 0, label)
        return (0, rank, "")


def sort_by_priority(items: Iterable[str], table: PriorityTable | Sequence[str]) -> list[str]:
    """Return the distinct labels of ``items`` in priority order.

    The input is never mutated and its iteration order has no effect on the
    result.

    Args:
        items: Axis labels (duplicates collapse to one entry)
        table: Priority table for this axis

    Returns:
        New list of labels, table members first
    """
    priority = PriorityTable.of(table)
    return sorted(set(items), key=priority.sort_key)
