from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence


class BreakDeduction(ABC):
    """Gross daily minutes -> net minutes (Strategy Pattern)."""

    @abstractmethod
    def net_minutes(self, gross_minutes: int) -> int:
        raise NotImplementedError


class NoBreakDeduction(BreakDeduction):
    def net_minutes(self, gross_minutes: int) -> int:
        return max(int(gross_minutes), 0)


class StandardBreakDeduction(BreakDeduction):
    """Statutory-style table: over 6h deducts 45 min, over 8h deducts 60 min.

    The result never drops below the threshold that was crossed, so more
    gross time never yields less net time.
    """

    DEFAULT_TABLE: Sequence[tuple[int, int]] = ((360, 45), (480, 60))

    def __init__(self, table: Sequence[tuple[int, int]] = DEFAULT_TABLE):
        self._table = sorted(table)

    def net_minutes(self, gross_minutes: int) -> int:
        gross = max(int(gross_minutes), 0)
        for threshold, break_minutes in reversed(self._table):
            if gross > threshold:
                return max(threshold, gross - break_minutes)
        return gross
