"""Item outcomes and the aggregated execution report.

An item outcome is one of four variants:

- ``Blank``: before the skip index, never attempted.
- ``Skipped(reason)``: not attempted, either after a failure (``ABORTED``)
  or because it has no automated check in unattended mode (``NO CHECKS``).
- ``Passed(value)``: the check or the operator confirmed the item.
- ``Failed(message, stdout, stderr)``: the item failed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from preflighter.checklist.models import ChecklistItem

__all__ = [
    "ItemState",
    "Blank",
    "Skipped",
    "Passed",
    "Failed",
    "ItemOutcome",
    "ItemResult",
    "ExecutionReport",
]


class ItemState(str, Enum):
    """Discriminator of the outcome variants."""

    BLANK = "blank"
    SKIPPED = "skipped"
    PASSED = "passed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class Blank:
    state: ClassVar[ItemState] = ItemState.BLANK


@dataclass(frozen=True, slots=True)
class Skipped:
    reason: str
    state: ClassVar[ItemState] = ItemState.SKIPPED


@dataclass(frozen=True, slots=True)
class Passed:
    value: str = ""
    state: ClassVar[ItemState] = ItemState.PASSED


@dataclass(frozen=True, slots=True)
class Failed:
    message: str
    stdout: str = ""
    stderr: str = ""
    state: ClassVar[ItemState] = ItemState.FAILED


ItemOutcome = Blank | Skipped | Passed | Failed


@dataclass(frozen=True, slots=True)
class ItemResult:
    """Outcome of one item together with its 1-based running index."""

    index: int
    item: ChecklistItem
    outcome: ItemOutcome


@dataclass(frozen=True, slots=True)
class ExecutionReport:
    """Aggregated result of one pass over the flattened item list.

    Attributes:
        results: One entry per item, in execution order.
        interrupted: True if the operator interrupted the run.
    """

    results: tuple[ItemResult, ...]
    interrupted: bool = False

    @property
    def outcomes(self) -> tuple[ItemOutcome, ...]:
        return tuple(r.outcome for r in self.results)

    @property
    def success(self) -> bool:
        """True if no item failed and the run was not interrupted."""
        return not self.interrupted and self.failed == 0

    @property
    def passed(self) -> int:
        return self._count(ItemState.PASSED)

    @property
    def failed(self) -> int:
        return self._count(ItemState.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(ItemState.SKIPPED)

    @property
    def blank(self) -> int:
        return self._count(ItemState.BLANK)

    def _count(self, state: ItemState) -> int:
        return sum(1 for o in self.outcomes if o.state is state)
