"""Closed error taxonomy for history operations.

Every failure a caller can observe from ``undo``/``redo``/restore is one of
three kinds. They travel inside :class:`~statehistory.core.result.Err`, so
callers match on ``error.kind`` rather than catching exception types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class HistoryErrorKind(str, Enum):
    """Discriminator for :class:`HistoryError`."""

    EMPTY_HISTORY = "empty_history"
    EMPTY_REDO = "empty_redo"
    FOREIGN_SNAPSHOT = "foreign_snapshot"


@dataclass(frozen=True, slots=True)
class HistoryError:
    """Expected failure of a history operation.

    Attributes
    ----------
    kind : HistoryErrorKind
        Which of the three failure modes occurred.
    message : str
        Human-readable detail for logs. Never contains snapshot contents.
    """

    kind: HistoryErrorKind
    message: str = ""

    @classmethod
    def empty_history(cls) -> HistoryError:
        return cls(HistoryErrorKind.EMPTY_HISTORY, "nothing to undo")

    @classmethod
    def empty_redo(cls) -> HistoryError:
        return cls(HistoryErrorKind.EMPTY_REDO, "nothing to redo")

    @classmethod
    def foreign_snapshot(cls, expected_owner: str, actual_owner: str) -> HistoryError:
        return cls(
            HistoryErrorKind.FOREIGN_SNAPSHOT,
            f"snapshot belongs to owner {actual_owner}, not {expected_owner}",
        )

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}" if self.message else self.kind.value


# Variant aliases; compare with ``error.kind is EmptyHistory``.
EmptyHistory = HistoryErrorKind.EMPTY_HISTORY
EmptyRedo = HistoryErrorKind.EMPTY_REDO
ForeignSnapshot = HistoryErrorKind.FOREIGN_SNAPSHOT

__all__ = [
    "HistoryError",
    "HistoryErrorKind",
    "EmptyHistory",
    "EmptyRedo",
    "ForeignSnapshot",
]
