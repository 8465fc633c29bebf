"""Command wrapper that captures history around a mutation.

An :class:`AutoCaptureCommand` packages "mutate the owner, then capture" as
one reusable callable. If the mutation raises, the owner is put back to the
current history position and nothing is recorded.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

from .manager import HistoryManager
from .owner import StateOwner
from .snapshot import SnapshotId

T = TypeVar("T")

Action = Callable[[StateOwner[T]], object]


class AutoCaptureCommand(Generic[T]):
    """
    Reusable mutation bound to a history.

    Parameters
    ----------
    history : HistoryManager[T]
        History that records each successful execution.
    action : Action
        Called with the owner; mutates it through ``set``/``update``.
    label : str | None
        Label for every capture made by this command. ``None`` lets the owner
        generate one.
    """

    __slots__ = ("_history", "_action", "label", "last_id", "runs")

    def __init__(
        self, history: HistoryManager[T], action: Action[T], label: str | None = None
    ) -> None:
        if not callable(action):
            raise TypeError("action must be callable")
        self._history = history
        self._action = action
        self.label = label
        self.last_id: SnapshotId | None = None
        self.runs = 0

    def __call__(self) -> SnapshotId:
        """Run the action and capture; return the new snapshot id."""
        self.last_id = self._history.run(self._action, self.label)
        self.runs += 1
        return self.last_id

    execute = __call__


__all__ = ["AutoCaptureCommand", "Action"]
