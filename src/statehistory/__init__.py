"""statehistory: bounded, stack-disciplined undo/redo for in-process state.

Typical use::

    from statehistory import StateOwner, create_history

    owner = StateOwner({"title": "draft"})
    history = create_history(owner, capacity=50)
    owner.update(lambda doc: {**doc, "title": "final"})
    history.capture("rename")
    history.undo()
"""

from __future__ import annotations

from .core.history import (
    AutoCaptureCommand,
    EmptyHistory,
    EmptyRedo,
    ForeignSnapshot,
    HistoryEntry,
    HistoryError,
    HistoryErrorKind,
    HistoryEvent,
    HistoryManager,
    HistoryState,
    HistoryView,
    Snapshot,
    SnapshotId,
    StateOwner,
    create_history,
)
from .core.result import Err, Ok, Result

__all__ = [
    "__version__",
    "AutoCaptureCommand",
    "EmptyHistory",
    "EmptyRedo",
    "Err",
    "ForeignSnapshot",
    "HistoryEntry",
    "HistoryError",
    "HistoryErrorKind",
    "HistoryEvent",
    "HistoryManager",
    "HistoryState",
    "HistoryView",
    "Ok",
    "Result",
    "Snapshot",
    "SnapshotId",
    "StateOwner",
    "create_history",
]
__version__ = "0.1.0"
