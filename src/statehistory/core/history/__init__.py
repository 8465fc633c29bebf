"""Snapshot/rollback machinery: owner, snapshot, history manager and events."""

from __future__ import annotations

from .commands import AutoCaptureCommand
from .errors import EmptyHistory, EmptyRedo, ForeignSnapshot, HistoryError, HistoryErrorKind
from .events import EventBus, HistoryEvent
from .manager import HistoryManager, HistoryState, HistoryView, create_history
from .owner import StateOwner
from .snapshot import HistoryEntry, Snapshot, SnapshotId

__all__ = [
    "AutoCaptureCommand",
    "EmptyHistory",
    "EmptyRedo",
    "EventBus",
    "ForeignSnapshot",
    "HistoryEntry",
    "HistoryError",
    "HistoryErrorKind",
    "HistoryEvent",
    "HistoryManager",
    "HistoryState",
    "HistoryView",
    "Snapshot",
    "SnapshotId",
    "StateOwner",
    "create_history",
]
