"""
History manager: undo/redo stacks over a single :class:`StateOwner`.

The manager owns two LIFO stacks of ``(id, snapshot)`` entries and never looks
inside a snapshot; reading and writing values is the owner's job.

Stack discipline
----------------
- On construction the owner's current value is captured as the *baseline*
  (id ``0``). The top of the undo stack always stands for the owner's last
  known state, so ``undo`` restores the entry beneath the top. A stack holding
  only one entry has nothing to roll back to.
- ``capture`` pushes a new entry and clears the redo stack.
- ``undo`` moves the current position to the redo stack (re-captured from the
  owner, so uncaptured edits are not lost) and restores the previous entry.
- ``redo`` refreshes the undo top from the owner, then re-applies the most
  recently undone entry and pushes it back onto the undo stack.
- Neither stack changes until the re-capture and the restore have both
  succeeded, so a failed or raising ``undo``/``redo`` leaves them as they were.

Capacity
--------
With a bound ``K`` the undo stack never holds more than ``K`` entries; the
oldest are evicted silently. ``None`` means unbounded.

Example
-------
>>> from statehistory import StateOwner, create_history
>>> owner = StateOwner("A")
>>> history = create_history(owner)
>>> owner.set("B"); history.capture()
1
>>> history.undo().unwrap(), owner.value
(0, 'A')
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, overload

from ..result import Result, err, ok
from ..settings import get_logger, load_settings
from .errors import HistoryError
from .events import ErrorHandler, EventBus, EventKind, HistoryEvent, Listener, Unsubscribe
from .owner import StateOwner
from .snapshot import HistoryEntry, Snapshot, SnapshotId

T = TypeVar("T")

BASELINE_LABEL = "initial"

logger = get_logger("statehistory.history")


class HistoryState(str, Enum):
    """Coarse state of a :class:`HistoryManager`."""

    EMPTY = "empty"
    HAS_UNDO = "has_undo"
    HAS_UNDO_AND_REDO = "has_undo_and_redo"
    HAS_REDO_ONLY = "has_redo_only"


@dataclass(frozen=True, slots=True)
class _Entry:
    id: SnapshotId
    snapshot: Snapshot
    # False when the owner generated the label from the capture time.
    explicit_label: bool = True

    def describe(self) -> HistoryEntry:
        return HistoryEntry.describe(self.id, self.snapshot)

    def recapture(self, owner: StateOwner[Any]) -> _Entry:
        """Capture ``owner`` again under this entry's id.

        Generated labels are regenerated so they match the new timestamp.
        """
        label = self.snapshot.label if self.explicit_label else None
        return _Entry(self.id, owner.capture_snapshot(label), self.explicit_label)


class HistoryView(Sequence[HistoryEntry]):
    """
    Read-only, restartable view over a frozen copy of one stack.

    Entries are ordered from most recent to oldest and their
    :class:`HistoryEntry` records are built lazily on access. Later
    operations on the manager do not affect an existing view.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[_Entry]) -> None:
        # Stored oldest-first, exactly as on the stack.
        self._entries: tuple[_Entry, ...] = tuple(entries)

    def __len__(self) -> int:
        return len(self._entries)

    @overload
    def __getitem__(self, index: int) -> HistoryEntry: ...
    @overload
    def __getitem__(self, index: slice) -> Sequence[HistoryEntry]: ...

    def __getitem__(self, index: int | slice) -> HistoryEntry | Sequence[HistoryEntry]:
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        n = len(self._entries)
        if index < 0:
            index += n
        if not 0 <= index < n:
            raise IndexError("history index out of range")
        return self._entries[n - 1 - index].describe()

    def __iter__(self) -> Iterator[HistoryEntry]:
        for entry in reversed(self._entries):
            yield entry.describe()

    def ids(self) -> list[SnapshotId]:
        """Return the entry ids, most recent first."""
        return [entry.id for entry in reversed(self._entries)]

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"HistoryView(ids={self.ids()!r})"


def _check_capacity(capacity: int | None) -> int | None:
    if capacity is None:
        return None
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise TypeError(f"capacity must be an int or None, got {type(capacity).__name__}")
    if capacity < 1:
        raise ValueError(f"capacity must be >= 1, got {capacity}")
    return capacity


class HistoryManager(Generic[T]):
    """
    Bounded undo/redo history bound to exactly one :class:`StateOwner`.

    Parameters
    ----------
    owner : StateOwner[T]
        The owner whose value is tracked. Fixed for the manager's lifetime.
    capacity : int | None
        Maximum undo-stack depth (baseline included); ``None`` for unbounded.
    baseline_label : str
        Label of the entry captured at construction.
    error_handler : ErrorHandler | None
        Receives ``(event, exception)`` when a subscriber raises.
    """

    def __init__(
        self,
        owner: StateOwner[T],
        capacity: int | None = None,
        *,
        baseline_label: str = BASELINE_LABEL,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self._owner = owner
        self._capacity = _check_capacity(capacity)
        self._undo: list[_Entry] = []
        self._redo: list[_Entry] = []
        self._next_id: SnapshotId = 0
        self._events = EventBus(error_handler)

        self._undo.append(self._new_entry(baseline_label))

    # ------------------------------ Introspection ---------------------------

    @property
    def owner(self) -> StateOwner[T]:
        return self._owner

    @property
    def capacity(self) -> int | None:
        return self._capacity

    @property
    def can_undo(self) -> bool:
        return len(self._undo) > 1

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        """Number of ``undo`` calls that would currently succeed."""
        return max(len(self._undo) - 1, 0)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    @property
    def current_id(self) -> SnapshotId:
        """Id of the entry standing for the owner's current position."""
        return self._undo[-1].id

    @property
    def state(self) -> HistoryState:
        if self.can_undo and self.can_redo:
            return HistoryState.HAS_UNDO_AND_REDO
        if self.can_undo:
            return HistoryState.HAS_UNDO
        if self.can_redo:
            return HistoryState.HAS_REDO_ONLY
        return HistoryState.EMPTY

    # ------------------------------- Operations -----------------------------

    def capture(self, label: str | None = None) -> SnapshotId:
        """
        Capture the owner's current value as a new history entry.

        The redo stack is cleared and, when bounded, the oldest undo entries
        are evicted. Unchanged values are captured anyway.

        Returns
        -------
        SnapshotId
            The id assigned to the new entry.
        """
        entry = self._new_entry(label)
        self._undo.append(entry)
        if self._redo:
            logger.debug("capture #%d discards %d redo entries", entry.id, len(self._redo))
            self._redo.clear()
        self._enforce_capacity()
        logger.debug("captured #%d (%s)", entry.id, entry.snapshot.label)
        self._emit("capture", entry)
        return entry.id

    def undo(self) -> Result[SnapshotId, HistoryError]:
        """
        Roll the owner back to the previous entry.

        Returns
        -------
        Result[SnapshotId, HistoryError]
            ``Ok(id)`` of the entry now active, ``Err(EmptyHistory)`` when there
            is nothing beneath the current position, or the owner's restore
            error (stacks unchanged).
        """
        if not self.can_undo:
            return err(HistoryError.empty_history())

        current = self._undo[-1]
        target = self._undo[-2]
        # Stacks are only touched once capture and restore have both succeeded.
        pending = current.recapture(self._owner)

        restored = self._owner.restore_from_snapshot(target.snapshot)
        if restored.is_err():
            logger.warning("undo to #%d failed: %s", target.id, restored.unwrap_err())
            return err(restored.unwrap_err())

        self._undo.pop()
        self._redo.append(pending)
        logger.debug("undo #%d -> #%d", current.id, target.id)
        self._emit("undo", target)
        return ok(target.id)

    def redo(self) -> Result[SnapshotId, HistoryError]:
        """
        Re-apply the most recently undone entry.

        Returns
        -------
        Result[SnapshotId, HistoryError]
            ``Ok(id)`` of the re-applied entry, ``Err(EmptyRedo)`` when nothing
            has been undone since the last capture, or the owner's restore
            error (stacks unchanged).
        """
        if not self._redo:
            return err(HistoryError.empty_redo())

        target = self._redo[-1]
        refreshed = self._undo[-1].recapture(self._owner)

        restored = self._owner.restore_from_snapshot(target.snapshot)
        if restored.is_err():
            logger.warning("redo to #%d failed: %s", target.id, restored.unwrap_err())
            return err(restored.unwrap_err())

        self._redo.pop()
        self._undo[-1] = refreshed
        self._undo.append(target)
        self._enforce_capacity()
        logger.debug("redo -> #%d", target.id)
        self._emit("redo", target)
        return ok(target.id)

    def history(self) -> HistoryView:
        """Return the undo stack metadata, most recent first."""
        return HistoryView(self._undo)

    def redo_history(self) -> HistoryView:
        """Return the redo stack metadata, next redo first."""
        return HistoryView(self._redo)

    def capacity_policy(self, capacity: int | None) -> None:
        """Set (or clear with ``None``) the undo-stack bound, evicting at once."""
        self._capacity = _check_capacity(capacity)
        self._enforce_capacity()

    @contextmanager
    def atomic(self, label: str | None = None) -> Iterator[StateOwner[T]]:
        """
        Run a block of mutations as one history step.

        On clean exit the owner is captured with ``label``. If the block
        raises, the owner is restored to the current position and the
        exception propagates; nothing is captured.
        """
        try:
            yield self._owner
        except BaseException:
            self._rollback_to_current()
            raise
        self.capture(label)

    def run(
        self, action: Callable[[StateOwner[T]], object], label: str | None = None
    ) -> SnapshotId:
        """
        Call ``action(owner)`` and capture the result as one history step.

        Same rollback rule as :meth:`atomic`; returns the id ``capture`` assigned.
        """
        try:
            action(self._owner)
        except BaseException:
            self._rollback_to_current()
            raise
        return self.capture(label)

    # ----------------------------- Subscriptions ----------------------------

    def subscribe(
        self, callback: Listener, kinds: Iterable[EventKind] | None = None
    ) -> Unsubscribe:
        """Register ``callback`` for the given event kinds (all when ``None``)."""
        return self._events.subscribe(callback, kinds)

    def on_capture(self, callback: Listener) -> Unsubscribe:
        return self._events.subscribe(callback, ("capture",))

    def on_undo(self, callback: Listener) -> Unsubscribe:
        return self._events.subscribe(callback, ("undo",))

    def on_redo(self, callback: Listener) -> Unsubscribe:
        return self._events.subscribe(callback, ("redo",))

    # -------------------------------- Internals -----------------------------

    def _new_entry(self, label: str | None) -> _Entry:
        entry = _Entry(self._next_id, self._owner.capture_snapshot(label), label is not None)
        self._next_id += 1
        return entry

    def _enforce_capacity(self) -> None:
        if self._capacity is None:
            return
        overflow = len(self._undo) - self._capacity
        if overflow > 0:
            evicted = self._undo[:overflow]
            del self._undo[:overflow]
            logger.debug("evicted %s (capacity %d)", [e.id for e in evicted], self._capacity)

    def _rollback_to_current(self) -> None:
        top = self._undo[-1]
        self._owner.restore_from_snapshot(top.snapshot).inspect_err(
            lambda e: logger.warning("rollback to #%d failed: %s", top.id, e)
        )

    def _emit(self, kind: EventKind, entry: _Entry) -> None:
        if len(self._events):
            self._events.emit(HistoryEvent(kind=kind, entry=entry.describe()))

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return (
            f"HistoryManager(state={self.state.value}, undo={self.undo_depth}, "
            f"redo={self.redo_depth}, capacity={self._capacity})"
        )


def create_history(
    owner: StateOwner[T], capacity: int | None = None, **kwargs: Any
) -> HistoryManager[T]:
    """
    Build a :class:`HistoryManager` for ``owner``.

    ``capacity=None`` falls back to ``STATEHISTORY_CAPACITY`` from settings,
    which is unbounded unless configured.
    """
    if capacity is None:
        capacity = load_settings().history_capacity
    return HistoryManager(owner, capacity, **kwargs)


__all__ = ["HistoryManager", "HistoryState", "HistoryView", "create_history", "BASELINE_LABEL"]
