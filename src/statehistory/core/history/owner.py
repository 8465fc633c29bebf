"""
State owner: the object whose value is protected by a history.

This module implements :class:`StateOwner`, a small container around one
arbitrary Python value. It provides:

- ``value`` / ``set(value)`` / ``update(fn)``: read and mutate, bumping a
  version counter on every change.
- ``capture_snapshot(label=None)``: produce an isolated, immutable
  :class:`~statehistory.core.history.snapshot.Snapshot`.
- ``restore_from_snapshot(snapshot)``: overwrite the value from a snapshot
  this owner produced; foreign snapshots are rejected.

Design Goals
------------
- **Isolation**: values are deep-copied on the way in and on the way out, so
  later mutation of the live value never reaches a stored snapshot.
- **Reproducibility**: the clock and the random source used for default
  labels are injectable. A seeded ``random.Random`` plus a fixed clock gives
  byte-identical labels across runs.
- **No leaks**: default labels combine timestamp, sequence and a random
  token. They never echo the value.
"""

from __future__ import annotations

import copy
import random
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Generic, TypeVar

from ..result import Result, err, ok
from ..settings import load_settings
from .errors import HistoryError
from .snapshot import Snapshot

T = TypeVar("T")

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class StateOwner(Generic[T]):
    """
    Holder of a mutable value with snapshot/restore support.

    Attributes
    ----------
    _value : T
        The live value. Its shape is up to the caller.
    _version : int
        Monotonically increasing counter (bumps on every mutation or restore).
    _sequence : int
        Number of snapshots captured so far.
    _owner_id : str
        Unique identity stamped on every snapshot this owner produces.
    """

    __slots__ = ("_value", "_version", "_sequence", "_owner_id", "_clock", "_rng", "_token_len")

    def __init__(
        self,
        initial: T,
        *,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        label_token_length: int | None = None,
    ) -> None:
        self._value: T = copy.deepcopy(initial)
        self._version: int = 0
        self._sequence: int = 0
        self._owner_id: str = uuid.uuid4().hex
        self._clock: Clock = clock or _utcnow
        self._rng: random.Random = rng or random.Random()
        self._token_len: int = (
            label_token_length
            if label_token_length is not None
            else load_settings().label_token_length
        )

    # ------------------------------- Value API ------------------------------

    @property
    def value(self) -> T:
        """The live value. Mutating it in place bypasses the version counter."""
        return self._value

    @property
    def version(self) -> int:
        return self._version

    @property
    def owner_id(self) -> str:
        return self._owner_id

    def set(self, value: T) -> None:
        """Replace the value and bump the version."""
        self._value = value
        self._version += 1

    def update(self, fn: Callable[[T], T]) -> T:
        """Replace the value with ``fn(value)``, bump the version, return the new value."""
        self.set(fn(self._value))
        return self._value

    # ------------------------------ Snapshot API ----------------------------

    def capture_snapshot(self, label: str | None = None) -> Snapshot:
        """
        Capture an immutable snapshot of the current value.

        Parameters
        ----------
        label : str | None
            Optional caller-supplied label. When omitted a default label is
            generated from the capture time, the sequence number and a random
            token.

        Returns
        -------
        Snapshot
            A snapshot holding a deep copy of the current value.
        """
        self._sequence += 1
        created_at = self._clock()
        return Snapshot(
            owner_id=self._owner_id,
            sequence=self._sequence,
            label=label if label is not None else self._default_label(created_at),
            created_at=created_at,
            _payload=copy.deepcopy(self._value),
        )

    def restore_from_snapshot(self, snapshot: Snapshot) -> Result[None, HistoryError]:
        """
        Overwrite the value from ``snapshot``.

        Returns ``Err(ForeignSnapshot)`` without touching value or version when
        ``snapshot`` was produced by a different owner.
        """
        if not snapshot.belongs_to(self._owner_id):
            return err(HistoryError.foreign_snapshot(self._owner_id, snapshot.owner_id))
        self.set(copy.deepcopy(snapshot._payload))
        return ok(None)

    def _default_label(self, created_at: datetime) -> str:
        token = "".join(self._rng.choice("0123456789abcdef") for _ in range(self._token_len))
        return f"{created_at:%Y-%m-%d %H:%M:%S} / #{self._sequence:04d}-{token}"

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"StateOwner(owner_id={self._owner_id!r}, version={self._version})"


__all__ = ["StateOwner", "Clock"]
