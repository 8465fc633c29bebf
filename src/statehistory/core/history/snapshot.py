"""
Snapshot and history-entry definitions.

This module defines the immutable capture of an owner's value at one instant
(:class:`Snapshot`) and the metadata record the history manager hands out to
callers (:class:`HistoryEntry`). It is separated from ``owner.py`` and
``manager.py`` to avoid circular imports.

Design Notes
------------
- **Immutability**: ``Snapshot`` is a frozen dataclass. The captured value is
  a deep copy taken by the owner, and the owner deep-copies it again on
  restore, so neither side can alias it afterwards.
- **Opacity**: the captured value is stored under ``_payload`` and kept out of
  ``repr``. Only :class:`~statehistory.core.history.owner.StateOwner` reads it.
- **Identity**: ``eq=False`` makes equality identity-based. Two captures of
  the same value are still two different snapshots.
- **Metadata**: :class:`HistoryEntry` is a Pydantic model so it validates and
  dumps cleanly (``model_dump()``) for logs and subscribers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SnapshotId = int


@dataclass(frozen=True, slots=True, eq=False)
class Snapshot:
    """
    Immutable capture of a :class:`StateOwner` value.

    Attributes
    ----------
    owner_id : str
        Identity of the owner that produced this snapshot. Restoring onto any
        other owner is rejected.
    sequence : int
        Per-owner capture counter (1-based) at the time of capture.
    label : str
        Human-readable label. Never derived from the captured value.
    created_at : datetime
        UTC timestamp taken from the owner's clock.
    """

    owner_id: str
    sequence: int
    label: str
    created_at: datetime
    _payload: Any = field(default=None, repr=False)

    def belongs_to(self, owner_id: str) -> bool:
        """Return True if this snapshot was produced by ``owner_id``."""
        return self.owner_id == owner_id


class HistoryEntry(BaseModel):
    """Read-only metadata for one position in the history."""

    model_config = ConfigDict(frozen=True)

    id: SnapshotId = Field(ge=0, description="Manager-assigned, monotonically increasing id")
    label: str = Field(description="Snapshot label")
    timestamp: datetime = Field(description="UTC capture time of the snapshot")

    @classmethod
    def describe(cls, snapshot_id: SnapshotId, snapshot: Snapshot) -> HistoryEntry:
        """Build the public metadata for ``snapshot`` stored under ``snapshot_id``."""
        return cls(id=snapshot_id, label=snapshot.label, timestamp=snapshot.created_at)


__all__ = ["Snapshot", "SnapshotId", "HistoryEntry"]
