"""
Event surface of the history manager.

Subscribers receive a :class:`HistoryEvent` after a ``capture``, ``undo`` or
``redo`` succeeds. The payload is a discriminated record ``{kind, entry}``, so
filtering is a plain match on ``kind``.

Delivery rules
--------------
- Synchronous, in registration order, on the caller's thread.
- A subscriber that raises is logged (``logger.exception``) and reported to
  the optional ``error_handler``; remaining subscribers still run and the
  triggering operation still succeeds.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict

from ..settings import get_logger
from .snapshot import HistoryEntry

EventKind = Literal["capture", "undo", "redo"]
EVENT_KINDS: frozenset[str] = frozenset({"capture", "undo", "redo"})

logger = get_logger("statehistory.events")


class HistoryEvent(BaseModel):
    """Notification payload delivered to subscribers."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    entry: HistoryEntry


Listener = Callable[[HistoryEvent], object]
ErrorHandler = Callable[[HistoryEvent, Exception], object]
Unsubscribe = Callable[[], None]


@dataclass(slots=True, eq=False)
class _Subscription:
    callback: Listener
    kinds: frozenset[str] | None

    def wants(self, event: HistoryEvent) -> bool:
        return self.kinds is None or event.kind in self.kinds


class EventBus:
    """Ordered list of subscriptions with failure isolation."""

    __slots__ = ("_subs", "_error_handler")

    def __init__(self, error_handler: ErrorHandler | None = None) -> None:
        self._subs: list[_Subscription] = []
        self._error_handler = error_handler

    def subscribe(
        self, callback: Listener, kinds: Iterable[EventKind] | None = None
    ) -> Unsubscribe:
        """
        Register ``callback`` for events whose ``kind`` is in ``kinds``.

        Parameters
        ----------
        callback : Listener
            Called with the :class:`HistoryEvent`. Its return value is ignored.
        kinds : Iterable[EventKind] | None
            Event kinds to deliver; ``None`` delivers every kind.

        Returns
        -------
        Unsubscribe
            Zero-argument callable removing this registration. Calling it more
            than once is a no-op.
        """
        if not callable(callback):
            raise TypeError(f"callback must be callable, got {type(callback).__name__}")
        wanted: frozenset[str] | None = None
        if kinds is not None:
            wanted = frozenset(kinds)
            unknown = wanted - EVENT_KINDS
            if unknown:
                raise ValueError(f"unknown event kinds: {sorted(unknown)}")
        sub = _Subscription(callback, wanted)
        self._subs.append(sub)

        def unsubscribe() -> None:
            if sub in self._subs:
                self._subs.remove(sub)

        return unsubscribe

    def emit(self, event: HistoryEvent) -> None:
        """Deliver ``event`` to every matching subscriber."""
        # Copy so callbacks may (un)subscribe while we iterate.
        for sub in tuple(self._subs):
            if not sub.wants(event):
                continue
            try:
                sub.callback(event)
            except Exception as exc:
                logger.exception(
                    "history listener %r failed on %s #%d", sub.callback, event.kind, event.entry.id
                )
                if self._error_handler is not None:
                    try:
                        self._error_handler(event, exc)
                    except Exception:
                        logger.exception("history error handler failed")

    def __len__(self) -> int:
        return len(self._subs)


__all__ = [
    "EventBus",
    "EventKind",
    "EVENT_KINDS",
    "HistoryEvent",
    "Listener",
    "ErrorHandler",
    "Unsubscribe",
]
