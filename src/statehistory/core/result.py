"""Typed Result container returned by history operations.

Rolling back or forward can fail for ordinary, expected reasons (nothing left
to undo, a snapshot from another owner). Those outcomes are part of the
contract, so :class:`~statehistory.core.history.manager.HistoryManager` and
:class:`~statehistory.core.history.owner.StateOwner` report them as values
instead of raising.

Example
-------
>>> from statehistory import StateOwner, create_history
>>> result = create_history(StateOwner("A")).undo()
>>> result.is_err(), result.unwrap_err().kind.value
(True, 'empty_history')
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, cast

T = TypeVar("T")
E = TypeVar("E")

_MISSING = object()


class Result(Generic[T, E]):
    """Either a success (`Ok[T]`) or an expected failure (`Err[E]`)."""

    def is_ok(self) -> bool:
        """Return ``True`` if this is an :class:`Ok` value."""
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        """Return ``True`` if this is an :class:`Err` value."""
        return isinstance(self, Err)

    def unwrap(self, default: object = _MISSING) -> T:
        """Return the inner value if ``Ok``, else return ``default`` or raise.

        ``None`` is a valid fallback, which matters for ``Result[None, ...]``
        restores. Without a fallback an ``Err`` raises :class:`RuntimeError`.
        """
        if isinstance(self, Ok):
            return cast(Ok[T, E], self).value
        if default is not _MISSING:
            return cast(T, default)
        raise RuntimeError(f"Attempted to unwrap Err: {self!r}")

    def unwrap_err(self) -> E:
        """Return the error value if ``Err``, else raise."""
        if isinstance(self, Err):
            return cast(Err[T, E], self).error
        raise RuntimeError(f"Attempted to unwrap_err on Ok: {self!r}")

    def inspect_err(self, fn: Callable[[E], object]) -> Result[T, E]:
        """Call ``fn`` with the error (e.g. to log it) and return ``self``."""
        if isinstance(self, Err):
            fn(cast(Err[T, E], self).error)
        return self

    def __repr__(self) -> str:  # pragma: no cover - trivial representation
        if isinstance(self, Ok):
            return f"Ok({cast(Ok[T, E], self).value!r})"
        if isinstance(self, Err):
            return f"Err({cast(Err[T, E], self).error!r})"
        return "Result(?)"


@dataclass(frozen=True, repr=False)
class Ok(Result[T, E]):
    """Successful result wrapping a value of type ``T``."""

    value: T


@dataclass(frozen=True, repr=False)
class Err(Result[T, E]):
    """Failed result wrapping an error payload of type ``E``."""

    error: E


def ok(value: T) -> Result[T, E]:
    """Construct :class:`Ok` with better type inference at call sites."""
    return Ok(value)


def err(error: E) -> Result[T, E]:
    """Construct :class:`Err` with better type inference at call sites."""
    return Err(error)


__all__ = ["Result", "Ok", "Err", "ok", "err"]
