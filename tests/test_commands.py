"""Unit tests for AutoCaptureCommand."""

from __future__ import annotations

import pytest

from statehistory import AutoCaptureCommand, HistoryEvent, StateOwner, create_history


def test_command_mutates_then_captures() -> None:
    """Each execution is one history step with the command's label."""
    owner = StateOwner(0)
    history = create_history(owner)
    increment = AutoCaptureCommand(history, lambda o: o.update(lambda v: v + 1), label="inc")

    assert increment() == 1
    assert increment.execute() == 2
    assert owner.value == 2
    assert increment.last_id == 2 and increment.runs == 2
    assert [e.label for e in history.history()] == ["inc", "inc", "initial"]

    history.undo()
    assert owner.value == 1


def test_failing_command_rolls_back_and_records_nothing() -> None:
    """A raising action leaves the owner and history as they were."""
    owner = StateOwner({"n": 1})
    history = create_history(owner)

    def broken(o: StateOwner[dict[str, int]]) -> None:
        o.set({"n": -1})
        raise ValueError("invalid")

    command = AutoCaptureCommand(history, broken)
    with pytest.raises(ValueError):
        command()

    assert owner.value == {"n": 1}
    assert command.last_id is None and command.runs == 0
    assert history.history().ids() == [0]


def test_command_clears_redo() -> None:
    """Running a command after undo invalidates the redo stack."""
    owner = StateOwner("a")
    history = create_history(owner)
    AutoCaptureCommand(history, lambda o: o.set("b"))()
    history.undo()
    AutoCaptureCommand(history, lambda o: o.set("c"))()
    assert not history.can_redo


def test_action_must_be_callable() -> None:
    """Commands reject non-callable actions."""
    history = create_history(StateOwner(0))
    with pytest.raises(TypeError):
        AutoCaptureCommand(history, 42)  # type: ignore[arg-type]


def test_command_reports_its_own_capture_id() -> None:
    """A listener that undoes during capture does not change the reported id."""
    owner = StateOwner(0)
    history = create_history(owner)
    undone: list[int] = []

    def undo_once(_: HistoryEvent) -> None:
        if not undone:
            undone.append(history.undo().unwrap())

    history.on_capture(undo_once)
    command = AutoCaptureCommand(history, lambda o: o.set(5), label="five")

    assert command() == 1
    assert command.last_id == 1
    assert undone == [0]
    assert history.current_id == 0 and owner.value == 0
