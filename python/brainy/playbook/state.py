"""Execution state machine and highlight tracking for one playbook session.

States::

    idle -> running -> (paused <-> running) -> idle      completed
                                            -> stopped -> idle
                                            -> error

``error`` needs an explicit reset before the next run. Pause and stop are
requests: the state changes at once, but the executor only acts on them at
step boundaries, so an in-flight step always runs to completion.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from enum import Enum
from typing import Protocol

import structlog

from brainy.exceptions import ExecutionConflictError, InvalidTransitionError

logger = structlog.get_logger()


class ExecutionState(str, Enum):
    """Execution state of a playbook session."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"
    ERROR = "error"


StateListener = Callable[[ExecutionState, ExecutionState], None]


class ExecutionStateMachine:
    """Per-session execution state with cooperative pause and stop.

    Example:
        machine = ExecutionStateMachine("notes.md")
        machine.start()
        machine.request_pause()
        ...
        machine.resume()
        if not await machine.wait_at_boundary():
            ...  # stop was requested
    """

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        self._state = ExecutionState.IDLE
        self._run_active = False
        self._resume_event = asyncio.Event()
        self._resume_event.set()
        self._listeners: list[StateListener] = []
        self._logger = logger.bind(component="execution_state", session=session_id)

    @property
    def state(self) -> ExecutionState:
        return self._state

    @property
    def is_active(self) -> bool:
        """Whether a run currently owns this session."""
        return self._state in (ExecutionState.RUNNING, ExecutionState.PAUSED)

    @property
    def run_active(self) -> bool:
        """Whether a run loop still owns this session.

        Stays set after a stop request until the loop has left, so a stopped
        run that is finishing its in-flight step cannot be reset or restarted.
        """
        return self._run_active

    @property
    def stop_requested(self) -> bool:
        return self._state == ExecutionState.STOPPED

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def _transition(self, new_state: ExecutionState) -> None:
        old_state = self._state
        if old_state == new_state:
            return
        self._state = new_state
        self._logger.debug("execution_state_changed", old=old_state.value, new=new_state.value)
        for listener in self._listeners:
            listener(old_state, new_state)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """idle -> running.

        Raises:
            ExecutionConflictError: If a run is already active for this session.
            InvalidTransitionError: If the session is stopped or failed and
                has not been reset.
        """
        if self.is_active or self._run_active:
            raise ExecutionConflictError(
                f"Playbook is already {self._state.value} for session {self.session_id}"
            )
        if self._state != ExecutionState.IDLE:
            raise InvalidTransitionError(
                f"Cannot start from state '{self._state.value}'; reset the session first"
            )
        self._resume_event.set()
        self._run_active = True
        self._transition(ExecutionState.RUNNING)

    def request_pause(self) -> None:
        """running -> paused. Takes effect at the next step boundary."""
        if self._state == ExecutionState.PAUSED:
            return
        if self._state != ExecutionState.RUNNING:
            raise InvalidTransitionError(f"Cannot pause from state '{self._state.value}'")
        self._resume_event.clear()
        self._transition(ExecutionState.PAUSED)

    def resume(self) -> None:
        """paused -> running."""
        if self._state != ExecutionState.PAUSED:
            raise InvalidTransitionError(f"Cannot resume from state '{self._state.value}'")
        self._transition(ExecutionState.RUNNING)
        self._resume_event.set()

    def request_stop(self) -> bool:
        """running|paused -> stopped. Returns False when nothing was running."""
        if not self.is_active:
            return False
        self._transition(ExecutionState.STOPPED)
        # Wake a run blocked at a paused boundary
        self._resume_event.set()
        return True

    def complete_stop(self) -> None:
        """stopped -> idle, once the run has left its loop."""
        if self._state != ExecutionState.STOPPED:
            raise InvalidTransitionError(f"Cannot complete stop from state '{self._state.value}'")
        self._run_active = False
        self._transition(ExecutionState.IDLE)

    def finish(self) -> None:
        """running|paused -> idle after the last block."""
        if not self.is_active:
            raise InvalidTransitionError(f"Cannot finish from state '{self._state.value}'")
        self._run_active = False
        self._transition(ExecutionState.IDLE)

    def fail(self) -> None:
        """Any active or stopping state -> error."""
        if not (self.is_active or self._state == ExecutionState.STOPPED):
            raise InvalidTransitionError(f"Cannot fail from state '{self._state.value}'")
        self._run_active = False
        self._resume_event.set()
        self._transition(ExecutionState.ERROR)

    def reset(self) -> None:
        """stopped|error|idle -> idle.

        Raises:
            InvalidTransitionError: If a run is active; stop it first.
            ExecutionConflictError: If a stopped run has not left its loop yet.
        """
        if self.is_active:
            raise InvalidTransitionError("Cannot reset while a playbook is running; stop it first")
        if self._run_active:
            raise ExecutionConflictError(
                f"Playbook for session {self.session_id} is still stopping; reset after it ends"
            )
        self._resume_event.set()
        self._transition(ExecutionState.IDLE)

    async def wait_at_boundary(self) -> bool:
        """Block while paused.

        Returns:
            False if a stop was requested, True if execution may continue.
        """
        while self._state == ExecutionState.PAUSED:
            await self._resume_event.wait()
        return self._state != ExecutionState.STOPPED


# =============================================================================
# Highlights
# =============================================================================


class HighlightListener(Protocol):
    """Host hooks for current and failed step decorations."""

    def highlight_current(self, line: int) -> None: ...

    def highlight_failed(self, line: int) -> None: ...

    def clear(self) -> None: ...


class ExecutionHighlights:
    """Line numbers (1-indexed) of the current and failed blocks for a session."""

    def __init__(self, listener: HighlightListener | None = None) -> None:
        self.current_line: int | None = None
        self.failed_line: int | None = None
        self._listener = listener

    def set_listener(self, listener: HighlightListener | None) -> None:
        self._listener = listener

    def mark_current(self, line: int) -> None:
        self.current_line = line
        self.failed_line = None
        if self._listener:
            self._listener.highlight_current(line)

    def mark_failed(self, line: int) -> None:
        self.current_line = None
        self.failed_line = line
        if self._listener:
            self._listener.highlight_failed(line)

    def clear(self) -> None:
        self.current_line = None
        self.failed_line = None
        if self._listener:
            self._listener.clear()
