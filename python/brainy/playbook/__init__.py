"""Playbook execution: state machine, executor and sessions."""

from brainy.playbook.executor import ExecutionResult, PlaybookExecutor, StepResult
from brainy.playbook.session import PlaybookSession, SessionManager
from brainy.playbook.state import (
    ExecutionHighlights,
    ExecutionState,
    ExecutionStateMachine,
    HighlightListener,
)

__all__ = [
    "ExecutionHighlights",
    "ExecutionResult",
    "ExecutionState",
    "ExecutionStateMachine",
    "HighlightListener",
    "PlaybookExecutor",
    "PlaybookSession",
    "SessionManager",
    "StepResult",
]
