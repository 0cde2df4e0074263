"""Exception hierarchy for Brainy.

Parse-time problems are never raised; they are collected as
:class:`brainy.parser.models.ParserError` values. Everything below is raised
at configuration or execution time.
"""

from __future__ import annotations

from typing import Any


class BrainyError(Exception):
    """Base class for all Brainy errors."""

    def __init__(self, message: str, details: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or []


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(BrainyError):
    """Raised when settings cannot be loaded or validated."""


# =============================================================================
# Skills
# =============================================================================


class SkillError(BrainyError):
    """Base class for skill failures."""


class SkillNotFoundError(SkillError):
    """Raised when no skill is registered under the requested name."""

    def __init__(self, name: str, available: list[str] | None = None):
        available = available or []
        message = f"Skill not found: {name}"
        if available:
            message += f" (available: {', '.join(sorted(available))})"
        super().__init__(message)
        self.name = name
        self.available = available


class SkillValidationError(SkillError):
    """Raised when a skill receives missing or invalid parameters."""


class SkillExecutionError(SkillError):
    """Raised when a skill fails while doing its work."""


# =============================================================================
# Model transport
# =============================================================================


class ModelClientError(BrainyError):
    """Raised when the model transport rejects or fails a request."""

    def __init__(self, message: str, raw: Any = None):
        super().__init__(message)
        self.raw = raw


class ModelSelectionError(ModelClientError):
    """Raised when a model id cannot be selected."""


# =============================================================================
# Execution
# =============================================================================


class ExecutionError(BrainyError):
    """Base class for playbook execution control errors."""


class ExecutionConflictError(ExecutionError):
    """Raised when a run is requested for a session that is already active."""


class InvalidTransitionError(ExecutionError):
    """Raised when an execution state transition is not allowed."""


class PlaybookNotExecutableError(ExecutionError):
    """Raised when a playbook with critical parse errors is asked to run."""
