"""Per-document playbook sessions and their coordination."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from brainy.config import BrainySettings
from brainy.context.store import ContextStore
from brainy.context.variables import VariableStore
from brainy.exceptions import ExecutionConflictError, ExecutionError
from brainy.llm.base import ModelClient
from brainy.parser.document import PlaybookParser
from brainy.parser.models import ParseResult
from brainy.playbook.executor import (
    ExecutionResult,
    OnCompleteCallback,
    OnErrorCallback,
    OnProgressCallback,
    PlaybookExecutor,
)
from brainy.playbook.state import ExecutionHighlights, ExecutionState, ExecutionStateMachine
from brainy.skills.api import InputProvider
from brainy.skills.registry import SkillRegistry

logger = structlog.get_logger()

ModelClientFactory = Callable[[BrainySettings], ModelClient]


@dataclass
class PlaybookSession:
    """Everything mutable that belongs to one open playbook document."""

    session_id: str
    state: ExecutionStateMachine
    context: ContextStore
    variables: VariableStore = field(default_factory=VariableStore)
    highlights: ExecutionHighlights = field(default_factory=ExecutionHighlights)
    model_client: ModelClient | None = None
    last_parse: ParseResult | None = None
    last_result: ExecutionResult | None = None

    @property
    def execution_state(self) -> ExecutionState:
        return self.state.state


class SessionManager:
    """Owns one session per document id and serializes runs within a session.

    Sessions never share state: two documents can run at the same time,
    but a second run on a session that is already running is rejected.

    Example:
        manager = SessionManager(registry=create_builtin_registry())
        manager.open("notes.md")
        result = await manager.run("notes.md", text)
    """

    def __init__(
        self,
        registry: SkillRegistry | None = None,
        model_client_factory: ModelClientFactory | None = None,
        settings: BrainySettings | None = None,
        input_provider: InputProvider | None = None,
    ) -> None:
        if registry is None:
            from brainy.skills.builtin import create_builtin_registry

            registry = create_builtin_registry()

        self._settings = settings or BrainySettings()
        self._registry = registry
        self._model_client_factory = model_client_factory
        self._parser = PlaybookParser()
        self._executor = PlaybookExecutor(
            registry=registry,
            workspace_root=Path(self._settings.workspace_root) if self._settings.workspace_root else None,
            input_provider=input_provider,
        )
        self._sessions: dict[str, PlaybookSession] = {}
        self._logger = logger.bind(component="session_manager")

    @property
    def registry(self) -> SkillRegistry:
        return self._registry

    @property
    def executor(self) -> PlaybookExecutor:
        return self._executor

    def sessions(self) -> list[str]:
        return list(self._sessions.keys())

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def open(self, session_id: str) -> PlaybookSession:
        """Open a session, or return the existing one for ``session_id``."""
        session = self._sessions.get(session_id)
        if session is not None:
            return session

        model_client = None
        if self._model_client_factory is not None:
            model_client = self._model_client_factory(self._settings)

        session = PlaybookSession(
            session_id=session_id,
            state=ExecutionStateMachine(session_id),
            context=ContextStore(self._settings.default_context),
            model_client=model_client,
        )
        self._sessions[session_id] = session
        self._logger.info("session_opened", session=session_id)
        return session

    def get(self, session_id: str) -> PlaybookSession | None:
        return self._sessions.get(session_id)

    def _require(self, session_id: str) -> PlaybookSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise ExecutionError(f"No open session: {session_id}")
        return session

    def close(self, session_id: str) -> None:
        """Close a session. A run in progress is stopped at its next boundary."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return
        stopped = session.state.request_stop()
        session.highlights.clear()
        self._logger.info("session_closed", session=session_id, stopped_run=stopped)

    # -------------------------------------------------------------------------
    # Parse and run
    # -------------------------------------------------------------------------

    def parse(self, session_id: str, text: str) -> ParseResult:
        """Parse ``text`` and remember the result on the session."""
        session = self.open(session_id)
        session.last_parse = self._parser.parse(text)
        return session.last_parse

    async def run(
        self,
        session_id: str,
        text: str,
        on_progress: OnProgressCallback | None = None,
        on_error: OnErrorCallback | None = None,
        on_complete: OnCompleteCallback | None = None,
    ) -> ExecutionResult:
        """Parse and execute a playbook in a session.

        Raises:
            ExecutionConflictError: If the session is already running.
            PlaybookNotExecutableError: If the text has critical parse errors.
        """
        session = self.open(session_id)
        # Check before parsing so a rejected run leaves the session untouched
        if session.state.run_active:
            raise ExecutionConflictError(
                f"Playbook is already {session.state.state.value} for session {session_id}"
            )

        parse_result = self.parse(session_id, text)
        result = await self._executor.execute(
            session,
            parse_result,
            on_progress=on_progress,
            on_error=on_error,
            on_complete=on_complete,
        )
        session.last_result = result
        return result

    # -------------------------------------------------------------------------
    # Control
    # -------------------------------------------------------------------------

    def pause(self, session_id: str) -> None:
        self._require(session_id).state.request_pause()
        self._logger.info("execution_paused", session=session_id)

    def resume(self, session_id: str) -> None:
        self._require(session_id).state.resume()
        self._logger.info("execution_resumed", session=session_id)

    def stop(self, session_id: str) -> bool:
        """Request a stop. Returns False if the session was not running."""
        stopped = self._require(session_id).state.request_stop()
        self._logger.info("execution_stop_requested", session=session_id, was_running=stopped)
        return stopped

    def reset(self, session_id: str, clear_context: bool = False) -> None:
        """Return a stopped or failed session to idle.

        Args:
            session_id: Session to reset
            clear_context: Also drop every context and variable

        Raises:
            InvalidTransitionError: If a run is active.
            ExecutionConflictError: If a stopped run is still finishing its step.
        """
        session = self._require(session_id)
        session.state.reset()
        session.highlights.clear()
        if clear_context:
            session.context.clear()
            session.variables.clear()
        self._logger.info("session_reset", session=session_id, cleared_context=clear_context)

    def state(self, session_id: str) -> ExecutionState:
        return self._require(session_id).execution_state
