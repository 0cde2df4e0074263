"""Playbook executor: runs parsed blocks top to bottom.

This module provides:
- Sequential dispatch of annotation blocks to skills
- Automatic recording of skill messages into the selected context
- Cooperative pause and stop at step boundaries
- Halt on the first failing step
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from brainy.exceptions import PlaybookNotExecutableError
from brainy.llm.base import Message
from brainy.parser.models import PLAIN_CODE_BLOCK, PLAIN_TEXT, Block, ParseResult, adjacent_block
from brainy.playbook.state import ExecutionState
from brainy.skills.api import InputProvider, SkillApi
from brainy.skills.base import SkillResult
from brainy.skills.registry import SkillRegistry

if TYPE_CHECKING:
    from brainy.playbook.session import PlaybookSession

logger = structlog.get_logger()

OnProgressCallback = Callable[[int, Block, "SkillResult | None"], None]
OnErrorCallback = Callable[[int, Block, Exception], None]
OnCompleteCallback = Callable[[], None]


# =============================================================================
# Execution Results
# =============================================================================


@dataclass
class StepResult:
    """Result of dispatching one annotation block."""

    index: int
    name: str
    line: int
    success: bool
    messages: list[Message] = field(default_factory=list)
    error: str | None = None
    execution_time_ms: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "index": self.index,
            "name": self.name,
            "line": self.line,
            "success": self.success,
            "messages": [m.to_dict() for m in self.messages],
            "error": self.error,
            "execution_time_ms": self.execution_time_ms,
        }


@dataclass
class _StepOutcome(StepResult):
    """StepResult plus the raised exception, kept out of serialization."""

    exception: Exception | None = None


@dataclass
class ExecutionResult:
    """Result of one playbook run."""

    success: bool
    final_state: ExecutionState
    steps_executed: int = 0
    total_blocks: int = 0
    step_results: list[StepResult] = field(default_factory=list)
    stopped: bool = False
    failed_line: int | None = None
    error: str | None = None
    execution_time_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "success": self.success,
            "final_state": self.final_state.value,
            "steps_executed": self.steps_executed,
            "total_blocks": self.total_blocks,
            "step_results": [s.to_dict() for s in self.step_results],
            "stopped": self.stopped,
            "failed_line": self.failed_line,
            "error": self.error,
            "execution_time_seconds": self.execution_time_seconds,
        }


# =============================================================================
# Playbook Executor
# =============================================================================


class PlaybookExecutor:
    """Executor for parsed playbooks.

    The executor holds no per-run state; everything mutable lives on the
    :class:`~brainy.playbook.session.PlaybookSession` it is given.

    Example:
        executor = PlaybookExecutor(registry=create_builtin_registry())
        result = await executor.execute(session, parse(text))
        if not result.success:
            print(f"Failed at line {result.failed_line}: {result.error}")
    """

    def __init__(
        self,
        registry: SkillRegistry,
        workspace_root: Path | None = None,
        input_provider: InputProvider | None = None,
        step_delay_seconds: float = 0.0,
    ) -> None:
        """Initialize the playbook executor.

        Args:
            registry: Skills resolved by annotation name
            workspace_root: Working directory handed to skills
            input_provider: Host callback used by skills that ask for input
            step_delay_seconds: Pause after each dispatched step, for host feedback
        """
        self._registry = registry
        self._workspace_root = workspace_root or Path.cwd()
        self._input_provider = input_provider
        self._step_delay_seconds = step_delay_seconds
        self._logger = logger.bind(component="playbook_executor")

    @property
    def registry(self) -> SkillRegistry:
        return self._registry

    async def execute(
        self,
        session: PlaybookSession,
        playbook: ParseResult | list[Block],
        on_progress: OnProgressCallback | None = None,
        on_error: OnErrorCallback | None = None,
        on_complete: OnCompleteCallback | None = None,
    ) -> ExecutionResult:
        """Run every block of a playbook in document order.

        Args:
            session: Session that owns state, context and variables
            playbook: Parse result (checked for critical errors) or a block list
            on_progress: Called after each block with the skill result, if any
            on_error: Called with the failing block and exception
            on_complete: Called after the last block when nothing failed

        Returns:
            ExecutionResult describing the run

        Raises:
            PlaybookNotExecutableError: If the parse produced critical errors.
            ExecutionConflictError: If the session already has an active run.
            InvalidTransitionError: If the session needs a reset first.
        """
        if isinstance(playbook, ParseResult):
            if not playbook.is_executable:
                raise PlaybookNotExecutableError(
                    "Playbook has critical parse errors",
                    details=[f"line {e.line}: {e.message}" for e in playbook.critical_errors],
                )
            blocks = playbook.blocks
        else:
            blocks = list(playbook)

        state = session.state
        state.start()
        # Every run starts from the client's default model
        if session.model_client is not None:
            session.model_client.reset_model()

        start_time = time.time()
        step_results: list[StepResult] = []
        log = self._logger.bind(session=session.session_id)
        log.info("playbook_execution_start", total_blocks=len(blocks))

        def build_result(success: bool, **kwargs: Any) -> ExecutionResult:
            return ExecutionResult(
                success=success,
                final_state=state.state,
                steps_executed=len(step_results),
                total_blocks=len(blocks),
                step_results=step_results,
                execution_time_seconds=time.time() - start_time,
                **kwargs,
            )

        try:
            for index, block in enumerate(blocks):
                if not await state.wait_at_boundary():
                    log.info("playbook_execution_stopped", index=index, line=block.line)
                    session.highlights.clear()
                    state.complete_stop()
                    return build_result(False, stopped=True)

                if not block.is_annotation:
                    self._record_plain_block(session, blocks, index)
                    if on_progress:
                        on_progress(index, block, None)
                    continue

                step = await self._execute_step(session, blocks, index)
                step_results.append(step)

                if not step.success:
                    session.highlights.mark_failed(block.line)
                    state.fail()
                    log.error(
                        "playbook_execution_failed",
                        skill=block.name,
                        line=block.line,
                        error=step.error,
                    )
                    if on_error and step.exception is not None:
                        on_error(index, block, step.exception)
                    return build_result(False, failed_line=block.line, error=step.error)

                if on_progress:
                    on_progress(index, block, SkillResult(messages=list(step.messages)))

                if self._step_delay_seconds > 0:
                    await asyncio.sleep(self._step_delay_seconds)

            # A stop requested during the last step still ends as a stop
            if state.stop_requested:
                session.highlights.clear()
                state.complete_stop()
                log.info("playbook_execution_stopped", index=len(blocks))
                return build_result(False, stopped=True)

            session.highlights.clear()
            state.finish()

        except asyncio.CancelledError:
            log.warning("playbook_execution_cancelled")
            session.highlights.clear()
            if state.is_active:
                state.request_stop()
            if state.stop_requested:
                state.complete_stop()
            raise

        log.info(
            "playbook_execution_complete",
            steps_executed=len(step_results),
            execution_time_seconds=time.time() - start_time,
        )
        if on_complete:
            on_complete()
        return build_result(True)

    def _record_plain_block(self, session: PlaybookSession, blocks: list[Block], index: int) -> None:
        """Add narrative text and code to the selected context as agent messages.

        Comments are never recorded, blank text runs are skipped, and a code
        block that is the input payload of the preceding skill is not recorded.
        """
        block = blocks[index]

        if block.name == PLAIN_TEXT:
            if block.content.strip():
                session.context.append(Message.agent(block.content))
            return

        if block.name == PLAIN_CODE_BLOCK:
            if self._is_consumed_by_previous(blocks, index):
                self._logger.debug("code_block_consumed", line=block.line)
                return
            session.context.append(Message.agent(block.content))

    def _is_consumed_by_previous(self, blocks: list[Block], index: int) -> bool:
        previous = adjacent_block(blocks, index, step=-1)
        if previous is None or not previous.is_annotation:
            return False
        skill = self._registry.get(previous.name)
        return skill is not None and skill.consumes_next_block

    async def _execute_step(
        self,
        session: PlaybookSession,
        blocks: list[Block],
        index: int,
    ) -> _StepOutcome:
        """Dispatch one annotation block and record its messages.

        A failed step keeps the messages it queued before raising but has no
        result messages.
        """
        block = blocks[index]
        start_time = time.time()
        session.highlights.mark_current(block.line)

        api = SkillApi(
            context=session.context,
            variables=session.variables,
            model_client=session.model_client,
            blocks=blocks,
            current_index=index,
            workspace_root=self._workspace_root,
            input_provider=self._input_provider,
        )

        self._logger.debug("step_execution_start", skill=block.name, line=block.line)

        try:
            result = await self._registry.dispatch(block.name, api, block.to_params())
        except Exception as e:
            execution_time_ms = int((time.time() - start_time) * 1000)
            # Messages queued before the failure are kept
            queued = api.pending_messages
            session.context.extend(queued)
            self._logger.error(
                "step_execution_error",
                skill=block.name,
                line=block.line,
                error=str(e),
                execution_time_ms=execution_time_ms,
            )
            return _StepOutcome(
                index=index,
                name=block.name,
                line=block.line,
                success=False,
                messages=queued,
                error=str(e),
                execution_time_ms=execution_time_ms,
                exception=e,
            )

        messages = api.pending_messages + list(result.messages)
        session.context.extend(messages)

        execution_time_ms = int((time.time() - start_time) * 1000)
        self._logger.info(
            "step_execution_success",
            skill=block.name,
            line=block.line,
            message_count=len(messages),
            execution_time_ms=execution_time_ms,
        )

        return _StepOutcome(
            index=index,
            name=block.name,
            line=block.line,
            success=True,
            messages=messages,
            execution_time_ms=execution_time_ms,
        )
