"""Capability surface handed to skills for one playbook step."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import replace
from pathlib import Path

import structlog

from brainy.context.store import ContextStore
from brainy.context.variables import VariableStore
from brainy.exceptions import SkillExecutionError
from brainy.llm.base import Message, ModelClient, ModelReply, Role, SendRequestOptions
from brainy.parser.models import Block, adjacent_block

logger = structlog.get_logger()

InputProvider = Callable[[str], Awaitable[str]]


class SkillApi:
    """What a skill may see and do while it runs.

    Skills read the selected context but do not write it. Messages queued
    with :meth:`add_to_context` are recorded by the executor when the step
    ends, ahead of the messages in the skill's result. A failing step keeps
    its queued messages.
    """

    def __init__(
        self,
        *,
        context: ContextStore,
        variables: VariableStore,
        model_client: ModelClient | None = None,
        blocks: list[Block] | None = None,
        current_index: int = 0,
        workspace_root: Path | None = None,
        input_provider: InputProvider | None = None,
    ) -> None:
        self._context = context
        self._variables = variables
        self._model_client = model_client
        self._blocks = list(blocks or [])
        self._current_index = current_index
        self._workspace_root = workspace_root or Path.cwd()
        self._input_provider = input_provider
        self._pending: list[Message] = []

    # -------------------------------------------------------------------------
    # Context
    # -------------------------------------------------------------------------

    def get_context(self) -> list[Message]:
        """Messages of the selected context, oldest first."""
        return self._context.messages()

    @property
    def selected_context(self) -> str:
        return self._context.selected_name

    def select_context(self, name: str) -> None:
        """Switch the selected context, creating it when needed."""
        try:
            self._context.select(name)
        except ValueError as e:
            raise SkillExecutionError(str(e))

    def add_to_context(self, role: Role | str, content: str) -> None:
        """Queue a message for the selected context."""
        self._pending.append(Message(role=Role(role), content=content))

    @property
    def pending_messages(self) -> list[Message]:
        return list(self._pending)

    # -------------------------------------------------------------------------
    # Model
    # -------------------------------------------------------------------------

    @property
    def model_client(self) -> ModelClient:
        if self._model_client is None:
            raise SkillExecutionError("No model client configured for this session")
        return self._model_client

    async def select_model(self, model_id: str) -> None:
        await self.model_client.select_model(model_id)

    async def send_request(
        self,
        role: Role | str,
        content: str,
        model: str | None = None,
        options: SendRequestOptions | None = None,
    ) -> ModelReply:
        """Send a message to the model with the selected context as history."""
        options = options or SendRequestOptions()
        if model:
            options = replace(options, model=model)
        return await self.model_client.send_request(
            role,
            content,
            context_messages=self.get_context(),
            options=options,
        )

    # -------------------------------------------------------------------------
    # Playbook
    # -------------------------------------------------------------------------

    def get_parsed_blocks(self) -> list[Block]:
        return list(self._blocks)

    def get_current_block_index(self) -> int:
        return self._current_index

    @property
    def current_block(self) -> Block | None:
        if 0 <= self._current_index < len(self._blocks):
            return self._blocks[self._current_index]
        return None

    @property
    def next_block(self) -> Block | None:
        """The block after the current one, skipping blank text runs."""
        return adjacent_block(self._blocks, self._current_index)

    # -------------------------------------------------------------------------
    # Variables and host
    # -------------------------------------------------------------------------

    def set_variable(self, name: str, value: str) -> None:
        self._variables.set(name, value)

    def get_variable(self, name: str) -> str | None:
        return self._variables.get(name)

    def substitute_variables(self, text: str, preserve_unknown: bool = False) -> str:
        return self._variables.substitute(text, preserve_unknown=preserve_unknown)

    @property
    def workspace_root(self) -> Path:
        return self._workspace_root

    async def prompt_input(self, prompt: str) -> str:
        """Ask the host for a value.

        Raises:
            SkillExecutionError: If no input provider is available or the
                user cancelled.
        """
        if self._input_provider is None:
            raise SkillExecutionError("No input provider available for this session")
        value = await self._input_provider(prompt)
        if value is None:
            raise SkillExecutionError("User cancelled input")
        return value
