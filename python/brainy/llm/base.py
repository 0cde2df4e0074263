"""Base classes for the model transport used by skills."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from brainy.exceptions import ModelClientError


class Role(str, Enum):
    """Message role.

    ``AGENT`` marks messages written by the playbook engine itself (narrative
    text, confirmations). It is valid in a context but never as the role of
    a model request.
    """

    USER = "user"
    ASSISTANT = "assistant"
    AGENT = "agent"


@dataclass
class Message:
    """A message in a conversation context."""

    role: Role
    content: str

    def __post_init__(self) -> None:
        # Accept plain strings from skills and callers
        if not isinstance(self.role, Role):
            self.role = Role(self.role)

    @classmethod
    def user(cls, content: str) -> Message:
        """Create a user message."""
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> Message:
        """Create an assistant message."""
        return cls(role=Role.ASSISTANT, content=content)

    @classmethod
    def agent(cls, content: str) -> Message:
        """Create an agent message."""
        return cls(role=Role.AGENT, content=content)

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass
class SendRequestOptions:
    """Per-request overrides for a model call."""

    model: str | None = None
    temperature: float | None = None
    max_tokens: int = 4096


@dataclass
class ModelReply:
    """Reply from a model request."""

    reply: str
    raw: Any = None
    model: str = ""
    usage: dict[str, int] = field(default_factory=dict)


class ModelClient(ABC):
    """Abstract model transport.

    Implementations must never fall back silently to a different model: a
    rejected selection raises :class:`brainy.exceptions.ModelSelectionError`.
    """

    def __init__(self, default_model: str | None = None) -> None:
        self._default_model = default_model
        self._selected_model = default_model

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the client name."""
        pass

    @property
    def selected_model(self) -> str | None:
        return self._selected_model

    @property
    def default_model(self) -> str | None:
        return self._default_model

    def reset_model(self) -> None:
        """Restore the model the client was created with."""
        self._selected_model = self._default_model

    @abstractmethod
    async def select_model(self, model_id: str) -> None:
        """Select the model used by subsequent requests.

        Raises:
            ModelSelectionError: If the model id is unknown or rejected.
        """
        pass

    @abstractmethod
    async def send_request(
        self,
        role: Role | str,
        content: str,
        context_messages: list[Message] | None = None,
        options: SendRequestOptions | None = None,
    ) -> ModelReply:
        """
        Send a request, with prior context, to the selected model.

        Args:
            role: Role of the new message; must be user or assistant.
            content: Message content.
            context_messages: Conversation history sent before the message.
            options: Optional per-request overrides.

        Returns:
            The model reply.
        """
        pass

    @staticmethod
    def validate_role(role: Role | str) -> Role:
        """Reject roles that cannot be sent to a model."""
        try:
            resolved = Role(role)
        except ValueError:
            raise ModelClientError(f"Unknown message role: {role}")
        if resolved == Role.AGENT:
            raise ModelClientError(
                "'agent' role is not valid for model requests. Only 'user' or 'assistant' are allowed."
            )
        return resolved

    def resolve_model(self, options: SendRequestOptions | None) -> str:
        """Pick the model for a request: per-request override, then selection."""
        model = (options.model if options else None) or self._selected_model
        if not model:
            raise ModelClientError(f"No model selected for {self.name} client")
        return model

    @staticmethod
    def to_chat_messages(
        context_messages: list[Message] | None,
        role: Role,
        content: str,
    ) -> list[dict[str, str]]:
        """Build a user/assistant chat transcript.

        Agent messages are sent as user turns since providers only accept
        user and assistant roles in the conversation.
        """
        messages: list[dict[str, str]] = []
        for message in context_messages or []:
            chat_role = Role.USER if message.role == Role.AGENT else message.role
            messages.append({"role": chat_role.value, "content": message.content})
        messages.append({"role": role.value, "content": content})
        return messages
