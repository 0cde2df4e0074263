"""Named conversation contexts for one playbook session.

A store holds any number of named message lists and tracks exactly one
selected name. Messages are only appended to the selected context.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from brainy.llm.base import Message, Role

logger = structlog.get_logger()

DEFAULT_CONTEXT = "default"


@dataclass
class Context:
    """A named, ordered list of messages."""

    name: str
    messages: list[Message] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "messages": [m.to_dict() for m in self.messages],
        }


class ContextStore:
    """Map of context name to messages, with a single selected context.

    Example:
        store = ContextStore()
        store.select("research")
        store.append(Message.user("Find prior art"))
        store.messages()  # messages of "research"
    """

    def __init__(self, default_context: str = DEFAULT_CONTEXT) -> None:
        self._contexts: dict[str, Context] = {}
        self._selected = ""
        self._default_context = default_context
        self.select(default_context)

    @property
    def selected_name(self) -> str:
        return self._selected

    @property
    def selected(self) -> Context:
        return self._contexts[self._selected]

    def select(self, name: str) -> Context:
        """Select a context, creating it if it does not exist.

        Raises:
            ValueError: If the name is empty or whitespace only.
        """
        name = name.strip() if isinstance(name, str) else ""
        if not name:
            raise ValueError("Invalid context name: empty string")

        created = name not in self._contexts
        if created:
            self._contexts[name] = Context(name=name)
        self._selected = name
        logger.debug("context_selected", context=name, created=created)
        return self._contexts[name]

    def get(self, name: str) -> Context | None:
        return self._contexts.get(name)

    def names(self) -> list[str]:
        return list(self._contexts.keys())

    def messages(self, name: str | None = None) -> list[Message]:
        """Return a copy of the messages of ``name`` or of the selected context."""
        context = self._contexts.get(name or self._selected)
        return list(context.messages) if context else []

    def append(self, message: Message) -> None:
        """Append a message to the selected context."""
        self.selected.messages.append(message)

    def add(self, role: Role | str, content: str) -> None:
        self.append(Message(role=Role(role), content=content))

    def extend(self, messages: list[Message]) -> None:
        self.selected.messages.extend(messages)

    def clear(self) -> None:
        """Drop every context and select the default one again."""
        self._contexts.clear()
        self._selected = ""
        self.select(self._default_context)

    def to_dict(self) -> dict[str, object]:
        return {
            "selected": self._selected,
            "contexts": [c.to_dict() for c in self._contexts.values()],
        }
