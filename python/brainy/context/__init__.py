"""Conversation context storage."""

from brainy.context.store import DEFAULT_CONTEXT, Context, ContextStore
from brainy.context.variables import VariableStore

__all__ = [
    "Context",
    "ContextStore",
    "DEFAULT_CONTEXT",
    "VariableStore",
]
