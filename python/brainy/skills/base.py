"""Skill contract shared by every handler.

A skill is invoked by an annotation of the same name. It receives a
:class:`brainy.skills.api.SkillApi` and the annotation flags as a string
mapping, and returns a :class:`SkillResult`. Failures are raised as
exceptions with a readable message.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from brainy.exceptions import SkillValidationError
from brainy.llm.base import Message

if TYPE_CHECKING:
    from brainy.skills.api import SkillApi

SkillParams = dict[str, str]


@dataclass
class SkillParameter:
    """Metadata for one parameter a skill accepts via flags."""

    name: str
    description: str
    required: bool = False


@dataclass
class SkillResult:
    """Messages produced by a skill, in order.

    The executor appends them to the selected context; skills never write
    the context themselves.
    """

    messages: list[Message] = field(default_factory=list)

    @classmethod
    def empty(cls) -> SkillResult:
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return {"messages": [m.to_dict() for m in self.messages]}


class Skill(ABC):
    """Base class for skills."""

    name: str = ""
    description: str = ""
    params: list[SkillParameter] = []

    @abstractmethod
    async def execute(self, api: SkillApi, params: SkillParams) -> SkillResult:
        """Run the skill.

        Args:
            api: Capability surface for the current step
            params: Flag values keyed by flag name

        Returns:
            SkillResult with the messages to record
        """
        ...

    @property
    def consumes_next_block(self) -> bool:
        """Whether the block after this annotation is the skill's input payload."""
        return False

    def required_params(self) -> list[str]:
        return [p.name for p in self.params if p.required]

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "params": [
                {"name": p.name, "description": p.description, "required": p.required}
                for p in self.params
            ],
        }


# =============================================================================
# Parameter validation helpers
# =============================================================================


def is_valid_string(value: object) -> bool:
    """Check for a non-empty, non-whitespace string."""
    return isinstance(value, str) and value.strip() != ""


def validate_required_string(value: object, param_name: str) -> str:
    """Return ``value`` if it is a non-empty string.

    Raises:
        SkillValidationError: If the value is missing or blank.
    """
    if not is_valid_string(value):
        raise SkillValidationError(
            f"Missing or invalid {param_name}. Provide a non-empty {param_name}."
        )
    return value  # type: ignore[return-value]
