"""Context selection skill.

Usage in playbooks::

    @context --name "research"
    @context research
"""

from __future__ import annotations

from brainy.exceptions import SkillValidationError
from brainy.llm.base import Message
from brainy.skills.api import SkillApi
from brainy.skills.base import Skill, SkillParameter, SkillParams, SkillResult, is_valid_string


class ContextSkill(Skill):
    """Select a named context, creating it if needed."""

    name = "context"
    description = "Select the agent context that receives subsequent messages."
    params = [
        SkillParameter(name="name", description="Context name to select", required=False),
    ]

    async def execute(self, api: SkillApi, params: SkillParams) -> SkillResult:
        name = params.get("name")
        if name is None:
            # Positional form: @context research
            name = params.get("")

        if name is None:
            raise SkillValidationError("Missing context name")
        if not is_valid_string(name):
            raise SkillValidationError("Invalid context name: empty string")

        api.select_context(name.strip())

        return SkillResult(messages=[Message.agent(f"Context set to: {name.strip()}")])
