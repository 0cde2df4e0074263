"""Input skill: ask the host for a value and store it in a variable.

Usage in playbooks::

    @input --prompt "Enter your name" --variable userName
"""

from __future__ import annotations

from brainy.skills.api import SkillApi
from brainy.skills.base import (
    Skill,
    SkillParameter,
    SkillParams,
    SkillResult,
    validate_required_string,
)


class InputSkill(Skill):
    """Prompt the user and store the answer. Produces no context messages."""

    name = "input"
    description = "Prompt the user for input and store it in a variable."
    params = [
        SkillParameter(name="prompt", description="Prompt text shown to the user", required=True),
        SkillParameter(name="variable", description="Variable name to store the input", required=True),
    ]

    async def execute(self, api: SkillApi, params: SkillParams) -> SkillResult:
        prompt = validate_required_string(params.get("prompt"), "prompt")
        variable = validate_required_string(params.get("variable"), "variable name")

        value = await api.prompt_input(prompt)
        api.set_variable(variable.strip(), value)

        return SkillResult.empty()
