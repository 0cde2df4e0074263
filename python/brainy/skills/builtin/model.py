"""Model selection skill.

Usage in playbooks::

    @model --id "gpt-4.1"
"""

from __future__ import annotations

from brainy.llm.base import Message
from brainy.skills.api import SkillApi
from brainy.skills.base import (
    Skill,
    SkillParameter,
    SkillParams,
    SkillResult,
    validate_required_string,
)


class ModelSkill(Skill):
    """Set the model used by subsequent requests.

    A rejected model id fails the step; there is no fallback model.
    """

    name = "model"
    description = "Set the active model for subsequent requests."
    params = [
        SkillParameter(name="id", description="Model ID to select (e.g., gpt-4.1)", required=True),
    ]

    async def execute(self, api: SkillApi, params: SkillParams) -> SkillResult:
        model_id = validate_required_string(params.get("id"), "model id").strip()

        await api.select_model(model_id)

        return SkillResult(messages=[Message.agent(f"Model set to: {model_id}")])
