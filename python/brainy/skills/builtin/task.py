"""Prompt skill: send a prompt to the model and record the exchange.

Usage in playbooks::

    @task --prompt "Summarize this text"
    @task --prompt "Hello, {{userName}}!" --variable greeting
    @task --prompt "Check the context" --debug
"""

from __future__ import annotations

import json

from brainy.llm.base import Message, Role
from brainy.skills.api import SkillApi
from brainy.skills.base import (
    Skill,
    SkillParameter,
    SkillParams,
    SkillResult,
    is_valid_string,
    validate_required_string,
)

# Longest string kept per field in a --debug dump
DEBUG_TRUNCATE_LENGTH = 500


def _truncate(value: str) -> str:
    if len(value) > DEBUG_TRUNCATE_LENGTH:
        return value[:DEBUG_TRUNCATE_LENGTH] + "... [truncated]"
    return value


class TaskSkill(Skill):
    """Send a user prompt with the selected context and return the reply."""

    name = "task"
    description = (
        "Send a prompt to the model and return the response. "
        "Supports {{name}} variable substitution and --debug to dump the request instead."
    )
    params = [
        SkillParameter(name="prompt", description="Prompt text to send", required=True),
        SkillParameter(name="model", description="Model ID override for this request"),
        SkillParameter(name="variable", description="Variable name to store the response"),
        SkillParameter(name="debug", description="Dump the request as JSON instead of calling the model"),
    ]

    async def execute(self, api: SkillApi, params: SkillParams) -> SkillResult:
        prompt = validate_required_string(params.get("prompt"), "prompt")
        model = params.get("model") or None
        variable = params.get("variable")

        processed_prompt = api.substitute_variables(prompt)

        if "debug" in params:
            context = api.get_context()
            dump = json.dumps(
                {
                    "prompt": _truncate(processed_prompt),
                    "model": model,
                    "context": [
                        {"role": m.role.value, "content": _truncate(m.content)} for m in context
                    ],
                },
                indent=2,
            )
            return SkillResult(
                messages=[
                    Message.user(dump),
                    Message.agent(f"Debug mode: dumped context with {len(context)} messages"),
                ]
            )

        reply = await api.send_request(Role.USER, processed_prompt, model=model)

        if is_valid_string(variable):
            api.set_variable(variable.strip(), reply.reply)

        return SkillResult(
            messages=[
                Message.user(processed_prompt),
                Message.assistant(reply.reply),
            ]
        )
