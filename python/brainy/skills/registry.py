"""Skill registry and dispatch."""

from __future__ import annotations

from typing import Any

import structlog

from brainy.exceptions import SkillExecutionError, SkillNotFoundError, SkillValidationError
from brainy.skills.api import SkillApi
from brainy.skills.base import Skill, SkillParams, SkillResult

logger = structlog.get_logger()


class SkillRegistry:
    """Registry of skills, resolved by exact, case-sensitive name."""

    def __init__(self) -> None:
        self._skills: dict[str, Skill] = {}

    def register(self, skill: Skill, name: str | None = None) -> None:
        """Register a skill under ``name`` or its own name.

        A later registration under the same name replaces the earlier one.
        """
        key = name or skill.name
        if not key:
            raise ValueError("Skill must have a non-empty name")
        logger.debug("skill_registered", name=key)
        self._skills[key] = skill

    def unregister(self, name: str) -> None:
        self._skills.pop(name, None)

    def get(self, name: str) -> Skill | None:
        """Get a skill by name."""
        return self._skills.get(name)

    def has(self, name: str) -> bool:
        return name in self._skills

    def list_skills(self) -> list[str]:
        """List all registered skill names."""
        return list(self._skills.keys())

    def describe(self) -> list[dict[str, Any]]:
        return [skill.describe() for skill in self._skills.values()]

    async def dispatch(self, name: str, api: SkillApi, params: SkillParams) -> SkillResult:
        """Execute a skill by name.

        Args:
            name: Annotation name
            api: Capability surface for this step
            params: Flag values keyed by flag name

        Returns:
            The skill result.

        Raises:
            SkillNotFoundError: If no skill has this name.
            SkillValidationError: If a required parameter is missing.
            SkillExecutionError: If the skill returns something other than a SkillResult.
        """
        skill = self._skills.get(name)
        if skill is None:
            raise SkillNotFoundError(name, self.list_skills())

        missing = [p for p in skill.required_params() if p not in params]
        if missing:
            raise SkillValidationError(
                f"Missing required parameter(s) for @{name}: {', '.join(missing)}",
                details=missing,
            )

        logger.debug("skill_dispatch", name=name, param_keys=list(params.keys()))
        result = await skill.execute(api, params)

        if result is None:
            return SkillResult.empty()
        if not isinstance(result, SkillResult):
            raise SkillExecutionError(
                f"Skill '{name}' returned {type(result).__name__}, expected SkillResult"
            )
        return result
