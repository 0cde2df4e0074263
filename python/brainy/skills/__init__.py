"""Skill contract, capability API and registry."""

from brainy.skills.api import InputProvider, SkillApi
from brainy.skills.base import (
    Skill,
    SkillParameter,
    SkillParams,
    SkillResult,
    is_valid_string,
    validate_required_string,
)
from brainy.skills.registry import SkillRegistry

__all__ = [
    "InputProvider",
    "Skill",
    "SkillApi",
    "SkillParameter",
    "SkillParams",
    "SkillRegistry",
    "SkillResult",
    "is_valid_string",
    "validate_required_string",
]
