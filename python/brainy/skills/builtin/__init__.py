"""Built-in skills that ship with Brainy."""

from brainy.skills.builtin.context import ContextSkill
from brainy.skills.builtin.execute import ExecuteSkill
from brainy.skills.builtin.file import FileSkill
from brainy.skills.builtin.input import InputSkill
from brainy.skills.builtin.model import ModelSkill
from brainy.skills.builtin.task import TaskSkill
from brainy.skills.registry import SkillRegistry


def create_builtin_registry(execute_timeout_seconds: float | None = None) -> SkillRegistry:
    """Create a registry holding every built-in skill."""
    registry = SkillRegistry()
    registry.register(ContextSkill())
    registry.register(ModelSkill())
    registry.register(TaskSkill())
    registry.register(ExecuteSkill(timeout_seconds=execute_timeout_seconds))
    registry.register(FileSkill())
    registry.register(InputSkill())
    return registry


__all__ = [
    "ContextSkill",
    "ExecuteSkill",
    "FileSkill",
    "InputSkill",
    "ModelSkill",
    "TaskSkill",
    "create_builtin_registry",
]
