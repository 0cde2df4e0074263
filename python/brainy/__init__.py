"""
brainy - Executable markdown playbooks

This package turns annotated markdown documents into runnable playbooks:

Core Components:
    - Markdown annotation parser producing blocks and collected errors
    - Skill registry with built-in skills (context, model, task, execute, file, input)
    - Playbook executor with per-session pause, stop and highlight tracking
    - Named conversation contexts shared by the skills of a run

Submodules:
    - brainy.parser: Annotation, comment and code block parsing
    - brainy.skills: Skill contract, capability API, registry, built-ins
    - brainy.playbook: Execution state machine, executor, sessions
    - brainy.context: Context and variable stores
    - brainy.llm: Model client abstraction and provider adapters

Example:
    Run a playbook::

        from brainy import SessionManager, create_builtin_registry

        manager = SessionManager(registry=create_builtin_registry())
        result = await manager.run("notes.md", text)
        print(result.final_state)
"""

from brainy.config import BrainySettings, load_settings
from brainy.context import ContextStore, VariableStore
from brainy.exceptions import (
    BrainyError,
    ConfigError,
    ExecutionConflictError,
    ExecutionError,
    InvalidTransitionError,
    ModelClientError,
    ModelSelectionError,
    PlaybookNotExecutableError,
    SkillError,
    SkillExecutionError,
    SkillNotFoundError,
    SkillValidationError,
)
from brainy.llm import Message, ModelClient, Role, create_model_client
from brainy.parser import Block, Flag, ParserError, ParseResult, PlaybookParser, parse
from brainy.playbook import (
    ExecutionResult,
    ExecutionState,
    PlaybookExecutor,
    PlaybookSession,
    SessionManager,
)
from brainy.skills import Skill, SkillApi, SkillRegistry, SkillResult
from brainy.skills.builtin import create_builtin_registry

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Parser
    "parse",
    "PlaybookParser",
    "Block",
    "Flag",
    "ParserError",
    "ParseResult",
    # Skills
    "Skill",
    "SkillApi",
    "SkillRegistry",
    "SkillResult",
    "create_builtin_registry",
    # Execution
    "ExecutionResult",
    "ExecutionState",
    "PlaybookExecutor",
    "PlaybookSession",
    "SessionManager",
    # Context and models
    "ContextStore",
    "VariableStore",
    "Message",
    "ModelClient",
    "Role",
    "create_model_client",
    # Configuration
    "BrainySettings",
    "load_settings",
    # Errors
    "BrainyError",
    "ConfigError",
    "ExecutionConflictError",
    "ExecutionError",
    "InvalidTransitionError",
    "ModelClientError",
    "ModelSelectionError",
    "PlaybookNotExecutableError",
    "SkillError",
    "SkillExecutionError",
    "SkillNotFoundError",
    "SkillValidationError",
]
