"""Pytest configuration for brainy tests."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from brainy.context.store import ContextStore
from brainy.context.variables import VariableStore
from brainy.exceptions import SkillExecutionError
from brainy.llm.base import Message
from brainy.llm.echo_client import EchoModelClient
from brainy.parser.models import Block
from brainy.skills.api import SkillApi
from brainy.skills.base import Skill, SkillParameter, SkillParams, SkillResult
from brainy.skills.builtin import create_builtin_registry
from brainy.skills.registry import SkillRegistry


def pytest_configure(config):
    """Configure custom markers for pytest."""
    config.addinivalue_line(
        "markers",
        "subprocess: marks tests that spawn interpreters (deselect with '-m \"not subprocess\"')",
    )
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow-running (deselect with '-m \"not slow\"')",
    )


# =============================================================================
# Test Skills
# =============================================================================


class RecordingSkill(Skill):
    """Records every call and replies with an agent message echoing ``--msg``."""

    name = "record"
    description = "Record the call and echo --msg"
    params = [SkillParameter(name="msg", description="Message to echo")]

    def __init__(self) -> None:
        self.calls: list[SkillParams] = []

    async def execute(self, api: SkillApi, params: SkillParams) -> SkillResult:
        self.calls.append(dict(params))
        return SkillResult(messages=[Message.agent(params.get("msg", "ok"))])


class FailingSkill(Skill):
    """Always raises."""

    name = "fail"
    description = "Always fails"

    async def execute(self, api: SkillApi, params: SkillParams) -> SkillResult:
        raise SkillExecutionError(params.get("reason", "boom"))


class GatedSkill(Skill):
    """Blocks until ``release`` is set, then replies.

    ``started`` is set as soon as the skill begins, so a test can act while
    the step is in flight.
    """

    name = "gate"
    description = "Wait for the test to release the step"

    def __init__(self) -> None:
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.calls = 0

    async def execute(self, api: SkillApi, params: SkillParams) -> SkillResult:
        self.calls += 1
        self.started.set()
        await self.release.wait()
        return SkillResult(messages=[Message.agent("gate passed")])


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def echo_client() -> EchoModelClient:
    """Offline model client."""
    return EchoModelClient(model="echo-model")


@pytest.fixture
def context_store() -> ContextStore:
    return ContextStore()


@pytest.fixture
def variables() -> VariableStore:
    return VariableStore()


@pytest.fixture
def make_api(context_store: ContextStore, variables: VariableStore, echo_client: EchoModelClient, tmp_path: Path):
    """Factory for a SkillApi over the shared stores."""

    def _make(
        blocks: list[Block] | None = None,
        current_index: int = 0,
        input_provider=None,
        model_client=echo_client,
    ) -> SkillApi:
        return SkillApi(
            context=context_store,
            variables=variables,
            model_client=model_client,
            blocks=blocks,
            current_index=current_index,
            workspace_root=tmp_path,
            input_provider=input_provider,
        )

    return _make


@pytest.fixture
def recording_skill() -> RecordingSkill:
    return RecordingSkill()


@pytest.fixture
def gated_skill() -> GatedSkill:
    return GatedSkill()


@pytest.fixture
def registry(recording_skill: RecordingSkill, gated_skill: GatedSkill) -> SkillRegistry:
    """Built-in skills plus the test skills."""
    registry = create_builtin_registry()
    registry.register(recording_skill)
    registry.register(FailingSkill())
    registry.register(gated_skill)
    return registry
