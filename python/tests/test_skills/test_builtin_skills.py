"""Tests for the built-in skills."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from brainy.exceptions import ModelSelectionError, SkillExecutionError, SkillValidationError
from brainy.llm.base import Message, Role
from brainy.llm.echo_client import EchoModelClient
from brainy.parser import parse
from brainy.skills.builtin import (
    ContextSkill,
    ExecuteSkill,
    FileSkill,
    InputSkill,
    ModelSkill,
    TaskSkill,
    create_builtin_registry,
)


def test_builtin_registry_contents() -> None:
    registry = create_builtin_registry()

    assert sorted(registry.list_skills()) == ["context", "execute", "file", "input", "model", "task"]
    assert registry.get("execute").consumes_next_block
    assert not registry.get("task").consumes_next_block


# =============================================================================
# ContextSkill Tests
# =============================================================================


class TestContextSkill:
    """Tests for @context."""

    @pytest.mark.asyncio
    async def test_named_flag(self, make_api, context_store) -> None:
        result = await ContextSkill().execute(make_api(), {"name": "research"})

        assert context_store.selected_name == "research"
        assert result.messages == [Message.agent("Context set to: research")]

    @pytest.mark.asyncio
    async def test_positional_value(self, make_api, context_store) -> None:
        await ContextSkill().execute(make_api(), {"": "notes"})

        assert context_store.selected_name == "notes"

    @pytest.mark.asyncio
    async def test_missing_name(self, make_api) -> None:
        with pytest.raises(SkillValidationError, match="Missing context name"):
            await ContextSkill().execute(make_api(), {})

    @pytest.mark.asyncio
    async def test_blank_name(self, make_api, context_store) -> None:
        with pytest.raises(SkillValidationError, match="empty string"):
            await ContextSkill().execute(make_api(), {"name": "  "})
        assert context_store.selected_name == "default"


# =============================================================================
# ModelSkill Tests
# =============================================================================


class TestModelSkill:
    """Tests for @model."""

    @pytest.mark.asyncio
    async def test_select_model(self, make_api, echo_client) -> None:
        result = await ModelSkill().execute(make_api(), {"id": "gpt-4.1"})

        assert echo_client.selected_model == "gpt-4.1"
        assert result.messages == [Message.agent("Model set to: gpt-4.1")]

    @pytest.mark.asyncio
    async def test_rejected_model_has_no_fallback(self, make_api) -> None:
        client = EchoModelClient(model="keep", known_models=["keep"])

        with pytest.raises(ModelSelectionError):
            await ModelSkill().execute(make_api(model_client=client), {"id": "unknown"})
        assert client.selected_model == "keep"

    @pytest.mark.asyncio
    async def test_blank_id(self, make_api) -> None:
        with pytest.raises(SkillValidationError, match="model id"):
            await ModelSkill().execute(make_api(), {"id": ""})


# =============================================================================
# TaskSkill Tests
# =============================================================================


class TestTaskSkill:
    """Tests for @task."""

    @pytest.mark.asyncio
    async def test_prompt_and_reply(self, make_api, echo_client, context_store) -> None:
        context_store.append(Message.agent("earlier"))

        result = await TaskSkill().execute(make_api(), {"prompt": "Summarize"})

        assert result.messages == [
            Message.user("Summarize"),
            Message.assistant("[echo-model] Summarize"),
        ]
        assert echo_client.requests == [(Role.USER, "Summarize", [Message.agent("earlier")])]

    @pytest.mark.asyncio
    async def test_variable_substitution_and_storage(self, make_api, variables) -> None:
        variables.set("userName", "Ada")

        result = await TaskSkill().execute(
            make_api(), {"prompt": "Hello, {{userName}}!", "variable": "greeting"}
        )

        assert result.messages[0].content == "Hello, Ada!"
        assert variables.get("greeting") == "[echo-model] Hello, Ada!"

    @pytest.mark.asyncio
    async def test_model_override(self, make_api, echo_client) -> None:
        result = await TaskSkill().execute(make_api(), {"prompt": "hi", "model": "other"})

        assert result.messages[1].content == "[other] hi"
        assert echo_client.selected_model == "echo-model"

    @pytest.mark.asyncio
    async def test_debug_dumps_without_request(self, make_api, echo_client, context_store) -> None:
        context_store.append(Message.agent("x" * 600))

        result = await TaskSkill().execute(make_api(), {"prompt": "check", "debug": ""})

        assert echo_client.requests == []
        assert result.messages[0].role == Role.USER
        dump = json.loads(result.messages[0].content)
        assert dump["prompt"] == "check"
        assert dump["context"][0]["content"].endswith("... [truncated]")
        assert len(dump["context"][0]["content"]) == 500 + len("... [truncated]")
        assert result.messages[1] == Message.agent("Debug mode: dumped context with 1 messages")

    @pytest.mark.asyncio
    async def test_missing_prompt(self, make_api) -> None:
        with pytest.raises(SkillValidationError, match="prompt"):
            await TaskSkill().execute(make_api(), {"prompt": " "})

    @pytest.mark.asyncio
    async def test_model_failure_propagates(self, make_api) -> None:
        client = EchoModelClient()
        client.send_request = AsyncMock(side_effect=ModelSelectionError("down"))

        with pytest.raises(ModelSelectionError):
            await TaskSkill().execute(make_api(model_client=client), {"prompt": "hi"})


# =============================================================================
# ExecuteSkill Tests
# =============================================================================


class TestExecuteSkill:
    """Tests for @execute."""

    @pytest.mark.asyncio
    async def test_no_following_block(self, make_api) -> None:
        blocks = parse("@execute").blocks

        with pytest.raises(SkillExecutionError, match="No code block found"):
            await ExecuteSkill().execute(make_api(blocks=blocks), {})

    @pytest.mark.asyncio
    async def test_following_block_not_code(self, make_api) -> None:
        blocks = parse("@execute\ntext").blocks

        with pytest.raises(SkillExecutionError, match="not a code block"):
            await ExecuteSkill().execute(make_api(blocks=blocks), {})

    @pytest.mark.asyncio
    async def test_missing_language(self, make_api) -> None:
        blocks = parse("@execute\n```\nls\n```").blocks

        with pytest.raises(SkillExecutionError, match="missing language"):
            await ExecuteSkill().execute(make_api(blocks=blocks), {})

    @pytest.mark.asyncio
    async def test_empty_code(self, make_api) -> None:
        blocks = parse("@execute\n```bash\n\n```").blocks

        with pytest.raises(SkillExecutionError, match="empty"):
            await ExecuteSkill().execute(make_api(blocks=blocks), {})

    @pytest.mark.asyncio
    async def test_unsupported_language(self, make_api) -> None:
        blocks = parse("@execute\n```cobol\nDISPLAY 'HI'.\n```").blocks

        with pytest.raises(SkillExecutionError, match="Unsupported language: cobol"):
            await ExecuteSkill().execute(make_api(blocks=blocks), {})

    @pytest.mark.subprocess
    @pytest.mark.asyncio
    async def test_runs_python(self, make_api, variables, tmp_path: Path) -> None:
        blocks = parse("@execute\n```python\nimport os\nprint(os.getcwd())\n```").blocks

        result = await ExecuteSkill().execute(make_api(blocks=blocks), {"variable": "cwd"})

        assert result.messages == [Message.assistant(str(tmp_path))]
        assert variables.get("cwd") == str(tmp_path)

    @pytest.mark.subprocess
    @pytest.mark.asyncio
    async def test_blank_line_before_fence(self, make_api) -> None:
        blocks = parse("@execute\n\n```python\nprint('hi')\n```\n").blocks
        assert [b.name for b in blocks] == ["execute", "plainText", "plainCodeBlock"]

        result = await ExecuteSkill().execute(make_api(blocks=blocks), {})

        assert result.messages == [Message.assistant("hi")]

    @pytest.mark.subprocess
    @pytest.mark.asyncio
    async def test_non_zero_exit_fails(self, make_api) -> None:
        code = "import sys\nprint('bad things')\nsys.exit(3)"
        blocks = parse(f"@execute\n```python3\n{code}\n```").blocks

        with pytest.raises(SkillExecutionError, match="exit code 3: bad things"):
            await ExecuteSkill().execute(make_api(blocks=blocks), {})

    @pytest.mark.subprocess
    @pytest.mark.asyncio
    async def test_timeout(self, make_api) -> None:
        blocks = parse("@execute\n```python\nimport time\ntime.sleep(10)\n```").blocks

        with pytest.raises(SkillExecutionError, match="timed out"):
            await ExecuteSkill(timeout_seconds=0.5).execute(make_api(blocks=blocks), {})


# =============================================================================
# FileSkill Tests
# =============================================================================


class TestFileSkill:
    """Tests for @file."""

    @pytest.mark.asyncio
    async def test_write_read_delete(self, make_api, tmp_path: Path) -> None:
        skill = FileSkill()
        api = make_api()

        written = await skill.execute(
            api, {"action": "write", "path": "out/notes.txt", "content": "hello world"}
        )
        assert (tmp_path / "out" / "notes.txt").read_text() == "hello world"
        assert written.messages[0].content.startswith("File written successfully")

        read = await skill.execute(api, {"action": "read", "path": "out/notes.txt"})
        assert read.messages == [Message.agent("hello world")]

        await skill.execute(api, {"action": "delete", "path": "out/notes.txt"})
        assert not (tmp_path / "out" / "notes.txt").exists()

    @pytest.mark.asyncio
    async def test_invalid_action(self, make_api) -> None:
        with pytest.raises(SkillValidationError, match="Invalid action: move"):
            await FileSkill().execute(make_api(), {"action": "move", "path": "a"})

    @pytest.mark.asyncio
    async def test_write_requires_content(self, make_api) -> None:
        with pytest.raises(SkillValidationError, match="content"):
            await FileSkill().execute(make_api(), {"action": "write", "path": "a"})

    @pytest.mark.asyncio
    async def test_read_missing_file(self, make_api) -> None:
        with pytest.raises(SkillExecutionError, match="Failed to read file"):
            await FileSkill().execute(make_api(), {"action": "read", "path": "missing.txt"})


# =============================================================================
# InputSkill Tests
# =============================================================================


class TestInputSkill:
    """Tests for @input."""

    @pytest.mark.asyncio
    async def test_stores_answer(self, make_api, variables) -> None:
        provider = AsyncMock(return_value="Ada")

        result = await InputSkill().execute(
            make_api(input_provider=provider), {"prompt": "Your name", "variable": "userName"}
        )

        assert result.messages == []
        assert variables.get("userName") == "Ada"
        provider.assert_awaited_once_with("Your name")

    @pytest.mark.asyncio
    async def test_missing_variable(self, make_api) -> None:
        with pytest.raises(SkillValidationError, match="variable name"):
            await InputSkill().execute(make_api(), {"prompt": "x", "variable": ""})
