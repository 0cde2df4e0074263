"""Code execution skill: runs the fenced code block after the annotation.

Usage in playbooks::

    @execute --variable listing

    ```bash
    ls -la
    ```

The code block is the skill's input payload. It is not recorded in the
context; the combined stdout and stderr of the run is.
"""

from __future__ import annotations

import asyncio
import os
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path

import structlog

from brainy.exceptions import SkillExecutionError
from brainy.llm.base import Message
from brainy.parser.models import PLAIN_CODE_BLOCK
from brainy.skills.api import SkillApi
from brainy.skills.base import Skill, SkillParameter, SkillParams, SkillResult, is_valid_string

logger = structlog.get_logger()


@dataclass(frozen=True)
class LanguageRunner:
    """Interpreter command and temp file suffix for a fence language."""

    command: str
    suffix: str


LANGUAGE_RUNNERS: dict[str, LanguageRunner] = {
    "bash": LanguageRunner(command="bash", suffix=".sh"),
    "sh": LanguageRunner(command="sh", suffix=".sh"),
    "python": LanguageRunner(command=sys.executable, suffix=".py"),
    "python3": LanguageRunner(command=sys.executable, suffix=".py"),
    "javascript": LanguageRunner(command="node", suffix=".js"),
    "js": LanguageRunner(command="node", suffix=".js"),
}


@dataclass
class CodeRunOutput:
    output: str
    exit_code: int


class ExecuteSkill(Skill):
    """Execute the next code block and return its output."""

    name = "execute"
    description = "Execute the code block following the annotation and return its output."
    params = [
        SkillParameter(name="variable", description="Variable name to store the execution output"),
    ]

    def __init__(self, timeout_seconds: float | None = None) -> None:
        self.timeout_seconds = timeout_seconds

    @property
    def consumes_next_block(self) -> bool:
        return True

    async def execute(self, api: SkillApi, params: SkillParams) -> SkillResult:
        block = api.next_block
        if block is None:
            raise SkillExecutionError(
                "No code block found after execute skill. Ensure a code block "
                "immediately follows the @execute annotation."
            )
        if block.name != PLAIN_CODE_BLOCK:
            raise SkillExecutionError(
                f"Next block is not a code block. Found: {block.name}. Ensure a code block "
                "(enclosed in triple backticks) follows the @execute annotation."
            )

        language = block.language
        if not language:
            raise SkillExecutionError(
                "Code block is missing language metadata. Specify a language after the "
                "opening backticks (e.g., ```bash)."
            )
        if not block.content.strip():
            raise SkillExecutionError("Code block is empty. Provide code to execute.")

        runner = LANGUAGE_RUNNERS.get(language.lower())
        if runner is None:
            supported = ", ".join(LANGUAGE_RUNNERS.keys())
            raise SkillExecutionError(
                f"Unsupported language: {language}. Supported languages: {supported}"
            )

        result = await self._run(block.content, runner, api.workspace_root)
        if result.exit_code != 0:
            raise SkillExecutionError(
                f"Code execution failed with exit code {result.exit_code}: {result.output.strip()}"
            )

        output = result.output.strip()
        variable = params.get("variable")
        if is_valid_string(variable):
            api.set_variable(variable.strip(), output)

        messages = [Message.assistant(output)] if output else []
        return SkillResult(messages=messages)

    async def _run(self, code: str, runner: LanguageRunner, cwd: Path) -> CodeRunOutput:
        """Write code to a temp file and run it, capturing stdout and stderr together."""
        fd, script_path = tempfile.mkstemp(prefix="brainy-execute-", suffix=runner.suffix)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(code)

            logger.debug("execute_code_start", command=runner.command, cwd=str(cwd))
            try:
                process = await asyncio.create_subprocess_exec(
                    runner.command,
                    script_path,
                    cwd=str(cwd),
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.STDOUT,
                )
            except FileNotFoundError:
                raise SkillExecutionError(f"Interpreter not found: {runner.command}")

            try:
                stdout, _ = await asyncio.wait_for(process.communicate(), self.timeout_seconds)
            except asyncio.TimeoutError:
                process.kill()
                await process.wait()
                raise SkillExecutionError(
                    f"Code execution timed out after {self.timeout_seconds} seconds"
                )

            return CodeRunOutput(
                output=stdout.decode("utf-8", errors="replace"),
                exit_code=process.returncode if process.returncode is not None else -1,
            )
        finally:
            try:
                os.unlink(script_path)
            except OSError:
                logger.warning("execute_temp_cleanup_failed", path=script_path)
