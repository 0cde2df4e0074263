"""File skill: read, write and delete files relative to the workspace.

Usage in playbooks::

    @file --action "read" --path "./notes.md"
    @file --action "write" --path "./output.txt" --content "hello world"
    @file --action "delete" --path "./temp.txt"
"""

from __future__ import annotations

from pathlib import Path

import structlog

from brainy.exceptions import SkillExecutionError, SkillValidationError
from brainy.llm.base import Message
from brainy.skills.api import SkillApi
from brainy.skills.base import Skill, SkillParameter, SkillParams, SkillResult

logger = structlog.get_logger()

FILE_ACTIONS = ("read", "write", "delete")


class FileSkill(Skill):
    """Read, write and delete files."""

    name = "file"
    description = "Read, write and delete files."
    params = [
        SkillParameter(name="action", description="Action to perform (read|write|delete)", required=True),
        SkillParameter(name="path", description="File path, relative to the workspace or absolute", required=True),
        SkillParameter(name="content", description="File content for the write action"),
    ]

    async def execute(self, api: SkillApi, params: SkillParams) -> SkillResult:
        action = params.get("action")
        file_path = params.get("path")
        content = params.get("content")

        if not action:
            raise SkillValidationError("Missing required parameter: action")
        if action not in FILE_ACTIONS:
            raise SkillValidationError(
                f"Invalid action: {action}. Must be one of: {', '.join(FILE_ACTIONS)}"
            )
        if not file_path:
            raise SkillValidationError("Missing required parameter: path")
        if action == "write" and content is None:
            raise SkillValidationError("Missing required parameter for write action: content")

        path = self._resolve(api.workspace_root, file_path)

        if action == "read":
            return SkillResult(messages=[Message.agent(self._read(path))])
        if action == "write":
            return SkillResult(messages=[Message.agent(self._write(path, content or ""))])
        return SkillResult(messages=[Message.agent(self._delete(path))])

    @staticmethod
    def _resolve(workspace_root: Path, file_path: str) -> Path:
        path = Path(file_path).expanduser()
        if path.is_absolute():
            return path
        return workspace_root / path

    @staticmethod
    def _read(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise SkillExecutionError(f"Failed to read file {path}: {e}")

    @staticmethod
    def _write(path: Path, content: str) -> str:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise SkillExecutionError(f"Failed to write file {path}: {e}")
        logger.info("file_written", path=str(path), size=len(content))
        return f"File written successfully: {path}"

    @staticmethod
    def _delete(path: Path) -> str:
        try:
            path.unlink()
        except OSError as e:
            raise SkillExecutionError(f"Failed to delete file {path}: {e}")
        logger.info("file_deleted", path=str(path))
        return f"File deleted successfully: {path}"
