"""Document assembler: turns markdown text into an ordered block list.

Each line is routed to the annotation, comment or code block parser, in
that priority order. Anything else accumulates into plain text runs.
Parser errors are collected and parsing resumes after the malformed region,
so one bad annotation never hides later blocks or errors.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from brainy.parser.annotation import parse_annotation_block
from brainy.parser.code_block import is_code_fence_open, parse_code_block
from brainy.parser.comment import is_comment_start, parse_comment_block
from brainy.parser.models import (
    PLAIN_TEXT,
    Block,
    BlockParseResult,
    ParserError,
    ParseResult,
)
from brainy.parser.utils import is_annotation_line, split_lines

logger = structlog.get_logger()


def _is_special_line(line: str) -> bool:
    return is_annotation_line(line) or is_comment_start(line) or is_code_fence_open(line)


def _parse_special(lines: list[str], index: int) -> BlockParseResult | None:
    line = lines[index]
    if is_annotation_line(line):
        return parse_annotation_block(lines, index)
    if is_comment_start(line):
        return parse_comment_block(lines, index)
    if is_code_fence_open(line):
        return parse_code_block(lines, index)
    return None


def _parse_plain_text(lines: list[str], index: int) -> BlockParseResult:
    end = index + 1
    while end < len(lines) and not _is_special_line(lines[end]):
        end += 1
    return BlockParseResult(
        block=Block(
            name=PLAIN_TEXT,
            content="\n".join(lines[index:end]),
            line=index + 1,
            end_line=end,
        ),
        next_line=end,
    )


def parse(text: str) -> ParseResult:
    """Parse a playbook document.

    Args:
        text: Markdown content

    Returns:
        ParseResult with blocks in document order and collected errors
    """
    if not text or not text.strip():
        return ParseResult()

    lines = split_lines(text)
    blocks: list[Block] = []
    errors: list[ParserError] = []
    index = 0

    while index < len(lines):
        result = _parse_special(lines, index)
        if result is None:
            result = _parse_plain_text(lines, index)

        if result.error is not None:
            errors.append(result.error)
        if result.block is not None:
            blocks.append(result.block)

        # Always make progress, even if a parser reports no consumed lines
        index = max(result.next_line, index + 1)

    return ParseResult(blocks=blocks, errors=errors)


class PlaybookParser:
    """Parser front end with logging and file loading.

    Example:
        parser = PlaybookParser()
        result = parser.parse_file("notes.brainy.md")
        if not result.is_executable:
            for error in result.critical_errors:
                print(error.line, error.message)
    """

    def __init__(self) -> None:
        self._logger = logger.bind(component="playbook_parser")

    def parse(self, text: str) -> ParseResult:
        """Parse markdown text and log a summary of the outcome."""
        result = parse(text)
        self._logger.debug(
            "playbook_parsed",
            block_count=len(result.blocks),
            error_count=len(result.errors),
            executable=result.is_executable,
        )
        for error in result.errors:
            self._logger.info(
                "playbook_parse_error",
                type=error.type,
                line=error.line,
                severity=error.severity.value,
                message=error.message,
            )
        return result

    def parse_file(self, path: str | Path) -> ParseResult:
        """Read a UTF-8 markdown file and parse it.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Playbook file not found: {path}")
        return self.parse(path.read_text(encoding="utf-8"))
