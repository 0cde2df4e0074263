"""Annotation blocks: ``@name`` with inline or multi-line flags.

Single-line form::

    @task --prompt "Summarize the notes" --variable summary

Multi-line form, flags on the lines that follow::

    @task
    --prompt "Summarize the notes"
    --variable summary
"""

from __future__ import annotations

from brainy.parser.flags import parse_flags, parse_flags_or_values
from brainy.parser.models import (
    Block,
    BlockParseResult,
    Flag,
    Severity,
    TokenPosition,
    create_error,
)
from brainy.parser.patterns import ANNOTATION
from brainy.parser.utils import is_empty_line, starts_with, trim_line

INVALID_ANNOTATION = "INVALID_ANNOTATION"


def parse_annotation_block(lines: list[str], start_line: int) -> BlockParseResult:
    """Parse an annotation starting at ``start_line`` (0-indexed).

    Args:
        lines: All document lines
        start_line: Index of the line beginning with ``@``

    Returns:
        BlockParseResult with either a block or a critical error
    """
    line = lines[start_line]
    trimmed = trim_line(line)

    match = ANNOTATION.match(trimmed)
    if not match:
        return BlockParseResult(
            error=create_error(
                INVALID_ANNOTATION,
                f"Invalid annotation syntax: {trimmed}",
                line=start_line + 1,
                severity=Severity.CRITICAL,
                context=trimmed,
            ),
            next_line=start_line + 1,
        )

    name = match.group(1)
    remaining = match.group(2).strip()

    at_index = line.index("@")
    annotation_position = TokenPosition(
        line=start_line + 1,
        start=at_index,
        length=len(name) + 1,
    )

    flags: list[Flag] = []
    content_lines = [trimmed]
    current = start_line + 1

    if remaining:
        offset = line.index(remaining, at_index + len(name) + 1)
        flags.extend(parse_flags_or_values(remaining, start_line + 1, offset))
    else:
        while current < len(lines):
            next_line = lines[current]
            trimmed_next = trim_line(next_line)

            if (
                is_empty_line(next_line)
                or starts_with(trimmed_next, "@")
                or starts_with(trimmed_next, "<!--")
                or not starts_with(trimmed_next, "--")
            ):
                break

            content_lines.append(trimmed_next)
            flags.extend(parse_flags(trimmed_next, current + 1, next_line.index("--")))
            current += 1

    return BlockParseResult(
        block=Block(
            name=name,
            flags=flags,
            content="\n".join(content_lines),
            line=start_line + 1,
            end_line=current,
            annotation_position=annotation_position,
        ),
        next_line=current,
    )
