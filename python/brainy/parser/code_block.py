"""Fenced code blocks delimited by triple backticks."""

from __future__ import annotations

from brainy.parser.models import (
    PLAIN_CODE_BLOCK,
    Block,
    BlockMetadata,
    BlockParseResult,
    Severity,
    create_error,
)
from brainy.parser.patterns import CODE_FENCE_CLOSE, CODE_FENCE_OPEN

UNCLOSED_CODE_BLOCK = "UnclosedCodeBlock"


def is_code_fence_open(line: str) -> bool:
    return CODE_FENCE_OPEN.match(line.strip()) is not None


def is_code_fence_close(line: str) -> bool:
    return CODE_FENCE_CLOSE.match(line.strip()) is not None


def extract_language(line: str) -> str | None:
    """Return the fence language exactly as written, or None."""
    match = CODE_FENCE_OPEN.match(line.strip())
    if not match or not match.group(1):
        return None
    return match.group(1)


def create_code_block(
    content: str,
    language: str | None = None,
    line: int = 1,
    end_line: int | None = None,
) -> Block:
    return Block(
        name=PLAIN_CODE_BLOCK,
        content=content,
        line=line,
        end_line=end_line or line,
        metadata=BlockMetadata(language=language),
    )


def parse_code_block(lines: list[str], start_line: int) -> BlockParseResult:
    """Parse a fenced block whose opening fence is at ``start_line`` (0-indexed).

    The body is kept verbatim. Reaching the end of input without a closing
    fence yields a critical error anchored at the opening line and no block.
    """
    language = extract_language(lines[start_line])
    body: list[str] = []
    current = start_line + 1

    while current < len(lines):
        line = lines[current]
        current += 1
        if is_code_fence_close(line):
            return BlockParseResult(
                block=create_code_block("\n".join(body), language, start_line + 1, current),
                next_line=current,
            )
        body.append(line)

    return BlockParseResult(
        error=create_error(
            UNCLOSED_CODE_BLOCK,
            "Unclosed code block detected.",
            line=start_line + 1,
            severity=Severity.CRITICAL,
            context=lines[start_line].strip(),
        ),
        next_line=current,
    )
