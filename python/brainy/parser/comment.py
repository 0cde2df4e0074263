"""HTML comment blocks: ``<!-- ... -->``, single- or multi-line."""

from __future__ import annotations

import structlog

from brainy.parser.models import PLAIN_COMMENT, Block, BlockParseResult
from brainy.parser.patterns import COMMENT_END, COMMENT_FULL, COMMENT_START

logger = structlog.get_logger()


def is_comment(line: str) -> bool:
    """Check if a line is a complete single-line comment."""
    return COMMENT_FULL.match(line.strip()) is not None


def is_comment_start(line: str) -> bool:
    return COMMENT_START.match(line.strip()) is not None


def extract_comment_content(line: str) -> str:
    """Return the trimmed text between the comment markers."""
    match = COMMENT_FULL.match(line.strip())
    if match:
        return match.group(1).strip()
    return line.strip()[4:-3].strip()


def create_comment_block(content: str, line: int, end_line: int | None = None) -> Block:
    return Block(name=PLAIN_COMMENT, content=content, line=line, end_line=end_line or line)


def parse_comment_block(lines: list[str], start_line: int) -> BlockParseResult:
    """Parse a comment starting at ``start_line`` (0-indexed).

    A multi-line comment without a closing ``-->`` consumes the rest of the
    document as one block. No error is reported for it.
    """
    first = lines[start_line].strip()

    if is_comment(first):
        return BlockParseResult(
            block=create_comment_block(extract_comment_content(first), start_line + 1),
            next_line=start_line + 1,
        )

    comment_lines: list[str] = []
    first_content = COMMENT_START.sub("", first, count=1).lstrip()
    current = start_line + 1
    closed = False

    # The opening line may itself close the comment with trailing text after -->
    end_match = COMMENT_END.search(first_content)
    if end_match:
        comment_lines.append(first_content[: end_match.start()])
        closed = True
    else:
        if first_content:
            comment_lines.append(first_content)

        while current < len(lines):
            line = lines[current]
            end_match = COMMENT_END.search(line)
            current += 1
            if end_match:
                comment_lines.append(line[: end_match.start()])
                closed = True
                break
            comment_lines.append(line)

    if not closed:
        logger.debug("unterminated_comment", line=start_line + 1)

    return BlockParseResult(
        block=create_comment_block("\n".join(comment_lines).strip(), start_line + 1, current),
        next_line=current,
    )
