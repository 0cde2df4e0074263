"""Markdown annotation parser for Brainy playbooks.

This package provides:
- Value and flag extraction with source positions
- Comment, code block and annotation block parsers
- The document assembler producing blocks plus collected errors
"""

from brainy.parser.annotation import INVALID_ANNOTATION, parse_annotation_block
from brainy.parser.code_block import (
    UNCLOSED_CODE_BLOCK,
    extract_language,
    is_code_fence_close,
    is_code_fence_open,
    parse_code_block,
)
from brainy.parser.comment import is_comment, parse_comment_block
from brainy.parser.document import PlaybookParser, parse
from brainy.parser.flags import parse_flags, parse_flags_or_values, parse_values
from brainy.parser.models import (
    PLAIN_CODE_BLOCK,
    PLAIN_COMMENT,
    PLAIN_TEXT,
    Block,
    BlockMetadata,
    BlockParseResult,
    Flag,
    ParserError,
    ParseResult,
    Severity,
    TokenPosition,
)

__all__ = [
    # Assembler
    "parse",
    "PlaybookParser",
    # Block parsers
    "parse_annotation_block",
    "parse_comment_block",
    "parse_code_block",
    "is_comment",
    "is_code_fence_open",
    "is_code_fence_close",
    "extract_language",
    # Flags
    "parse_values",
    "parse_flags",
    "parse_flags_or_values",
    # Models
    "Block",
    "BlockMetadata",
    "BlockParseResult",
    "Flag",
    "ParserError",
    "ParseResult",
    "Severity",
    "TokenPosition",
    "PLAIN_TEXT",
    "PLAIN_COMMENT",
    "PLAIN_CODE_BLOCK",
    "INVALID_ANNOTATION",
    "UNCLOSED_CODE_BLOCK",
]
