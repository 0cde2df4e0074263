"""Data models produced by the markdown annotation parser.

All models are frozen: a parse result is created once and never mutated.
A new parse supersedes it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Reserved block names for non-annotation content
PLAIN_TEXT = "plainText"
PLAIN_COMMENT = "plainComment"
PLAIN_CODE_BLOCK = "plainCodeBlock"

PLAIN_BLOCK_NAMES = frozenset({PLAIN_TEXT, PLAIN_COMMENT, PLAIN_CODE_BLOCK})


class Severity(str, Enum):
    """Parser error severity."""

    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class TokenPosition(BaseModel):
    """Location of a token in the source document."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=1, description="1-indexed line number")
    start: int = Field(ge=0, description="0-indexed column of the first character")
    length: int = Field(ge=0, description="Token length in characters")


class Flag(BaseModel):
    """A ``--name value...`` parameter, or positional values when ``name`` is empty."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    value: list[str] = Field(default_factory=list)
    position: TokenPosition | None = None
    value_positions: list[TokenPosition] = Field(default_factory=list)

    @property
    def is_positional(self) -> bool:
        return self.name == ""


class BlockMetadata(BaseModel):
    """Extra attributes attached to a block."""

    model_config = ConfigDict(frozen=True)

    language: str | None = None


class Block(BaseModel):
    """One parsed unit of a playbook document."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Annotation name or one of the plain block names")
    flags: list[Flag] = Field(default_factory=list)
    content: str = ""
    line: int = Field(ge=1, description="1-indexed start line")
    end_line: int = Field(ge=1, description="1-indexed last line covered by the block")
    annotation_position: TokenPosition | None = None
    metadata: BlockMetadata = Field(default_factory=BlockMetadata)

    @property
    def is_annotation(self) -> bool:
        """Whether this block invokes a skill."""
        return self.name not in PLAIN_BLOCK_NAMES

    @property
    def is_blank(self) -> bool:
        """Whether this is a plain text run holding only whitespace."""
        return self.name == PLAIN_TEXT and not self.content.strip()

    @property
    def language(self) -> str | None:
        return self.metadata.language

    def get_flag(self, name: str) -> Flag | None:
        """Return the last flag with the given name, if any."""
        for flag in reversed(self.flags):
            if flag.name == name:
                return flag
        return None

    def to_params(self) -> dict[str, str]:
        """Convert flags into skill parameters.

        Multiple values are joined with a single space, a flag without values
        maps to an empty string, and later flags override earlier ones.
        """
        params: dict[str, str] = {}
        for flag in self.flags:
            params[flag.name] = " ".join(flag.value)
        return params

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return self.model_dump(mode="json", exclude_none=True)


def adjacent_block(blocks: list[Block], index: int, step: int = 1) -> Block | None:
    """Return the nearest block after (or, with ``step=-1``, before) ``index``.

    Blank plain text runs are skipped, so a block separated from an
    annotation by empty lines still counts as adjacent to it.
    """
    i = index + step
    while 0 <= i < len(blocks):
        if not blocks[i].is_blank:
            return blocks[i]
        i += step
    return None


class ParserError(BaseModel):
    """A problem found while parsing. Collected, never raised."""

    model_config = ConfigDict(frozen=True)

    type: str
    message: str
    line: int | None = None
    severity: Severity = Severity.CRITICAL
    context: str | None = None

    @property
    def is_critical(self) -> bool:
        return self.severity == Severity.CRITICAL

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


def create_error(
    error_type: str,
    message: str,
    line: int | None = None,
    severity: Severity = Severity.CRITICAL,
    context: str | None = None,
) -> ParserError:
    """Create a parser error."""
    return ParserError(
        type=error_type,
        message=message,
        line=line,
        severity=severity,
        context=context,
    )


class BlockParseResult(BaseModel):
    """Outcome of a single block parser call.

    ``next_line`` is a 0-indexed line index and is always honored by the
    caller, whether or not a block was produced.
    """

    model_config = ConfigDict(frozen=True)

    block: Block | None = None
    error: ParserError | None = None
    next_line: int


class ParseResult(BaseModel):
    """Blocks and errors for a whole document."""

    model_config = ConfigDict(frozen=True)

    blocks: list[Block] = Field(default_factory=list)
    errors: list[ParserError] = Field(default_factory=list)

    @property
    def critical_errors(self) -> list[ParserError]:
        return [e for e in self.errors if e.is_critical]

    @property
    def has_critical_errors(self) -> bool:
        return any(e.is_critical for e in self.errors)

    @property
    def is_executable(self) -> bool:
        """A playbook may run only when parsing found no critical errors."""
        return not self.has_critical_errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "blocks": [b.to_dict() for b in self.blocks],
            "errors": [e.to_dict() for e in self.errors],
        }
