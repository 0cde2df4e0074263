"""Flag and value extraction.

Handles the two grammars that may follow an annotation name:

- named flags: ``--prompt "Summarize" --variable summary``
- positional values: ``"research" notes``

Positions are only computed when a line number is supplied. Columns are
absolute: ``offset`` is the column where ``text`` starts in its source line.
"""

from __future__ import annotations

from dataclasses import dataclass

from brainy.parser.models import Flag, TokenPosition
from brainy.parser.patterns import FLAG, VALUE


@dataclass
class _Token:
    """A value token and where it sits in the scanned string."""

    value: str
    start: int
    length: int
    quoted: bool


def _tokenize(text: str) -> list[_Token]:
    tokens: list[_Token] = []
    for match in VALUE.finditer(text):
        quoted = match.group(1) is not None
        value = match.group(1) if quoted else match.group(2)
        tokens.append(
            _Token(
                value=value,
                start=match.start(),
                length=match.end() - match.start(),
                quoted=quoted,
            )
        )
    return tokens


def _position(line: int | None, offset: int, token: _Token) -> TokenPosition | None:
    if line is None:
        return None
    return TokenPosition(line=line, start=offset + token.start, length=token.length)


def parse_values(text: str) -> list[str]:
    """Parse quoted and bare values from a string.

    Example:
        >>> parse_values('"a" "b" c')
        ['a', 'b', 'c']
    """
    if not text or not text.strip():
        return []
    return [token.value for token in _tokenize(text)]


def parse_flags(text: str, line: int | None = None, offset: int = 0) -> list[Flag]:
    """Parse ``--name value...`` pairs.

    Each flag owns every value token up to the next flag or the end of the
    string. Tokens before the first flag are ignored. A quoted token is
    always a value, even when its content starts with ``--``.

    Args:
        text: The flag string
        line: Optional 1-indexed line number for position tracking
        offset: Column at which ``text`` starts in the source line

    Returns:
        Flags in source order
    """
    flags: list[Flag] = []
    current_name: str | None = None
    current_position: TokenPosition | None = None
    values: list[str] = []
    value_positions: list[TokenPosition] = []

    def flush() -> None:
        if current_name is None:
            return
        flags.append(
            Flag(
                name=current_name,
                value=list(values),
                position=current_position,
                value_positions=list(value_positions),
            )
        )

    for token in _tokenize(text):
        flag_match = None if token.quoted else FLAG.fullmatch(token.value)
        if flag_match:
            flush()
            current_name = flag_match.group(1)
            current_position = _position(line, offset, token)
            values = []
            value_positions = []
            continue

        if current_name is None:
            continue

        values.append(token.value)
        position = _position(line, offset, token)
        if position is not None:
            value_positions.append(position)

    flush()
    return flags


def parse_flags_or_values(text: str, line: int | None = None, offset: int = 0) -> list[Flag]:
    """Parse either named flags or positional values, chosen by lookahead.

    - ``--`` prefix: named flags
    - ``"`` or any other non ``-`` character: positional values, returned as
      a single flag with an empty name
    - a single ``-`` prefix: nothing (treated as "no flags found")
    """
    if text.startswith("--"):
        return parse_flags(text, line, offset)

    if text.startswith("-"):
        return []

    tokens = _tokenize(text)
    if not tokens:
        return []

    positions = [p for p in (_position(line, offset, t) for t in tokens) if p is not None]
    return [
        Flag(
            name="",
            value=[t.value for t in tokens],
            value_positions=positions,
        )
    ]
