"""Tests for value and flag extraction."""

from __future__ import annotations

from brainy.parser.flags import parse_flags, parse_flags_or_values, parse_values
from brainy.parser.models import TokenPosition


# =============================================================================
# parse_values Tests
# =============================================================================


class TestParseValues:
    """Tests for quoted and bare value extraction."""

    def test_quoted_values(self) -> None:
        assert parse_values('"a" "b" "c"') == ["a", "b", "c"]

    def test_empty_input(self) -> None:
        assert parse_values("") == []
        assert parse_values("   ") == []

    def test_empty_quoted_string(self) -> None:
        assert parse_values('""') == [""]

    def test_bare_values(self) -> None:
        assert parse_values("one two  three") == ["one", "two", "three"]

    def test_mixed_values(self) -> None:
        assert parse_values('"hello world" bare "x"') == ["hello world", "bare", "x"]

    def test_quoted_value_keeps_inner_spaces(self) -> None:
        assert parse_values('"  padded  "') == ["  padded  "]


# =============================================================================
# parse_flags Tests
# =============================================================================


class TestParseFlags:
    """Tests for named flag parsing."""

    def test_two_flags(self) -> None:
        flags = parse_flags('--prompt "test" --variable "var"')

        assert len(flags) == 2
        assert flags[0].name == "prompt"
        assert flags[0].value == ["test"]
        assert flags[1].name == "variable"
        assert flags[1].value == ["var"]

    def test_flag_without_value(self) -> None:
        flags = parse_flags("--debug")

        assert len(flags) == 1
        assert flags[0].name == "debug"
        assert flags[0].value == []

    def test_flag_with_multiple_values(self) -> None:
        flags = parse_flags('--files "a.txt" b.txt "c d.txt"')

        assert flags[0].value == ["a.txt", "b.txt", "c d.txt"]

    def test_tokens_before_first_flag_are_ignored(self) -> None:
        flags = parse_flags('stray "words" --name value')

        assert len(flags) == 1
        assert flags[0].name == "name"
        assert flags[0].value == ["value"]

    def test_quoted_dashes_are_a_value(self) -> None:
        flags = parse_flags('--prompt "--not-a-flag"')

        assert len(flags) == 1
        assert flags[0].value == ["--not-a-flag"]

    def test_repeated_flag_names_are_kept_in_order(self) -> None:
        flags = parse_flags("--tag a --tag b")

        assert [f.name for f in flags] == ["tag", "tag"]
        assert [f.value for f in flags] == [["a"], ["b"]]

    def test_no_positions_without_line(self) -> None:
        flags = parse_flags('--prompt "test"')

        assert flags[0].position is None
        assert flags[0].value_positions == []

    def test_positions_are_absolute(self) -> None:
        flags = parse_flags('--prompt "test"', line=3, offset=6)

        assert flags[0].position == TokenPosition(line=3, start=6, length=8)
        assert flags[0].value_positions == [TokenPosition(line=3, start=15, length=6)]


# =============================================================================
# parse_flags_or_values Tests
# =============================================================================


class TestParseFlagsOrValues:
    """Tests for the named or positional lookahead."""

    def test_named_form(self) -> None:
        flags = parse_flags_or_values('--name "research"')

        assert len(flags) == 1
        assert flags[0].name == "name"
        assert flags[0].value == ["research"]

    def test_positional_form(self) -> None:
        flags = parse_flags_or_values('"research" notes')

        assert len(flags) == 1
        assert flags[0].is_positional
        assert flags[0].value == ["research", "notes"]

    def test_single_dash_yields_nothing(self) -> None:
        assert parse_flags_or_values("-x value") == []

    def test_empty_yields_nothing(self) -> None:
        assert parse_flags_or_values("") == []

    def test_positional_value_positions(self) -> None:
        flags = parse_flags_or_values("research", line=1, offset=9)

        assert flags[0].position is None
        assert flags[0].value_positions == [TokenPosition(line=1, start=9, length=8)]
