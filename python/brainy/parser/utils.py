"""Line helpers for the parser."""

from __future__ import annotations


def is_empty_line(line: str) -> bool:
    """Check if a line is empty or whitespace only."""
    return line.strip() == ""


def trim_line(line: str) -> str:
    return line.strip()


def starts_with(content: str, prefix: str) -> bool:
    return content.startswith(prefix)


def is_annotation_line(line: str) -> bool:
    return line.strip().startswith("@")


def is_flag_line(line: str) -> bool:
    return line.strip().startswith("--")


def split_lines(text: str) -> list[str]:
    """Split a document into lines.

    Only ``\\n`` separates lines. A trailing ``\\r`` is dropped from each line
    and a single trailing newline does not produce an extra empty line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]
