"""Per-session string variables shared between skills."""

from __future__ import annotations

import re

# {{name}} placeholders
VARIABLE_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")


class VariableStore:
    """Case-sensitive name to string mapping."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get(self, name: str) -> str | None:
        return self._values.get(name)

    def set(self, name: str, value: str) -> None:
        """Set a variable.

        Raises:
            TypeError: If the value is not a string.
        """
        if not isinstance(value, str):
            raise TypeError(f"Variable value must be a string. Got: {type(value).__name__}")
        self._values[name] = value

    def delete(self, name: str) -> None:
        self._values.pop(name, None)

    def clear(self) -> None:
        self._values.clear()

    def to_dict(self) -> dict[str, str]:
        return dict(self._values)

    def substitute(self, text: str, preserve_unknown: bool = False) -> str:
        """Replace ``{{name}}`` placeholders with variable values.

        Unknown variables become empty strings unless ``preserve_unknown``.
        """

        def replace_match(match: re.Match) -> str:
            value = self._values.get(match.group(1))
            if value is None:
                return match.group(0) if preserve_unknown else ""
            return value

        return VARIABLE_PATTERN.sub(replace_match, text)
