"""Regular expressions shared by the block parsers."""

from __future__ import annotations

import re

# @name followed by optional trailing content
ANNOTATION = re.compile(r"^@([A-Za-z_][A-Za-z0-9_]*)(.*)$")

# --name inside a flag string
FLAG = re.compile(r"--([A-Za-z_][A-Za-z0-9_]*)")

# Quoted string (possibly empty) or a run of non-whitespace
VALUE = re.compile(r'"([^"]*)"|(\S+)')

COMMENT_START = re.compile(r"^<!--")
COMMENT_END = re.compile(r"-->")
COMMENT_FULL = re.compile(r"^<!--(.*?)-->$", re.DOTALL)

# ``` optionally followed immediately by a language tag
CODE_FENCE_OPEN = re.compile(r"^```(\S*)$")
CODE_FENCE_CLOSE = re.compile(r"^```$")
