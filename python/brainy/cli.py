#!/usr/bin/env python3
"""Command-line interface for parsing and running Brainy playbooks.

Usage:
    python -m brainy.cli parse notes.md
    python -m brainy.cli parse notes.md --json
    python -m brainy.cli run notes.md --provider openai --model gpt-4.1
    python -m brainy.cli run notes.md --provider echo
    python -m brainy.cli list-skills
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import structlog

from brainy.config import BrainySettings, load_settings
from brainy.exceptions import BrainyError
from brainy.llm.factory import create_model_client
from brainy.parser.document import PlaybookParser
from brainy.parser.models import Block, ParseResult
from brainy.playbook.session import SessionManager
from brainy.skills.builtin import create_builtin_registry


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="Parse and run Brainy markdown playbooks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML settings file (defaults to .brainy/config.yaml when present)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse a playbook and print its blocks")
    parse_parser.add_argument("file", type=str, help="Markdown playbook to parse")
    parse_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the parse result as JSON",
    )

    # Run command
    run_parser = subparsers.add_parser("run", help="Execute a playbook")
    run_parser.add_argument("file", type=str, help="Markdown playbook to run")
    run_parser.add_argument(
        "--provider",
        type=str,
        choices=["anthropic", "openai", "local", "echo"],
        default=None,
        help="Model provider (defaults to the configured provider)",
    )
    run_parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Model selected before the first block runs",
    )
    run_parser.add_argument(
        "--workspace",
        type=str,
        default=None,
        help="Working directory for file and execute skills",
    )
    run_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the execution result as JSON",
    )

    # List skills command
    subparsers.add_parser("list-skills", help="List built-in skills")

    return parser


def configure_logging(level: str) -> None:
    """Send structlog output to stderr, filtered below ``level``.

    Stdout stays reserved for command output such as ``--json``.
    """
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def format_block(block: Block) -> str:
    """Format one block as a single summary line."""
    span = f"{block.line}" if block.end_line == block.line else f"{block.line}-{block.end_line}"
    if block.is_annotation:
        flags = " ".join(
            f"--{f.name} {json.dumps(' '.join(f.value))}" if f.name else json.dumps(" ".join(f.value))
            for f in block.flags
        )
        return f"  [{span}] @{block.name} {flags}".rstrip()
    preview = block.content.strip().splitlines()[0] if block.content.strip() else ""
    if len(preview) > 60:
        preview = preview[:57] + "..."
    return f"  [{span}] {block.name}: {preview}"


def format_parse_result(result: ParseResult) -> str:
    """Format a parse result as readable text."""
    lines = [f"Blocks ({len(result.blocks)}):"]
    lines.extend(format_block(block) for block in result.blocks)
    if result.errors:
        lines.append(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            lines.append(f"  line {error.line} [{error.severity.value}] {error.type}: {error.message}")
    return "\n".join(lines)


def parse_command(args: argparse.Namespace) -> int:
    """Parse a playbook file."""
    try:
        result = PlaybookParser().parse_file(args.file)
    except FileNotFoundError:
        print(f"File not found: {args.file}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_parse_result(result))

    return 1 if result.has_critical_errors else 0


async def prompt_stdin(prompt: str) -> str:
    """Read one line from stdin without blocking the event loop."""
    return await asyncio.to_thread(input, f"{prompt}: ")


async def run_command(args: argparse.Namespace, settings: BrainySettings) -> int:
    """Execute a playbook file."""
    path = Path(args.file)
    if not path.exists():
        print(f"File not found: {args.file}", file=sys.stderr)
        return 1

    if args.workspace:
        settings = settings.model_copy(update={"workspace_root": Path(args.workspace)})
    elif settings.workspace_root is None:
        settings = settings.model_copy(update={"workspace_root": path.resolve().parent})

    manager = SessionManager(
        registry=create_builtin_registry(execute_timeout_seconds=settings.execute_timeout_seconds),
        model_client_factory=lambda s: create_model_client(s, provider=args.provider, model=args.model),
        settings=settings,
        input_provider=prompt_stdin,
    )

    session_id = str(path.resolve())
    try:
        result = await manager.run(session_id, path.read_text(encoding="utf-8"))
    except BrainyError as e:
        print(f"Error: {e}", file=sys.stderr)
        for detail in e.details:
            print(f"  {detail}", file=sys.stderr)
        return 1

    session = manager.get(session_id)
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    elif session is not None:
        for message in session.context.messages():
            print(f"[{message.role.value}] {message.content}")

    if not result.success:
        if result.failed_line is not None:
            print(f"Failed at line {result.failed_line}: {result.error}", file=sys.stderr)
        elif result.stopped:
            print("Execution stopped", file=sys.stderr)
        return 1

    return 0


def list_skills_command(args: argparse.Namespace) -> int:
    """List built-in skills."""
    print("Available Skills:")
    print("-" * 40)
    for info in create_builtin_registry().describe():
        print(f"  @{info['name']}: {info['description']}")
        for param in info["params"]:
            marker = " (required)" if param["required"] else ""
            print(f"      --{param['name']}{marker}: {param['description']}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        settings = load_settings(args.config)
    except BrainyError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        for detail in e.details:
            print(f"  {detail}", file=sys.stderr)
        return 1

    configure_logging(settings.log_level)

    if args.command == "parse":
        return parse_command(args)
    if args.command == "run":
        return asyncio.run(run_command(args, settings))
    if args.command == "list-skills":
        return list_skills_command(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
