"""Command-line interface with lazily loaded command modules."""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from collections.abc import Callable

# Command modules are imported on demand in _load_command_parser()

logger = logging.getLogger(__name__)


CommandHandler = Callable[[argparse.Namespace], int]

COMMAND_MODULES: dict[str, str] = {
    "extract-url": "extract_url",
    "extract-file": "extract_file",
}

COMMAND_HANDLER_ATTRS: dict[str, str] = {
    "extract-url": "handle_extract_url_command",
    "extract-file": "handle_extract_file_command",
}


def create_parser() -> argparse.ArgumentParser:
    """Create minimal parser - commands loaded on-demand in main()."""
    parser = argparse.ArgumentParser(
        prog="feedtext",
        description="feedtext - readable article text from feed items",
        add_help=False,  # help is handled per command
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. INFO, DEBUG)",
    )

    # Just capture the command name, don't load subparsers yet
    parser.add_argument(
        "command",
        nargs="?",
        help="Command to run (use 'COMMAND --help' for command-specific help)",
    )

    return parser


def _load_command_parser(command: str) -> tuple[Callable, Callable] | None:
    """Load parser and handler for a specific command on-demand.

    Returns: (add_parser_func, handle_command_func) or None if not found
    """
    module_name = COMMAND_MODULES.get(command)
    if not module_name:
        return None

    try:
        module = importlib.import_module(f"feedtext.cli.commands.{module_name}")
    except ImportError as e:
        logger.warning(f"Failed to load command '{command}': {e}")
        return None

    preferred_add = f"add_{command.replace('-', '_')}_parser"
    preferred_handle = COMMAND_HANDLER_ATTRS.get(command) or (
        f"handle_{command.replace('-', '_')}_command"
    )

    parser_func = getattr(module, preferred_add, None)
    if parser_func is None:
        for attr in dir(module):
            if attr.startswith("add_") and attr.endswith("_parser"):
                parser_func = getattr(module, attr)
                break

    handler_func = getattr(module, preferred_handle, None)
    if handler_func is None:
        for attr in dir(module):
            if attr.startswith("handle_") and attr.endswith("_command"):
                handler_func = getattr(module, attr)
                break

    if parser_func and handler_func:
        return (parser_func, handler_func)

    return None


def _print_available_commands() -> None:
    print("Available commands:", file=sys.stderr)
    print("  extract-url   - Extract article text for a feed item URL", file=sys.stderr)
    print("  extract-file  - Extract article text from a saved HTML page", file=sys.stderr)
    print("Use: feedtext COMMAND --help for more info", file=sys.stderr)


def main(
    argv: list[str] | None = None,
    *,
    setup_logging_func: Callable[[str], None] | None = None,
    handler_overrides: dict[str, CommandHandler] | None = None,
) -> int:
    """Main CLI entry point with on-demand command loading."""

    parser = create_parser()
    args, remaining = parser.parse_known_args(argv)

    log_level = getattr(args, "log_level", "INFO") or "INFO"
    if setup_logging_func is None:
        from .context import setup_logging as default_setup_logging

        setup_logging_func = default_setup_logging

    setup_logging_func(log_level)

    command = args.command
    if not command:
        _print_available_commands()
        return 1

    if handler_overrides and command in handler_overrides:
        return handler_overrides[command](args)

    result = _load_command_parser(command)
    if result is None:
        print(f"Unknown command: {command}", file=sys.stderr)
        return 1

    add_parser_func, handle_func = result

    full_parser = argparse.ArgumentParser(
        prog="feedtext",
        description=f"Run {command} command",
    )
    full_parser.add_argument("--log-level", default=log_level)

    subparsers = full_parser.add_subparsers(dest="command")
    add_parser_func(subparsers)

    full_args = full_parser.parse_args([command] + remaining)

    return handle_func(full_args)


if __name__ == "__main__":
    sys.exit(main())
