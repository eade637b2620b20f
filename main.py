"""Main entry point for the gantry command runner."""

import argparse
import asyncio
import os
import sys
import traceback

from config import Config
from engine.context import CommandContext
from engine.dispatcher import CommandDispatcher
from engine.errors import ScriptNotFoundError
from engine.invocation import CommandInvocation, parse_invocation, parse_property
from engine.settings import discover_settings
from utils import get_logger, setup_logger, terminal_ui
from utils.runtime import ensure_runtime_dirs

logger = get_logger(__name__)

# Frames from these files say nothing about the failing script
_INTERNAL_FRAME_MARKERS = (
    f"{os.sep}runpy.py",
    "<frozen importlib._bootstrap",
    f"{os.sep}asyncio{os.sep}",
    f"engine{os.sep}adapter.py",
)

# Options parsed by argparse; everything from the first other token is the command
_OWN_OPTIONS = frozenset({"-h", "--help", "-V", "--version", "-v", "--verbose"})


def _property_arg(value: str) -> tuple[str, str]:
    try:
        return parse_property(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def sanitize_traceback(exc: BaseException) -> list[str]:
    """Format ``exc`` without interpreter and engine plumbing frames.

    Falls back to the full traceback if trimming fails.
    """
    try:
        frames = traceback.extract_tb(exc.__traceback__)
        kept = [
            frame
            for frame in frames
            if not any(marker in frame.filename for marker in _INTERNAL_FRAME_MARKERS)
        ]
        return [
            "Traceback (most recent call last):\n",
            *traceback.format_list(kept or frames),
            *traceback.format_exception_only(type(exc), exc),
        ]
    except Exception:
        return traceback.format_exception(type(exc), exc, exc.__traceback__)


def run_command(dispatcher: CommandDispatcher, invocation: CommandInvocation) -> int:
    """Execute one command and map failures to an exit code."""
    name = invocation.script_name
    try:
        return asyncio.run(dispatcher.execute(name, invocation.args, invocation.env))
    except ScriptNotFoundError as e:
        terminal_ui.print_error(f"Script not found: {e.script_name}")
        return 1
    except Exception as e:
        logger.exception(f"Error executing script {name}")
        terminal_ui.print_error(f"Error executing script {name}: {e}")
        terminal_ui.print_traceback(sanitize_traceback(e))
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gantry",
        description="Find and run project command scripts",
        usage="%(prog)s [-v] [-Dkey=value ...] [dev|prod|test] <command> [args...]",
    )
    parser.add_argument(
        "--version", "-V", action="store_true", help="Show the gantry version and exit"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging to ~/.gantry/logs/",
    )
    parser.add_argument(
        "-D",
        dest="properties",
        action="append",
        type=_property_arg,
        default=[],
        metavar="KEY=VALUE",
        help="Set a property before the command runs (%%20 decodes to a space)",
    )
    return parser


def split_argv(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split argv into gantry's own leading options and the command line.

    Options are only recognised before the first other token, so a command
    written as ``-clean`` (or any argument after it) reaches parse_invocation.
    """
    index = 0
    while index < len(argv):
        token = argv[index]
        if token == "-D":
            index += 2
        elif token in _OWN_OPTIONS or token.startswith("-D"):
            index += 1
        else:
            break
    return argv[:index], argv[index:]


def main():
    """Main CLI entry point."""
    options, command = split_argv(sys.argv[1:])
    args = build_parser().parse_args(options)

    # Initialize runtime directories (create logs dir only in verbose mode)
    ensure_runtime_dirs(create_logs=args.verbose)

    # Initialize logging only in verbose mode
    if args.verbose:
        setup_logger()

    try:
        Config.validate()
    except ValueError as e:
        terminal_ui.print_error(str(e), title="Configuration Error")
        sys.exit(1)

    context = CommandContext.from_environ(dict(os.environ))
    for key, value in args.properties:
        context.set_property(key, value)
    invocation = parse_invocation(" ".join(command), context)

    settings = discover_settings(context.properties)
    if args.version:
        terminal_ui.console.print(f"gantry {settings.version}")
        return

    home = settings.installation_root
    if home is not None and not home.is_dir():
        terminal_ui.print_error(f"gantry installation directory not found: {home}")
        sys.exit(1)

    terminal_ui.print_header(
        f"Welcome to gantry {settings.version}",
        subtitle=f"gantry home is {'set to: ' + str(home) if home else 'not set'}",
    )

    if invocation.script_name is None:
        terminal_ui.print_info(
            "No script name specified. Use 'gantry help' for more info "
            "or 'gantry interactive' to enter interactive mode"
        )
        sys.exit(0)

    terminal_ui.print_info(f"Base Directory: {settings.project_root}")

    dispatcher = CommandDispatcher(settings, context=context)
    sys.exit(run_command(dispatcher, invocation))


if __name__ == "__main__":
    main()
