#!/usr/bin/env python3
"""
Langterm - translate plain English into a shell command, confirm, and run it
"""

import argparse
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import List, Optional

from prompt_toolkit import prompt as _pt_prompt
from prompt_toolkit.styles import Style
from rich.console import Console
from rich.logging import RichHandler

import i18n
from command_engine import CommandEngine
from errors import LangtermError
from preferences import PreferenceStore
from session import LANGTERM_THEME, Session, SessionController, Stage

__version__ = "1.0.0"

EXIT_INTERRUPTED = 130

HELP_FLAGS = ("--help", "-h")
VERSION_FLAGS = ("--version", "-v")
SETUP_FLAGS = ("--setup", "-s")
MODEL_FLAGS = ("--model", "-m")

logger = logging.getLogger("langterm")

console = Console(theme=LANGTERM_THEME, highlight=False)
err_console = Console(stderr=True)

prompt_style = Style.from_dict(
    {
        "": "#ffffff",
        "prompt": "#ffd75f bold",
    }
)


def ask(message: str) -> str:
    """Read one line from the operator."""
    return _pt_prompt([("class:prompt", message)], style=prompt_style)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    """Parser used to render --help; argv itself is read by parse_args()."""
    parser = argparse.ArgumentParser(
        prog="langterm",
        usage=i18n.t("cli.usage"),
        description=i18n.t("cli.description"),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=i18n.t("cli.examples"),
        add_help=False,
    )
    parser.add_argument("instruction", nargs="*", help=i18n.t("cli.arg_instruction"))
    parser.add_argument(*SETUP_FLAGS, action="store_true", help=i18n.t("cli.arg_setup"))
    parser.add_argument(*MODEL_FLAGS, metavar="MODEL", help=i18n.t("cli.arg_model"))
    parser.add_argument(*HELP_FLAGS, action="store_true", help=i18n.t("cli.arg_help"))
    parser.add_argument(*VERSION_FLAGS, action="store_true", help=i18n.t("cli.arg_version"))
    return parser


@dataclass
class CLIArgs:
    help: bool = False
    version: bool = False
    setup: bool = False
    model: Optional[str] = None
    words: List[str] = field(default_factory=list)


def parse_args(argv: List[str]) -> CLIArgs:
    """
    Pick out the flags and keep every other word, in order, for the
    instruction. Only the first --model/-m that has a value is consumed, so
    words like "-la" or "-name" stay part of the instruction.
    """
    args = CLIArgs()
    # The first of help/version/setup wins, wherever it appears
    for arg in argv:
        if arg in HELP_FLAGS:
            args.help = True
        elif arg in VERSION_FLAGS:
            args.version = True
        elif arg in SETUP_FLAGS:
            args.setup = True
        else:
            continue
        break

    words = list(argv)
    for i, arg in enumerate(words[:-1]):
        if arg in MODEL_FLAGS:
            args.model = words[i + 1]
            del words[i:i + 2]
            break
    args.words = words
    return args


def report_error(error: LangtermError) -> None:
    console.print(error.message, style="error")
    if error.hint:
        console.print(f"\n{error.hint}", style="warning")


def main(argv: Optional[List[str]] = None, controller: Optional[SessionController] = None) -> int:
    """Entry point"""
    i18n.init()
    argv = sys.argv[1:] if argv is None else argv

    configure_logging(bool(os.environ.get("DEBUG")))
    logger.debug("Raw args: %s", argv)

    args = parse_args(argv)
    if args.help:
        build_parser().print_help()
        return 0
    if args.version:
        console.print(i18n.t("cli.version", version=__version__))
        return 0

    if controller is None:
        controller = SessionController(
            store=PreferenceStore(),
            engine=CommandEngine(),
            ask=ask,
            console=console,
        )

    try:
        if args.setup:
            try:
                controller.run_setup()
            except LangtermError as e:
                report_error(e)
                return 1
            return 0

        instruction = " ".join(args.words) if args.words else None
        session = controller.run(Session(model=args.model, instruction=instruction))
    except (KeyboardInterrupt, EOFError):
        console.print(f"\n{i18n.t('cli.cancelled')}", style="error")
        return EXIT_INTERRUPTED

    if session.stage is Stage.FAILED:
        report_error(session.error)
    return session.exit_code


if __name__ == "__main__":
    sys.exit(main())
