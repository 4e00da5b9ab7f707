#!/usr/bin/env python3
"""
dupelist CLI — run the duplicate finder and stream a column-aligned listing to the console.
Uses the same session engine as the GUI: search state, command builder, stream formatter.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import sys
from typing import List, NoReturn, Optional

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

from dupelist.core.models import ListingConfig, SearchState
from dupelist.core.session import ProcessSession, ProcessAlreadyActive
from dupelist.services.listing import ConsoleSink
from dupelist.services.process_runner import SubprocessRunner
from dupelist.aliases import TOGGLE_HELP_TEXT, EPILOG_TEXT, resolve_toggle_flag


def prompt_with_default(question: str, default: str = "") -> str:
    """Asks on the console; an empty answer keeps the default."""
    suffix = f" [{default}]" if default else ""
    answer = input(f"{question}{suffix}: ").strip()
    return answer or default


def confirm_on_console(question: str = "A search process is running; kill it?") -> bool:
    if not sys.stdin.isatty():
        return False
    answer = prompt_with_default(f"{question} [y/N]", default="n")
    return answer.lower() in ("y", "yes")


# Options whose value is usually a finder switch, i.e. starts with "-"
DASH_VALUE_OPTIONS = {
    "--args": "--args",
    "-a": "--args",
    "--toggle": "--toggle",
    "-t": "--toggle",
}


def attach_dash_values(argv: List[str]) -> List[str]:
    """
    Rewrites `--args -n` as `--args=-n` so argparse does not mistake the value
    for an option of its own.
    """
    result = []
    items = iter(argv)
    for arg in items:
        if arg == "--":
            result.append(arg)
            result.extend(items)
            break
        option = DASH_VALUE_OPTIONS.get(arg)
        if option is None:
            result.append(arg)
            continue
        value = next(items, None)
        result.append(arg if value is None else f"{option}={value}")
    return result


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self, config: Optional[ListingConfig] = None):
        self.config = config or ListingConfig.from_env()
        self.verbose: bool = self.config.verbose
        self.quiet: bool = False
        self.session: Optional[ProcessSession] = None

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dupelist",
            description="dupelist — column-aligned listing of duplicate files found by fdupes/jdupes",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "directories",
            nargs="+",
            metavar="DIR",
            help="Directories to search for duplicates"
        )
        parser.add_argument(
            "--args", "-a",
            default="",
            type=str,
            metavar='',
            dest="extra_args",
            help="Extra arguments passed verbatim to the finder, e.g. --args=\"-n -A\""
        )
        parser.add_argument(
            "--size", "-s",
            default=None,
            type=str,
            metavar='',
            help="Size filter, rendered as '--size VALUE' (empty disables)"
        )
        parser.add_argument(
            "--toggle", "-t",
            action="append",
            default=[],
            type=str,
            metavar='',
            help=TOGGLE_HELP_TEXT
        )
        parser.add_argument(
            "--program", "-p",
            default=None,
            type=str,
            metavar='',
            help="Finder program (default: fdupes, jdupes on Windows)"
        )
        parser.add_argument(
            "--print-command",
            action="store_true",
            help="Print the command line and exit without running it"
        )
        parser.add_argument(
            "--gui",
            action="store_true",
            help="Show the listing in a window (requires the [gui] extra)"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Only print the summary line"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Enable debug logging"
        )

        if args is None:
            args = sys.argv[1:]
        return parser.parse_args(attach_dash_values(list(args)))

    def create_search_state(self, args: argparse.Namespace) -> SearchState:
        """Build the SearchState from defaults and CLI arguments."""
        size = self.config.default_size_filter if args.size is None else args.size
        try:
            state = SearchState.create(
                args.directories,
                extra_args=args.extra_args,
                size_filter=size,
                toggle_flags=self.config.default_toggle_flags,
            )
        except (FileNotFoundError, NotADirectoryError, ValueError) as e:
            self.error_exit(str(e))

        for value in args.toggle:
            state.toggle(resolve_toggle_flag(value))
        return state

    def run_search(self, state: SearchState) -> int:
        """Run the finder, stream the listing and wait for the process to exit."""
        sink = ConsoleSink(quiet=self.quiet)
        self.session = ProcessSession(SubprocessRunner(), sink=sink, config=self.config)

        try:
            command = self.session.build_command(state)
        except FileNotFoundError as e:
            self.error_exit(str(e))

        if self.verbose:
            print(f"Running: {command}", file=sys.stderr)

        try:
            self.session.run_search(state, confirm=confirm_on_console)
        except ProcessAlreadyActive as e:
            self.error_exit(str(e))

        try:
            self.session.wait()
        except KeyboardInterrupt:
            print("\n⚠️  Search cancelled by user (Ctrl+C)", file=sys.stderr)
            self.session.kill()
            self.session.wait(timeout=self.config.grace_period + 1.0)
            return 130
        return 0

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = self.verbose or args.verbose
        self.quiet = args.quiet
        if self.verbose:
            logging.getLogger("dupelist").setLevel(logging.DEBUG)
        if args.program:
            self.config.program = args.program

        state = self.create_search_state(args)

        if args.print_command:
            session = ProcessSession(SubprocessRunner(), config=self.config)
            try:
                print(session.build_command(state))
            except FileNotFoundError as e:
                self.error_exit(str(e))
            return 0

        if args.gui:
            from dupelist.gui.launcher import main as gui_main
            return gui_main(state=state, config=self.config)

        return self.run_search(state)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        sys.exit(app.run())
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
