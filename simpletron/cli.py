"""
simpletron - Simpletron Machine Language runner
===============================================

Commands:
    simpletron run    - Load an SML program and execute it
    simpletron check  - Load only; report the first bad line
    simpletron dump   - Load and print the listing and memory dump

Usage:
    python -m simpletron <command> [options]
    python -m simpletron <command> --help

Examples:
    python -m simpletron run programs/sum_two.sml --input 5 --input 3
    python -m simpletron run programs/countdown.sml --interval 0.05 --dump
    python -m simpletron run prog.sml --report simpletron_report.log.txt
    python -m simpletron check prog.sml
    python -m simpletron -v dump prog.sml
"""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .errors import ProgramLoadError, SimpletronError
from .log_setup import setup_logging
from .machine import Machine
from .report import (
    DEFAULT_REPORT_FILE, append_report, build_report, format_dump,
    format_listing,
)
from .runner import (
    DEFAULT_INTERVAL, DEFAULT_MAX_STEPS, START_MESSAGE, Runner,
    chain_input, console_input, sequence_input,
)

EXIT_OK = 0
EXIT_LOAD_ERROR = 1
EXIT_RUN_STOPPED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simpletron",
        description="Simpletron - load, check and run SML programs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""commands:
  run        Load an SML program and execute it
  check      Validate an SML program without running it
  dump       Print the loaded program listing and memory dump
""",
    )
    parser.add_argument("--version", action="version", version=f"simpletron {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log every executed step")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Only log errors")
    parser.add_argument("--log-file", help="Write a DEBUG log to this file")
    sub = parser.add_subparsers(dest="command", metavar="command")

    # ── run ──────────────────────────────────────────────────────────────
    p_run = sub.add_parser("run", help="Load an SML program and execute it")
    p_run.add_argument("input", help="SML program file (.sml, .txt)")
    p_run.add_argument("--input", dest="values", action="append", default=[],
                       metavar="VALUE",
                       help="Value for the next READ (repeatable, used in order)")
    p_run.add_argument("--no-interactive", action="store_true",
                       help="Abort instead of prompting when --input values run out")
    p_run.add_argument("--interval", type=float, default=DEFAULT_INTERVAL,
                       help="Seconds to pause between steps (default: 0)")
    p_run.add_argument("--max-steps", type=int, default=DEFAULT_MAX_STEPS,
                       help=f"Abort after this many steps (default: {DEFAULT_MAX_STEPS})")
    p_run.add_argument("--dump", action="store_true",
                       help="Print the register/memory dump after the run")
    p_run.add_argument("--report", nargs="?", const=DEFAULT_REPORT_FILE, default=None,
                       metavar="PATH",
                       help=f"Append an execution report (default file: {DEFAULT_REPORT_FILE})")

    # ── check ────────────────────────────────────────────────────────────
    p_chk = sub.add_parser("check", help="Validate an SML program")
    p_chk.add_argument("input", help="SML program file")

    # ── dump ─────────────────────────────────────────────────────────────
    p_dmp = sub.add_parser("dump", help="Print listing and memory dump")
    p_dmp.add_argument("input", help="SML program file")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return EXIT_OK

    if args.quiet:
        console_level = logging.ERROR
    elif args.verbose:
        console_level = logging.DEBUG
    else:
        console_level = logging.WARNING
    setup_logging("simpletron", console_level=console_level, log_file=args.log_file)

    try:
        return COMMANDS[args.command](args)
    except ProgramLoadError as e:
        print(e, file=sys.stderr)
        return EXIT_LOAD_ERROR
    except SimpletronError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_LOAD_ERROR
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_LOAD_ERROR


# ═════════════════════════════════════════════════════════════════════════════
# COMMAND IMPLEMENTATIONS
# ═════════════════════════════════════════════════════════════════════════════

def _read_program(path) -> str:
    return Path(path).read_text(encoding="utf-8")


# ── run ──────────────────────────────────────────────────────────────────
def cmd_run(args):
    source = _read_program(args.input)
    machine = Machine()
    machine.load(source)
    print("Program loaded into memory successfully.")

    provider = sequence_input(args.values)
    if not args.no_interactive:
        provider = chain_input(provider, console_input())

    print(START_MESSAGE)
    runner = Runner(machine, input_provider=provider,
                    output_sink=lambda value: print(f"Output: {value}"),
                    interval=args.interval, max_steps=args.max_steps)
    result = runner.run()
    print(result.message)

    if args.dump:
        print()
        print(format_dump(machine), end="")

    if args.report:
        path = append_report(args.report, build_report(source, result.console, machine))
        print(f"Report appended to {path}")

    return EXIT_OK if result.ok else EXIT_RUN_STOPPED


# ── check ────────────────────────────────────────────────────────────────
def cmd_check(args):
    machine = Machine()
    try:
        machine.load(_read_program(args.input))
    except ProgramLoadError as e:
        print(f"LOAD FAILED: {e}", file=sys.stderr)
        print(format_dump(machine), end="")
        return EXIT_LOAD_ERROR
    words = sum(1 for w in machine.memory if w != 0)
    print(f"{args.input}: OK ({words} non-zero words)")
    return EXIT_OK


# ── dump ─────────────────────────────────────────────────────────────────
def cmd_dump(args):
    machine = Machine()
    machine.load(_read_program(args.input))
    listing = format_listing(machine)
    if listing:
        print(listing)
        print()
    print(format_dump(machine), end="")
    return EXIT_OK


COMMANDS = {
    "run": cmd_run,
    "check": cmd_check,
    "dump": cmd_dump,
}
