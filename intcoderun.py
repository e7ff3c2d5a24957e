#!/usr/bin/env python3
"""
intcoderun: Intcode Computer CLI

Usage:
    python intcoderun.py <program.txt> [--input N ...] [--set ADDR=VALUE ...]
                         [--profile basic|full] [--interactive]
                         [--trace] [--dump] [--verbose]

Runs the program to HALT, printing every output value on its own line,
then the value left at address 0:

    Result: 3500

Input values come from --input (in order) or, with --interactive, from
stdin one per line. With neither, an input instruction faults with
ReadingNotSupported.

Examples:
    python intcoderun.py day02.txt --set 1=12 --set 2=2 --profile basic
    python intcoderun.py day05.txt --input 1
    python intcoderun.py day05.txt --interactive --trace
"""

import argparse
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from intcode import __version__
from intcode.channels import InputQueue, OutputCollector
from intcode.computer import Computer
from intcode.decoder import PROFILES, get_profile
from intcode.errors import IntcodeError, ReadingNotSupported
from intcode.loader import ProgramFormatError, load_program, patch

log = logging.getLogger("intcoderun")


def setup_logging(level: int = logging.WARNING) -> logging.Logger:
    """Route all log records to a rich console handler on stderr."""
    handler = RichHandler(
        console=Console(stderr=True),
        level=level,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(level=level, format="%(message)s",
                        handlers=[handler], force=True)
    return log


def parse_assignment(value: str):
    """Parse an ADDR=VALUE pair for --set."""
    addr, sep, val = value.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected ADDR=VALUE, got {value!r}")
    try:
        return int(addr), int(val)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"ADDR and VALUE must be integers, got {value!r}") from None


def stdin_reader(prompt: str = "> "):
    """Read channel that asks for one integer per line on stdin."""
    def read() -> int:
        try:
            line = input(prompt)
        except EOFError:
            raise ReadingNotSupported() from None
        return int(line.strip())
    return read


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intcoderun",
        description="Run an Intcode program to completion",
        epilog="Profiles: " + ", ".join(
            f"{name} ({p['description']})" for name, p in PROFILES.items()),
    )
    parser.add_argument("program", help="Program file (comma-separated integers)")
    parser.add_argument("--input", "-i", type=int, action="append", default=[],
                        metavar="N", help="Input value (repeatable, used in order)")
    parser.add_argument("--set", dest="patches", type=parse_assignment,
                        action="append", default=[], metavar="ADDR=VALUE",
                        help="Overwrite a memory cell before running (repeatable)")
    parser.add_argument("--profile", default="full", choices=list(PROFILES),
                        help="Enabled opcode set (default: full)")
    parser.add_argument("--interactive", action="store_true",
                        help="Read input values from stdin instead of --input")
    parser.add_argument("--trace", action="store_true",
                        help="Log every executed instruction")
    parser.add_argument("--dump", action="store_true",
                        help="Print final memory contents")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Print run details to stderr")
    parser.add_argument("--version", action="version",
                        version=f"intcoderun {__version__}")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.trace:
        setup_logging(logging.DEBUG)
    elif args.verbose:
        setup_logging(logging.INFO)
    else:
        setup_logging()

    try:
        program = load_program(args.program)
    except FileNotFoundError:
        print(f"Error: File not found: {args.program}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error reading {args.program}: {e}", file=sys.stderr)
        return 1
    except ProgramFormatError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        return 1

    log.info("Program: %s (%d cells, profile %s)",
             args.program, len(program), args.profile)

    out = OutputCollector()

    def write(value: int):
        out(value)
        print(value)

    read = stdin_reader() if args.interactive else InputQueue(args.input)

    try:
        program = patch(program, dict(args.patches))
        comp = Computer(program, get_profile(args.profile))
        comp.enable_trace(args.trace)
        comp.run(read, write)
        print(f"Result: {comp.memory.read(0)}")
    except IntcodeError as e:
        print(f"Error: {e!r}", file=sys.stderr)
        return 1
    except ValueError as e:
        # Non-integer line typed in --interactive mode
        print(f"Error: bad input value: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Internal error: {e}", file=sys.stderr)
        if args.verbose:
            log.exception("Unhandled error")
        return 2

    log.info("Halted after %d steps, %d output value(s)", comp.steps, len(out))
    if args.dump:
        print(comp.memory.dump())
    return 0


if __name__ == "__main__":
    sys.exit(main())
