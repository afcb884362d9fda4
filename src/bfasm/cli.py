from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.text import Text

from .api import CompileOptions, compile_string, read_source, write_output
from .errors import BFAsmIOError, InternalError, LexicalError
from .instructions import DEFAULT_PROMPT

logger = logging.getLogger("bfasm")

EXIT_OK = 0
EXIT_LEXICAL_ERROR = 1
EXIT_IO_ERROR = 2
EXIT_INTERNAL_ERROR = 3

console = Console(stderr=True)

_REPORT_STYLES = {
    'label': "bold red",
    'where': "bold",
    'excerpt': "white",
    'marker': "",
    'message': "red",
}


def _setup_logging(verbosity: int, quiet: bool = False) -> None:
    level = logging.WARNING
    if quiet:
        level = logging.ERROR
    elif verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def print_lexical_error(err: LexicalError, *, source_name: str) -> None:
    for line in err.report(source_name):
        text = Text()
        for segment, part in line:
            text.append(segment, style=_REPORT_STYLES[part])
        console.print(text, soft_wrap=True)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bfasm",
        description="Compile Brainfuck to i386 assembly (GNU as, AT&T syntax).",
    )
    parser.add_argument("source", help="Brainfuck source file")
    parser.add_argument("-o", "--output", help="Output .asm file. Defaults to <source>.asm next to the source")
    parser.add_argument("--stdout", action="store_true", help="Write the assembly to stdout instead of a file")
    parser.add_argument("--no-optimize", action="store_true", help="Do not merge runs of identical operators")
    parser.add_argument("--tape-length", type=int, default=26, help="Number of cells on the tape (default 26)")
    parser.add_argument("--prompt", default=DEFAULT_PROMPT, help="Prompt printed before each ',' reads a byte")
    parser.add_argument("--dump-tape", action="store_true", help="Write the raw tape to stdout before exiting")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose, args.quiet)

    if args.tape_length < 1:
        parser.error("--tape-length must be at least 1")

    options = CompileOptions(
        optimize=not args.no_optimize,
        tape_length=args.tape_length,
        prompt=args.prompt,
        dump_tape=args.dump_tape,
    )
    out_path = Path(args.output) if args.output else Path(args.source).with_suffix('.asm')

    try:
        source = read_source(args.source)
        result = compile_string(source, options=options)
    except LexicalError as e:
        print_lexical_error(e, source_name=args.source)
        return EXIT_LEXICAL_ERROR
    except BFAsmIOError as e:
        logger.error("%s", e)
        return EXIT_IO_ERROR
    except InternalError as e:
        logger.error("internal compiler error: %s", e)
        return EXIT_INTERNAL_ERROR
    except RecursionError:
        logger.error("internal compiler error: loops are nested too deeply")
        return EXIT_INTERNAL_ERROR

    logger.info(
        "compiled %d instructions (%d loops, optimize=%s)",
        result.instruction_count, result.loop_count, options.optimize,
    )

    if args.stdout:
        sys.stdout.write(result.asm)
        return EXIT_OK

    try:
        write_output(result.asm, out_path)
    except BFAsmIOError as e:
        logger.error("%s", e)
        return EXIT_IO_ERROR

    console.print(f"[green]The ASM code was successfully generated:[/green] {escape(str(out_path))}")
    return EXIT_OK
