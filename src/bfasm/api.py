from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .codegen import CodeGenerator
from .errors import OutputCreateError, OutputWriteError, SourceReadError
from .grammar import Expression
from .instructions import DEFAULT_PROMPT
from .lexer import Lexer
from .optimizer import optimize_ast
from .parser import Parser, count_loops
from .registers import I386_REGISTERS, RegisterMap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileOptions:
    optimize: bool = True
    tape_length: int = 26
    prompt: str = DEFAULT_PROMPT
    dump_tape: bool = False
    registers: RegisterMap = I386_REGISTERS


@dataclass(frozen=True)
class CompileResult:
    asm: str
    instruction_count: int
    loop_count: int
    used_stdin: bool
    used_stdout: bool
    ast: List[Expression]


def compile_string(source: str, *, options: Optional[CompileOptions] = None) -> CompileResult:
    opts = options or CompileOptions()

    tokens = Lexer(source).take_tokens()
    parser = Parser(tokens)
    ast = parser.parse()
    if opts.optimize:
        optimize_ast(ast)

    generator = CodeGenerator(
        ast,
        tape_length=opts.tape_length,
        prompt=opts.prompt,
        dump_tape=opts.dump_tape,
        registers=opts.registers,
    )
    text = generator.generate()
    state = generator.state
    return CompileResult(
        asm=text,
        instruction_count=parser.instruction_count,
        loop_count=count_loops(ast),
        used_stdin=state.used_stdin,
        used_stdout=state.used_stdout,
        ast=ast,
    )


def read_source(path: str | Path, *, encoding: str = "utf-8") -> str:
    p = Path(path)
    try:
        return p.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"Could not read {p}: {e}", path=str(p)) from e


def compile_file(path: str | Path, *, options: Optional[CompileOptions] = None, encoding: str = "utf-8") -> CompileResult:
    return compile_string(read_source(path, encoding=encoding), options=options)


def write_output(text: str, path: str | Path) -> None:
    p = Path(path)
    try:
        f = open(p, 'w', encoding='utf-8')
    except OSError as e:
        raise OutputCreateError(f"Could not create {p}: {e}", path=str(p)) from e
    try:
        with f:
            f.write(text)
    except OSError as e:
        raise OutputWriteError(f"Could not write {p}: {e}", path=str(p)) from e
    logger.info("wrote %d bytes of assembly to %s", len(text.encode('utf-8')), p)
