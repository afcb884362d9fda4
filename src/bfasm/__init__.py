
from .api import CompileOptions, CompileResult, compile_file, compile_string, read_source, write_output
from .codegen import CodeGenerator, generate_asm
from .errors import (
    BFAsmError,
    BFAsmIOError,
    InternalError,
    LexicalError,
    OutputCreateError,
    OutputWriteError,
    PointerUnderflowError,
    SourcePosition,
    SourceReadError,
    UnexpectedNodeError,
    UnmatchedBracketError,
)
from .grammar import Expression, Loop, Operator, Token
from .lexer import Lexer, tokenize
from .optimizer import optimize_ast
from .parser import Parser, count_instructions, count_loops, parse

__all__ = [
    'CompileOptions',
    'CompileResult',
    'compile_string',
    'compile_file',
    'read_source',
    'write_output',
    'CodeGenerator',
    'generate_asm',
    'BFAsmError',
    'BFAsmIOError',
    'InternalError',
    'LexicalError',
    'OutputCreateError',
    'OutputWriteError',
    'PointerUnderflowError',
    'SourcePosition',
    'SourceReadError',
    'UnexpectedNodeError',
    'UnmatchedBracketError',
    'Expression',
    'Loop',
    'Operator',
    'Token',
    'Lexer',
    'tokenize',
    'optimize_ast',
    'Parser',
    'parse',
    'count_instructions',
    'count_loops',
]
