"""
Brainfuck grammar.

    Expr => { Loop | Op }*
    Loop => "[" Expr "]"
    Op   => ">" | "<" | "+" | "-" | "." | ","

The AST is a plain owned tree: a Loop holds its body list, an Operator is a
run of `count` identical adjacent operations.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union


class Token(Enum):
    MOVE_FORWARD = '>'
    MOVE_BACK = '<'
    ADD = '+'
    SUB = '-'
    STDOUT = '.'
    STDIN = ','
    LOOP_START = '['
    LOOP_END = ']'

    def __str__(self) -> str:
        return f"Token.{self.name}"


SYMBOLS = {t.value: t for t in Token}

BRACKETS = frozenset({Token.LOOP_START, Token.LOOP_END})
IO_TOKENS = frozenset({Token.STDOUT, Token.STDIN})


@dataclass
class Operator:
    kind: Token
    count: int = 1


@dataclass
class Loop:
    body: List["Expression"] = field(default_factory=list)


Expression = Union[Loop, Operator]
