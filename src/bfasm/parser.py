from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .errors import InternalError
from .grammar import Expression, Loop, Operator, Token

logger = logging.getLogger(__name__)


class Parser:
    """
    Recursive descent over a bracket-balanced token list.

    '[' opens a nested level, ']' closes the current one, every other token
    becomes an Operator with count 1. Balance is checked by the lexer, so a
    stray ']' or a missing one here is an internal error.
    """

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = tokens
        self.index = 0
        self.syntax_tree: Optional[List[Expression]] = None
        self.instruction_count = 0

    def parse(self) -> List[Expression]:
        if self.syntax_tree is not None:
            return self.syntax_tree

        self.index = 0
        ast = self._parse_level(depth=0)
        self.syntax_tree = ast
        self.instruction_count = count_instructions(ast)
        logger.debug("parsed %d instructions", self.instruction_count)
        return ast

    def _parse_level(self, depth: int) -> List[Expression]:
        expressions: List[Expression] = []
        while self.index < len(self.tokens):
            token = self.tokens[self.index]
            self.index += 1

            if token is Token.LOOP_START:
                expressions.append(Loop(self._parse_level(depth + 1)))
            elif token is Token.LOOP_END:
                if depth == 0:
                    raise InternalError(f"Unexpected ']' at token {self.index - 1}")
                return expressions
            else:
                expressions.append(Operator(token, 1))

        if depth > 0:
            raise InternalError("Token list ends inside a loop")
        return expressions


def parse(tokens: Sequence[Token]) -> List[Expression]:
    return Parser(tokens).parse()


def count_instructions(ast: Sequence[Expression]) -> int:
    """Operators count 1, loops count 1 plus their body."""
    count = 0
    for node in ast:
        if isinstance(node, Loop):
            count += 1 + count_instructions(node.body)
        else:
            count += 1
    return count


def count_loops(ast: Sequence[Expression]) -> int:
    count = 0
    for node in ast:
        if isinstance(node, Loop):
            count += 1 + count_loops(node.body)
    return count
