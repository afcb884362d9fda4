from __future__ import annotations

import logging
from typing import List, Optional

from .errors import (
    InternalError,
    PointerUnderflowError,
    SourcePosition,
    UnmatchedBracketError,
    make_lexical_error,
)
from .grammar import SYMBOLS, Token

logger = logging.getLogger(__name__)


class Lexer:
    """
    Turns Brainfuck source into a token list.

    Two static checks run while scanning:
    - bracket balance: a ']' without an open '[' fails on the spot, unclosed
      '[' fail once the whole source has been read
    - pointer simulation: the cell pointer starts at 0 and may never be moved
      below it by the straight-line sequence of '<' and '>'

    Any character that is neither whitespace nor one of the eight symbols
    starts a comment running to the end of its line.
    """

    def __init__(self, source: str):
        self._raw_lines = source.split('\n')
        self.lines = [line[:-1] if line.endswith('\r') else line for line in self._raw_lines]
        self._tokens: Optional[List[Token]] = None
        self._taken = False
        self._bracket_balance = 0

    @property
    def bracket_balance(self) -> int:
        """Unclosed '[' left by the last scan that reached the end of the source."""
        return self._bracket_balance

    def tokenize(self) -> List[Token]:
        if self._taken:
            raise InternalError("Token list has already been handed over")
        if self._tokens is not None:
            return self._tokens

        tokens: List[Token] = []
        open_brackets: List[SourcePosition] = []  # unclosed '[' in source order
        ptr = 0
        offset = 0
        for line_no_0, line in enumerate(self.lines):
            for col, ch in enumerate(line):
                if ch.isspace():
                    continue
                token = SYMBOLS.get(ch)
                if token is None:
                    # comment: skip the rest of the line
                    break

                pos = SourcePosition(line=line_no_0 + 1, column=col, offset=offset + col)
                if token is Token.LOOP_START:
                    open_brackets.append(pos)
                elif token is Token.LOOP_END:
                    if not open_brackets:
                        raise make_lexical_error(
                            UnmatchedBracketError,
                            message="Not enough matches for ']'",
                            line_text=line,
                            position=pos,
                            excess=1,
                        )
                    open_brackets.pop()
                elif token is Token.MOVE_FORWARD:
                    ptr += 1
                elif token is Token.MOVE_BACK:
                    ptr -= 1
                    if ptr < 0:
                        raise make_lexical_error(
                            PointerUnderflowError,
                            message="Cell pointer moves below the start of the tape",
                            line_text=line,
                            position=pos,
                        )
                tokens.append(token)
            offset += len(self._raw_lines[line_no_0]) + 1

        self._bracket_balance = len(open_brackets)
        if open_brackets:
            first = open_brackets[0]
            raise make_lexical_error(
                UnmatchedBracketError,
                message=f"An excess of {self._bracket_balance} '[' brackets were found",
                line_text=self.lines[first.line - 1],
                position=first,
                excess=self._bracket_balance,
            )

        logger.debug("lexed %d tokens from %d lines", len(tokens), len(self.lines))
        self._tokens = tokens
        return tokens

    def take_tokens(self) -> List[Token]:
        """Hand the token list over to the caller. Allowed once per lexer."""
        tokens = self.tokenize()
        self._tokens = None
        self._taken = True
        return tokens


def tokenize(source: str) -> List[Token]:
    return Lexer(source).take_tokens()
