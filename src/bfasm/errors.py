from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

# How far the excerpt reaches on each side of the offending column.
EXCERPT_REACH = 9


@dataclass(frozen=True)
class SourcePosition:
    line: int  # 1-based
    column: int  # 0-based, within the line
    offset: int  # 0-based, within the whole source

    def __str__(self) -> str:
        return f"Line={self.line} | Col={self.column}"


def _extract_excerpt(line_text: str, column: int) -> Tuple[str, int]:
    if not line_text:
        return '', 0
    column = max(0, min(column, len(line_text) - 1))
    left = max(0, column - EXCERPT_REACH)
    right = min(len(line_text) - 1, column + EXCERPT_REACH)
    return line_text[left:right + 1], column - left


@dataclass
class BFAsmError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class LexicalError(BFAsmError):
    position: SourcePosition
    excerpt: str
    marker_offset: int

    def __str__(self) -> str:
        return f"{self.message} ({self.position})"

    @property
    def marker(self) -> str:
        return ' ' * self.marker_offset + '^'

    def report(self, source_name: Optional[str] = None) -> List[List[Tuple[str, str]]]:
        """
        Lines of the diagnostic as (text, part) segments. ``part`` is one of
        'label', 'where', 'excerpt', 'marker' or 'message', so a terminal can
        style each piece while the plain text stays the same.
        """
        where = f"{source_name} {self.position}" if source_name else str(self.position)
        space = ' ' * self.marker_offset
        return [
            [('Error', 'label'), (': ', 'marker'), (where, 'where')],
            [('    ', 'marker'), (self.excerpt, 'excerpt')],
            [(f"    {space}^", 'marker')],
            [(f"    {space}|----- ", 'marker'), (self.message, 'message')],
        ]

    def render(self, source_name: Optional[str] = None) -> str:
        return '\n'.join(''.join(text for text, _ in line) for line in self.report(source_name))


@dataclass
class UnmatchedBracketError(LexicalError):
    excess: int = 1


@dataclass
class PointerUnderflowError(LexicalError):
    pass


@dataclass
class InternalError(BFAsmError):
    pass


@dataclass
class UnexpectedNodeError(InternalError):
    node: Any = None


@dataclass
class BFAsmIOError(BFAsmError):
    path: Optional[str] = None


@dataclass
class SourceReadError(BFAsmIOError):
    pass


@dataclass
class OutputCreateError(BFAsmIOError):
    pass


@dataclass
class OutputWriteError(BFAsmIOError):
    pass


def make_lexical_error(cls, *, message: str, line_text: str, position: SourcePosition, **extra) -> LexicalError:
    excerpt, marker_offset = _extract_excerpt(line_text, position.column)
    return cls(
        message=message,
        position=position,
        excerpt=excerpt,
        marker_offset=marker_offset,
        **extra,
    )
