from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .instructions import Fragment


@dataclass
class GeneratorState:
    """Everything the code generator accumulates while walking the AST."""

    main_flow: List[Fragment] = field(default_factory=list)
    loop_bodies: List[Fragment] = field(default_factory=list)
    # Next loop identifier to hand out. Identifiers are never reused.
    next_loop_id: int = 1
    loops_generated: int = 0
    used_stdin: bool = False
    used_stdout: bool = False

    def assign_loop_id(self) -> int:
        loop_id = self.next_loop_id
        self.next_loop_id += 1
        self.loops_generated += 1
        return loop_id
