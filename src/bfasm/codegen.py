from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, Sequence

from . import instructions as asm
from .errors import UnexpectedNodeError
from .grammar import Expression, Loop, Operator, Token
from .registers import I386_REGISTERS, RegisterMap
from .state import GeneratorState

logger = logging.getLogger(__name__)

_OPERATOR_FRAGMENTS = {
    Token.MOVE_FORWARD: asm.cell_ptr_increment,
    Token.MOVE_BACK: asm.cell_ptr_decrement,
    Token.ADD: asm.cell_increment,
    Token.SUB: asm.cell_decrement,
}


class CodeGenerator:
    """
    Generates i386 assembly from a Brainfuck AST.

    Output layout:
    - main flow: data section, input prompt (only if ',' is used), program
      entry, the top level instructions in source order, exit
    - loop bodies: one labeled block per loop, appended when its body is
      complete, so nested loops come before the loop containing them

    A loop is entered through a jump at its call site; the continuation label
    right after that jump is where the loop's tail returns once the current
    cell is zero.
    """

    def __init__(
        self,
        syntax_tree: Sequence[Expression],
        *,
        tape_length: int = 26,
        prompt: str = asm.DEFAULT_PROMPT,
        dump_tape: bool = False,
        registers: RegisterMap = I386_REGISTERS,
    ):
        if tape_length < 1:
            raise ValueError(f"Tape length must be at least 1, got {tape_length}")
        registers.validate()
        self.syntax_tree = syntax_tree
        self.tape_length = tape_length
        self.prompt = prompt
        self.dump_tape = dump_tape
        self.registers = registers
        self.state: Optional[GeneratorState] = None

    def generate(self) -> str:
        state = GeneratorState()
        self._generate(self.syntax_tree, state, depth=0, loop_id=None)
        self._inject_frame(state)
        self.state = state

        logger.debug(
            "generated %d main fragments and %d loop fragments for %d loops",
            len(state.main_flow), len(state.loop_bodies), state.loops_generated,
        )
        return self.render(state)

    def render(self, state: GeneratorState) -> str:
        parts = [f.render(self.registers) for f in state.main_flow]
        parts.extend(f.render(self.registers) for f in state.loop_bodies)
        return ''.join(parts)

    def _generate(
        self,
        nodes: Sequence[Expression],
        state: GeneratorState,
        depth: int,
        loop_id: Optional[int],
    ) -> None:
        # Instructions of the current level, in source order
        fragments: List[asm.Fragment] = []

        for node in nodes:
            if isinstance(node, Loop):
                child_id = state.assign_loop_id()
                fragments.append(asm.loop_call(depth, child_id))
                self._generate(node.body, state, depth + 1, child_id)
            elif isinstance(node, Operator):
                fragments.extend(self._operator(node, state))
            else:
                raise UnexpectedNodeError(f"Unexpected node {node!r} when generating assembly", node=node)

        if loop_id is None:
            state.main_flow.extend(fragments)
            return

        state.loop_bodies.append(asm.loop_entry(depth - 1, loop_id))
        state.loop_bodies.extend(fragments)
        state.loop_bodies.append(asm.loop_end(depth - 1, loop_id))

    def _operator(self, op: Operator, state: GeneratorState) -> List[asm.Fragment]:
        build = _OPERATOR_FRAGMENTS.get(op.kind)
        if build is not None:
            fragments = [build(op.count)]
        elif op.kind is Token.STDOUT:
            state.used_stdout = True
            fragments = [asm.print_cell()] * op.count
        elif op.kind is Token.STDIN:
            state.used_stdin = True
            fragments = [asm.read_to_cell(self.prompt)] * op.count
        else:
            raise UnexpectedNodeError(f"Unexpected token {op.kind} when generating assembly", node=op)
        # I/O runs have no single instruction form, they repeat the syscall
        fragments[0] = replace(fragments[0], token=op.kind, count=op.count)
        return fragments

    def _inject_frame(self, state: GeneratorState) -> None:
        head = [asm.data_section(self.tape_length)]
        if state.used_stdin:
            # still part of the data section
            head.append(asm.prompt_declaration(self.prompt))
        head.append(asm.program_entry())
        state.main_flow[:0] = head

        if self.dump_tape:
            state.main_flow.append(asm.debug_dump_tape())
        state.main_flow.append(asm.program_exit())


def generate_asm(syntax_tree: Sequence[Expression], **options) -> str:
    return CodeGenerator(syntax_tree, **options).generate()
