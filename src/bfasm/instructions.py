"""
Assembly fragments (GNU as, AT&T syntax, i386 Linux, `int $0x80`).

Every fragment is a template plus its parameters. Registers appear only as
role fields (`{pointer}`, `{value}`, ...) and are filled in by a RegisterMap
when the program is rendered; see registers.py.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

from .grammar import Token
from .registers import RegisterMap

TAPE = 'array'
TAPE_LEN = 'array_len'
PROMPT = 'input_prompt'
LOOP = 'LOOP'
EXIT = 'EXIT'

DEFAULT_PROMPT = "Enter a character: "

SYMBOL_FIELDS = {
    'tape': TAPE,
    'tape_len': TAPE_LEN,
    'prompt': PROMPT,
    'exit': EXIT,
}


class SysCall(IntEnum):
    EXIT = 1
    READ = 3
    WRITE = 4


class FileDescriptor(IntEnum):
    STDIN = 0
    STDOUT = 1


@dataclass(frozen=True)
class Fragment:
    template: str
    params: Tuple[Tuple[str, Any], ...] = ()
    # Set on fragments realizing an Operator, rendered as a comment.
    token: Optional[Token] = None
    count: Optional[int] = None

    def render(self, registers: RegisterMap) -> str:
        fields: Dict[str, Any] = dict(SYMBOL_FIELDS)
        fields.update(registers.format_fields())
        fields.update(self.params)
        text = self.template.format(**fields)
        if self.token is not None:
            text = f"\n    # {self.token} | Count: {self.count}" + text
        return text


def _fragment(template: str, **params) -> Fragment:
    return Fragment(template=template, params=tuple(sorted(params.items())))


# ---------------- Registers ----------------

_SAVE_REGS = """
    # Save tape length & cell pointer
    movl    {tape_length}, {save_length}
    movl    {pointer}, {save_pointer}"""

_RESTORE_REGS = """
    # Restore tape length & cell pointer
    movl    {save_length}, {tape_length}
    movl    {save_pointer}, {pointer}"""

# Address of the current cell into SCRATCH, its value zero-extended into VALUE.
_LOAD_CELL = """
    leal    {tape}({pointer}), {scratch}
    movzbl  ({scratch}), {value}"""


# ---------------- Program frame ----------------

def data_section(tape_length: int) -> Fragment:
    return _fragment(
        """
.data
    {tape_len}: .long {length}          # length of the cell tape
    {tape}: .space {length}             # the cell tape, one byte per cell
""",
        length=tape_length,
    )


def _asciz_escape(text: str) -> str:
    out = []
    for byte in text.encode('utf-8'):
        ch = chr(byte)
        if ch in '"\\':
            out.append('\\' + ch)
        elif 32 <= byte < 127:
            out.append(ch)
        else:
            out.append(f"\\{byte:03o}")
    return ''.join(out)


def prompt_declaration(prompt: str) -> Fragment:
    return _fragment(
        """    {prompt}: .asciz "{prompt_text}"    # shown before reading a byte
""",
        prompt_text=_asciz_escape(prompt),
    )


def program_entry() -> Fragment:
    return _fragment(
        """
.text
.globl _start
_start:
    movl    {tape_len}, {tape_length}           # load the tape length
    xorl    {pointer}, {pointer}                # start filling at cell 0

fill_tape:
    movb    $0, {tape}({pointer})               # clear the cell
    incl    {pointer}
    cmpl    {tape_length}, {pointer}
    jl      fill_tape
    xorl    {pointer}, {pointer}                # cell pointer back to 0
"""
    )


def program_exit() -> Fragment:
    return _fragment(
        """
{exit}:
    movl    ${number}, {sys_number}             # sys_exit
    xorl    {sys_fd}, {sys_fd}                  # exit status 0
    int     $0x80
""",
        number=int(SysCall.EXIT),
    )


def debug_dump_tape() -> Fragment:
    """Writes the raw tape to stdout. Only emitted right before the exit."""
    return _fragment(
        """
DEBUG_PRINT_TAPE:
    movl    ${number}, {sys_number}             # sys_write
    movl    ${fd}, {sys_fd}                     # stdout
    movl    ${tape}, {sys_buffer}               # address of the tape
    movl    {tape_len}, {sys_length}            # the whole tape
    int     $0x80
""",
        number=int(SysCall.WRITE),
        fd=int(FileDescriptor.STDOUT),
    )


# ---------------- Cell pointer & cell values ----------------

def _offset_cell_ptr(instr: str, amount: int) -> Fragment:
    return _fragment(
        """
    {instr}    ${amount}, {pointer}
""",
        instr=instr,
        amount=amount,
    )


def _modify_cell(instr: str, amount: int) -> Fragment:
    # The byte store wraps the value modulo 256.
    return _fragment(
        _LOAD_CELL + """
    {instr}    ${amount}, {value}
    movb    {value_byte}, ({scratch})
""",
        instr=instr,
        amount=amount,
    )


def cell_ptr_increment(count: int) -> Fragment:
    return _offset_cell_ptr('addl', count)


def cell_ptr_decrement(count: int) -> Fragment:
    return _offset_cell_ptr('subl', count)


def cell_increment(count: int) -> Fragment:
    return _modify_cell('addl', count)


def cell_decrement(count: int) -> Fragment:
    return _modify_cell('subl', count)


# ---------------- I/O ----------------

_SYS_CALL_CELL = """
    # {title}""" + _SAVE_REGS + """
    leal    {tape}({pointer}), {scratch}        # address of the current cell
    movl    {scratch}, {sys_buffer}
    movl    ${number}, {sys_number}
    movl    ${fd}, {sys_fd}
    movl    $1, {sys_length}                    # one byte
    int     $0x80""" + _RESTORE_REGS + "\n"

_SYS_CALL_PROMPT = """
    # Prompt user for input""" + _SAVE_REGS + """
    movl    ${prompt}, {sys_buffer}             # address of the prompt
    movl    ${write_number}, {sys_number}
    movl    ${stdout_fd}, {sys_fd}
    movl    ${prompt_length}, {sys_length}
    int     $0x80""" + _RESTORE_REGS + "\n"


def print_cell() -> Fragment:
    return _fragment(
        _SYS_CALL_CELL,
        title="Print character at index",
        number=int(SysCall.WRITE),
        fd=int(FileDescriptor.STDOUT),
    )


def read_to_cell(prompt: str = DEFAULT_PROMPT) -> Fragment:
    return _fragment(
        _SYS_CALL_PROMPT + _SYS_CALL_CELL,
        title="Read one byte into the cell at index",
        write_number=int(SysCall.WRITE),
        stdout_fd=int(FileDescriptor.STDOUT),
        prompt_length=len(prompt.encode('utf-8')),
        number=int(SysCall.READ),
        fd=int(FileDescriptor.STDIN),
    )


# ---------------- Loops ----------------

def loop_label(depth: int, loop_id: int) -> str:
    return f"{LOOP}_L{depth}_C{loop_id}"


def loop_ret_label(depth: int, loop_id: int) -> str:
    return f"{loop_label(depth, loop_id)}_RET"


def loop_call(depth: int, loop_id: int) -> Fragment:
    """Jump into the loop unless the current cell is zero, then mark where it returns to."""
    return _fragment(
        """
    # Enter {label} if the current cell is not zero""" + _LOAD_CELL + """
    cmpl    $0, {value}
    je      {ret_label}
    jmp     {label}
{ret_label}:
""",
        label=loop_label(depth, loop_id),
        ret_label=loop_ret_label(depth, loop_id),
    )


def loop_entry(depth: int, loop_id: int) -> Fragment:
    return _fragment(
        """
{label}:
""",
        label=loop_label(depth, loop_id),
    )


def loop_end(depth: int, loop_id: int) -> Fragment:
    return _fragment(
        """
    # Check if the current cell is zero""" + _LOAD_CELL + """
    cmpl    $0, {value}
    jne     {label}
    # End loop if the current cell is zero
    jmp     {ret_label}
""",
        label=loop_label(depth, loop_id),
        ret_label=loop_ret_label(depth, loop_id),
    )
