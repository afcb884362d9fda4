"""
Register roles.

Instruction templates never name a machine register. They name a Role, and
the RegisterMap decides which register plays it when the program text is
rendered.

NOTE: the syscall argument roles share registers with the tape roles in the
i386 map (number/value, fd/scratch, buffer/tape length, length/pointer).
Every syscall fragment therefore saves TAPE_LENGTH and POINTER into the save
slots first and restores them afterwards. Any new map has to keep the save
slots clear of the syscall roles; `validate()` checks that.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping


class Role(Enum):
    POINTER = 'pointer'
    TAPE_LENGTH = 'tape_length'
    SCRATCH = 'scratch'
    VALUE = 'value'
    VALUE_BYTE = 'value_byte'
    SAVE_LENGTH = 'save_length'
    SAVE_POINTER = 'save_pointer'
    SYSCALL_NUMBER = 'sys_number'
    SYSCALL_FD = 'sys_fd'
    SYSCALL_BUFFER = 'sys_buffer'
    SYSCALL_LENGTH = 'sys_length'


SYSCALL_ROLES = (Role.SYSCALL_NUMBER, Role.SYSCALL_FD, Role.SYSCALL_BUFFER, Role.SYSCALL_LENGTH)
SAVE_SLOTS = {Role.TAPE_LENGTH: Role.SAVE_LENGTH, Role.POINTER: Role.SAVE_POINTER}


@dataclass(frozen=True)
class RegisterMap:
    name: str
    registers: Mapping[Role, str]

    def validate(self) -> None:
        missing = [r.name for r in Role if r not in self.registers]
        if missing:
            raise ValueError(f"Register map '{self.name}' has no register for: {', '.join(missing)}")

        syscall_regs = {self.registers[r] for r in SYSCALL_ROLES}
        for saved, slot in SAVE_SLOTS.items():
            slot_reg = self.registers[slot]
            if slot_reg in syscall_regs:
                raise ValueError(
                    f"Register map '{self.name}': save slot {slot.name} ({slot_reg}) is clobbered by a syscall"
                )
            if slot_reg == self.registers[saved]:
                raise ValueError(
                    f"Register map '{self.name}': {saved.name} and its save slot share {slot_reg}"
                )

    def format_fields(self) -> Dict[str, str]:
        return {role.value: reg for role, reg in self.registers.items()}


I386_REGISTERS = RegisterMap(
    name='i386',
    registers={
        Role.VALUE: '%eax',
        Role.VALUE_BYTE: '%al',
        Role.SCRATCH: '%ebx',
        Role.TAPE_LENGTH: '%ecx',
        Role.POINTER: '%edx',
        Role.SAVE_LENGTH: '%esi',
        Role.SAVE_POINTER: '%edi',
        Role.SYSCALL_NUMBER: '%eax',
        Role.SYSCALL_FD: '%ebx',
        Role.SYSCALL_BUFFER: '%ecx',
        Role.SYSCALL_LENGTH: '%edx',
    },
)
