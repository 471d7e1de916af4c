"""
CHIP-8 Virtual Emulator - Fatal Fault Types

A fault means the program image did something the machine cannot recover
from in place. cycle() raises these to the caller, which decides whether to
stop the frame loop. Non-fatal anomalies (unknown opcodes, jumps into the
reserved area) are logged instead, see emu.py.
"""

from typing import Optional


class EmulatorFault(Exception):
    """Base class for unrecoverable emulator faults."""

    def __init__(self, message: str, pc: Optional[int] = None):
        self.pc = pc
        if pc is not None:
            message = f"{message} (pc=${pc:03X})"
        super().__init__(message)


class StackOverflow(EmulatorFault):
    """CALL with all 16 stack slots in use."""


class StackUnderflow(EmulatorFault):
    """RET with an empty call stack."""


class MemoryFault(EmulatorFault):
    """Access outside the 4K address space."""

    def __init__(self, addr: int, pc: Optional[int] = None):
        self.addr = addr
        super().__init__(f"Memory access out of range at ${addr:X}", pc)
