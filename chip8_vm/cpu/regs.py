"""
CHIP-8 Virtual Emulator - CPU Register Set + Call Stack

Register model for CHIP-8:
  V0-VF  - 16 general purpose 8-bit registers
           VF doubles as the flag register (carry, no-borrow, shifted-out
           bit, sprite collision) and is clobbered by those instructions
  I      - address register (12-bit addresses, held in 16 bits)
  PC     - program counter, starts at $200
  SP     - call stack depth, 0..16
  stack  - 16 saved return addresses

The call stack is not in addressable memory on CHIP-8, so it lives here
instead of in mem/memory.py.
"""

from typing import List

from ..faults import StackOverflow, StackUnderflow

NUM_REGISTERS = 16
STACK_DEPTH = 16
PROGRAM_START = 0x200

VF = 0xF


class Registers:
    """CHIP-8 CPU register set."""

    __slots__ = ('V', 'I', 'PC', 'SP', 'stack')

    def __init__(self):
        self.V: List[int] = [0] * NUM_REGISTERS
        self.I: int = 0
        self.PC: int = PROGRAM_START
        self.SP: int = 0
        self.stack: List[int] = [0] * STACK_DEPTH

    # --- Flag register ---

    @property
    def flag(self) -> int:
        return self.V[VF]

    @flag.setter
    def flag(self, value: int):
        self.V[VF] = value & 0xFF

    # --- Stack operations ---

    def push(self, addr: int):
        """Save a return address. Raises StackOverflow when all 16 slots are used."""
        if self.SP >= STACK_DEPTH:
            raise StackOverflow(
                "Maximum emulated call stack size exceeded", self.PC)
        self.stack[self.SP] = addr
        self.SP += 1

    def pop(self) -> int:
        """Pop the most recent return address. Raises StackUnderflow when empty."""
        if self.SP == 0:
            raise StackUnderflow(
                "Emulated program attempted to return on an empty stack",
                self.PC)
        self.SP -= 1
        return self.stack[self.SP]

    # --- Display ---

    def display(self) -> str:
        """Format register state for debugging."""
        v = ' '.join(f'{val:02X}' for val in self.V)
        return f"PC={self.PC:03X} I={self.I:03X} SP={self.SP:X} V=[{v}]"

    def reset(self):
        """Reset CPU to power-on state."""
        self.V = [0] * NUM_REGISTERS
        self.I = 0
        self.PC = PROGRAM_START
        self.SP = 0
        self.stack = [0] * STACK_DEPTH
