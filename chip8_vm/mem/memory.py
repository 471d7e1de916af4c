"""
CHIP-8 Virtual Emulator - 4K Memory Map

Memory map:
  $000-$04F  Built-in hex font (80 bytes)
  $050-$1FF  Reserved (interpreter area on the original machines)
  $200-$FFF  Program image (3584 bytes)

All of memory is writable; CHIP-8 programs are free to modify themselves
and the font. An access past $FFF is a MemoryFault, never a silent wrap.
"""

import logging
from pathlib import Path
from typing import Union

from ..faults import MemoryFault
from .font import FONT_BASE, FONT_DATA

log = logging.getLogger(__name__)

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START  # 3584


class Memory:
    """4K byte-addressable memory with the font preloaded."""

    def __init__(self):
        self._mem = bytearray(MEMORY_SIZE)
        self.load_font()

    # --- Core read/write ---

    def read8(self, addr: int) -> int:
        if not 0 <= addr < MEMORY_SIZE:
            raise MemoryFault(addr)
        return self._mem[addr]

    def write8(self, addr: int, value: int):
        if not 0 <= addr < MEMORY_SIZE:
            raise MemoryFault(addr)
        self._mem[addr] = value & 0xFF

    def read16(self, addr: int) -> int:
        """Read a big-endian instruction word."""
        return (self.read8(addr) << 8) | self.read8(addr + 1)

    def read_block(self, addr: int, length: int) -> bytes:
        if length <= 0:
            return b''
        if addr < 0:
            raise MemoryFault(addr)
        if addr + length > MEMORY_SIZE:
            raise MemoryFault(max(addr, MEMORY_SIZE))
        return bytes(self._mem[addr:addr + length])

    def write_block(self, addr: int, data: bytes):
        """Write a run of bytes. Nothing is written if any byte would fall outside memory."""
        if not data:
            return
        if addr < 0:
            raise MemoryFault(addr)
        if addr + len(data) > MEMORY_SIZE:
            raise MemoryFault(max(addr, MEMORY_SIZE))
        self._mem[addr:addr + len(data)] = data

    def __len__(self) -> int:
        return MEMORY_SIZE

    # --- Bulk load ---

    def load_font(self):
        self._mem[FONT_BASE:FONT_BASE + len(FONT_DATA)] = FONT_DATA

    def load_program(self, data: bytes):
        """Copy a program image to $200, zero-filling the rest of program space.

        Raises ValueError if the image does not fit.
        """
        if len(data) > PROGRAM_SIZE:
            raise ValueError(
                f"Program image is {len(data)} bytes, "
                f"maximum is {PROGRAM_SIZE}")
        padded = bytes(data) + bytes(PROGRAM_SIZE - len(data))
        self._mem[PROGRAM_START:] = padded

    def clear(self):
        """Zero all memory and reload the font."""
        self._mem = bytearray(MEMORY_SIZE)
        self.load_font()

    # --- Hex dump ---

    def hexdump(self, start: int, length: int = 256) -> str:
        """Produce a hex dump of memory for debugging."""
        lines = []
        end = min(start + length, MEMORY_SIZE)
        for addr in range(start, end, 16):
            row = self._mem[addr:min(addr + 16, end)]
            hex_bytes = ' '.join(f'{b:02X}' for b in row)
            ascii_bytes = ''.join(
                chr(b) if 0x20 <= b < 0x7F else '.' for b in row)
            lines.append(f'{addr:03X}  {hex_bytes:<47}  {ascii_bytes}')
        return '\n'.join(lines)


def load_rom(path: Union[str, Path]) -> bytes:
    """Read a ROM file, keeping at most the 3584 bytes that fit at $200."""
    data = Path(path).read_bytes()
    if len(data) > PROGRAM_SIZE:
        log.warning("ROM %s is %d bytes; truncating to %d",
                    path, len(data), PROGRAM_SIZE)
        data = data[:PROGRAM_SIZE]
    log.debug("Loaded %d bytes from %s", len(data), path)
    return data
