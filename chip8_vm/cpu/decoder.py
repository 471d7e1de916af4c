"""
CHIP-8 Virtual Emulator - Instruction Decoder + Disassembler

Every CHIP-8 instruction is one big-endian 16-bit word. The word is split
into four nibbles:

    +--------+--------+--------+--------+
    |   op   |   x    |   y    |   n    |
    +--------+--------+--------+--------+
             |<------- nnn (12) ------->|
                      |<--- kk (8) ---->|

  op   - instruction class, first key of the dispatch table in emu.py
  x, y - register selectors
  n    - 4-bit immediate (sprite height, 8xyN sub-opcode)
  kk   - 8-bit immediate (also the sub-key for the 0, E and F groups)
  nnn  - 12-bit address

Mnemonics follow Cowgod's CHIP-8 technical reference.
"""

from typing import List, NamedTuple


class Instruction(NamedTuple):
    """A decoded instruction word."""
    word: int
    op: int
    x: int
    y: int
    n: int
    kk: int
    nnn: int


def decode(hi: int, lo: int) -> Instruction:
    """Split two instruction bytes into their fields."""
    word = (hi << 8) | lo
    return Instruction(
        word=word,
        op=hi >> 4,
        x=hi & 0x0F,
        y=lo >> 4,
        n=lo & 0x0F,
        kk=lo,
        nnn=word & 0x0FFF,
    )


def decode_word(word: int) -> Instruction:
    """Decode a 16-bit instruction word."""
    return decode((word >> 8) & 0xFF, word & 0xFF)


# ──────────────────────────────────────────────
# Opcode table: (mask, match, format)
# ──────────────────────────────────────────────
# Format fields are filled from the Instruction, so '{x:X}' is the x
# register selector and '{nnn:03X}' the address.

OPCODE_TABLE = [
    (0xFFFF, 0x00E0, 'CLS'),
    (0xFFFF, 0x00EE, 'RET'),
    (0xF000, 0x0000, 'SYS  ${nnn:03X}'),
    (0xF000, 0x1000, 'JP   ${nnn:03X}'),
    (0xF000, 0x2000, 'CALL ${nnn:03X}'),
    (0xF000, 0x3000, 'SE   V{x:X}, ${kk:02X}'),
    (0xF000, 0x4000, 'SNE  V{x:X}, ${kk:02X}'),
    (0xF00F, 0x5000, 'SE   V{x:X}, V{y:X}'),
    (0xF000, 0x6000, 'LD   V{x:X}, ${kk:02X}'),
    (0xF000, 0x7000, 'ADD  V{x:X}, ${kk:02X}'),
    (0xF00F, 0x8000, 'LD   V{x:X}, V{y:X}'),
    (0xF00F, 0x8001, 'OR   V{x:X}, V{y:X}'),
    (0xF00F, 0x8002, 'AND  V{x:X}, V{y:X}'),
    (0xF00F, 0x8003, 'XOR  V{x:X}, V{y:X}'),
    (0xF00F, 0x8004, 'ADD  V{x:X}, V{y:X}'),
    (0xF00F, 0x8005, 'SUB  V{x:X}, V{y:X}'),
    (0xF00F, 0x8006, 'SHR  V{x:X}, V{y:X}'),
    (0xF00F, 0x8007, 'SUBN V{x:X}, V{y:X}'),
    (0xF00F, 0x800E, 'SHL  V{x:X}, V{y:X}'),
    (0xF00F, 0x9000, 'SNE  V{x:X}, V{y:X}'),
    (0xF000, 0xA000, 'LD   I, ${nnn:03X}'),
    (0xF000, 0xB000, 'JP   V0, ${nnn:03X}'),
    (0xF000, 0xC000, 'RND  V{x:X}, ${kk:02X}'),
    (0xF000, 0xD000, 'DRW  V{x:X}, V{y:X}, {n}'),
    (0xF0FF, 0xE09E, 'SKP  V{x:X}'),
    (0xF0FF, 0xE0A1, 'SKNP V{x:X}'),
    (0xF0FF, 0xF007, 'LD   V{x:X}, DT'),
    (0xF0FF, 0xF00A, 'LD   V{x:X}, K'),
    (0xF0FF, 0xF015, 'LD   DT, V{x:X}'),
    (0xF0FF, 0xF018, 'LD   ST, V{x:X}'),
    (0xF0FF, 0xF01E, 'ADD  I, V{x:X}'),
    (0xF0FF, 0xF029, 'LD   F, V{x:X}'),
    (0xF0FF, 0xF033, 'LD   B, V{x:X}'),
    (0xF0FF, 0xF055, 'LD   [I], V{x:X}'),
    (0xF0FF, 0xF065, 'LD   V{x:X}, [I]'),
]


def mnemonic(word: int) -> str:
    """Disassemble one instruction word. Unknown words come back as DW."""
    ins = decode_word(word)
    for mask, match, fmt in OPCODE_TABLE:
        if word & mask == match:
            return fmt.format(**ins._asdict())
    return f'DW   ${word:04X}'


def disassemble(program: bytes, base: int = 0x200) -> List[str]:
    """Produce a listing of a program image, one line per word.

    Trailing zero words (the padding of a short ROM) are dropped. An odd
    final byte is shown as a DB.
    """
    end = len(program)
    while end >= 2 and program[end - 2] == 0 and program[end - 1] == 0:
        end -= 2

    lines = []
    for offset in range(0, end - 1, 2):
        word = (program[offset] << 8) | program[offset + 1]
        lines.append(f'${base + offset:03X}  {word:04X}  {mnemonic(word)}')
    if end % 2:
        lines.append(f'${base + end - 1:03X}  {program[end - 1]:02X}    '
                     f'DB   ${program[end - 1]:02X}')
    return lines
