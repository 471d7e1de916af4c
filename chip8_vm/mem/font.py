"""
CHIP-8 Virtual Emulator - Built-in Hex Font

Sixteen 4x5 glyphs for the digits 0-F, five bytes each, left-aligned in
the high nibble of every row. Loaded at $000 so that Fx29 can find glyph
N at address N * 5.
"""

FONT_BASE = 0x000
GLYPH_HEIGHT = 5

FONT_DATA = bytes([
    0x60, 0x90, 0x90, 0x90, 0x60,  # 0
    0x60, 0x20, 0x20, 0x20, 0x70,  # 1
    0xC0, 0x20, 0x60, 0x80, 0x60,  # 2
    0xC0, 0x20, 0xE0, 0x20, 0xC0,  # 3
    0x90, 0x90, 0x70, 0x10, 0x10,  # 4
    0x70, 0x40, 0x70, 0x10, 0x60,  # 5
    0x70, 0x80, 0xE0, 0x90, 0x60,  # 6
    0x70, 0x10, 0x20, 0x20, 0x40,  # 7
    0x60, 0x90, 0x60, 0x90, 0x60,  # 8
    0x30, 0x50, 0x70, 0x10, 0x60,  # 9
    0x60, 0xA0, 0xE0, 0xA0, 0xA0,  # A
    0xC0, 0xA0, 0xE0, 0xA0, 0xC0,  # B
    0x70, 0x80, 0x80, 0x80, 0x70,  # C
    0x60, 0x50, 0x50, 0x50, 0x60,  # D
    0x70, 0x80, 0xF0, 0x80, 0x70,  # E
    0x70, 0x40, 0x70, 0x40, 0x40,  # F
])


def glyph_address(digit: int) -> int:
    """Address of the glyph for the low nibble of digit."""
    return FONT_BASE + (digit & 0x0F) * GLYPH_HEIGHT
