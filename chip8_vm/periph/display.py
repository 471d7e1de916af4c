"""
CHIP-8 Virtual Emulator - 64x32 Monochrome Frame Buffer

pixels[y][x] is 0 or 1, row-major, (0, 0) at the top left. Only two
operations change it: clear() for 00E0 and draw_sprite() for Dxyn.

Sprites are XORed onto the screen. Coordinates wrap around both edges
(a sprite drawn at x=62 continues at x=0 on the same row); they are
never clipped.
"""

from typing import List

WIDTH = 64
HEIGHT = 32
SPRITE_WIDTH = 8


class Display:
    """CHIP-8 frame buffer."""

    def __init__(self):
        self.pixels: List[List[int]] = [[0] * WIDTH for _ in range(HEIGHT)]

    def clear(self):
        self.pixels = [[0] * WIDTH for _ in range(HEIGHT)]

    def draw_sprite(self, x: int, y: int, rows: bytes) -> bool:
        """XOR an 8-pixel-wide sprite onto the screen at (x, y).

        Each byte of rows is one sprite row, MSB leftmost. Returns True if
        any pixel that was on got turned off (the VF collision flag).
        """
        x %= WIDTH
        y %= HEIGHT
        erased = False
        for dy, bits in enumerate(rows):
            line = self.pixels[(y + dy) % HEIGHT]
            for dx in range(SPRITE_WIDTH):
                if not (bits >> (7 - dx)) & 1:
                    continue
                col = (x + dx) % WIDTH
                if line[col]:
                    erased = True
                    line[col] = 0
                else:
                    line[col] = 1
        return erased

    def pixel(self, x: int, y: int) -> int:
        return self.pixels[y % HEIGHT][x % WIDTH]

    @property
    def lit(self) -> int:
        """Number of pixels currently on."""
        return sum(sum(row) for row in self.pixels)

    def render_text(self, on: str = '#', off: str = '.') -> str:
        """One character per pixel, one line per row."""
        return '\n'.join(
            ''.join(on if p else off for p in row) for row in self.pixels)
