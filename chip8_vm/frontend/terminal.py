"""
CHIP-8 Virtual Emulator - Terminal Frontend (rich)

Draws the 64x32 screen in a 64x16 character block, two pixel rows per
character cell using half-block glyphs. No keyboard input: this view is
for watching demos and for headless runs that print the final screen.
"""

import time
from typing import List, Optional

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ..config import RunConfig
from ..emu import Chip8Emulator, StopReason

# (top pixel, bottom pixel) -> glyph
HALF_BLOCKS = {
    (0, 0): ' ',
    (1, 0): '▀',  # upper half block
    (0, 1): '▄',  # lower half block
    (1, 1): '█',  # full block
}


def render_half_blocks(pixels: List[List[int]]) -> Text:
    lines = []
    for y in range(0, len(pixels), 2):
        top = pixels[y]
        bottom = pixels[y + 1] if y + 1 < len(pixels) else [0] * len(top)
        lines.append(''.join(HALF_BLOCKS[(t, b)] for t, b in zip(top, bottom)))
    return Text('\n'.join(lines), style='bright_white on black')


def status_line(emu: Chip8Emulator) -> Text:
    regs = emu.regs
    text = (f"PC ${regs.PC:03X}  I ${regs.I:03X}  SP {regs.SP:2d}  "
            f"DT {emu.timers.delay:3d}  ST {emu.timers.sound:3d}  "
            f"cycles {emu.cycles}")
    if emu.awaiting_keypress:
        text += f"  [waiting for key -> V{emu.target_register:X}]"
    return Text(text, style='dim')


def screen_panel(emu: Chip8Emulator, title: str = 'chip8') -> Panel:
    return Panel(Group(render_half_blocks(emu.display.pixels), status_line(emu)),
                 title=title, expand=False)


class TerminalFrontend:
    """Run the emulator in a rich Live view at config.fps frames per second."""

    def __init__(self, emu: Chip8Emulator, config: RunConfig,
                 console: Optional[Console] = None, title: str = 'chip8'):
        self.emu = emu
        self.config = config
        self.console = console or Console()
        self.title = title
        self.frames = 0

    def run(self) -> int:
        """Run until max_frames or Ctrl-C. Returns the number of frames run."""
        frame_time = 1.0 / self.config.fps
        try:
            with Live(screen_panel(self.emu, self.title), console=self.console,
                      auto_refresh=False) as live:
                next_frame = time.monotonic()
                while (self.config.max_frames is None
                       or self.frames < self.config.max_frames):
                    self.emu.run_frame(self.config.cycles_per_frame)
                    self.frames += 1
                    live.update(screen_panel(self.emu, self.title), refresh=True)

                    next_frame += frame_time
                    delay = next_frame - time.monotonic()
                    if delay > 0:
                        time.sleep(delay)
                    else:
                        next_frame = time.monotonic()
        except KeyboardInterrupt:
            pass
        return self.frames


def run_headless(emu: Chip8Emulator, config: RunConfig,
                 console: Optional[Console] = None,
                 title: str = 'chip8') -> StopReason:
    """Run config.max_frames frames as fast as possible, then print the screen."""
    console = console or Console()
    reason = emu.run(config.max_frames or 0, config.cycles_per_frame)
    console.print(screen_panel(emu, f"{title} ({reason.value})"))
    return reason
