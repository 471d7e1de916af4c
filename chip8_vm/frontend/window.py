"""
CHIP-8 Virtual Emulator - Window Frontend (pygame)

Keypad mapping uses the numeric keypad, laid out so the CHIP-8 keys sit
roughly where they were on the COSMAC VIP:

    KP7 KP8 KP9 KP/      1 2 3 C
    KP4 KP5 KP6 KP*  ->  4 5 6 D
    KP1 KP2 KP3 KP-      7 8 9 E
    KP0 KP. Ent KP+      A 0 B F

Escape or closing the window ends the run.
"""

import logging
import os

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame

from ..config import RunConfig
from ..emu import Chip8Emulator
from ..periph.display import WIDTH, HEIGHT

log = logging.getLogger(__name__)

KEY_MAP = {
    pygame.K_KP_PERIOD:   0x0,
    pygame.K_KP7:         0x1,
    pygame.K_KP8:         0x2,
    pygame.K_KP9:         0x3,
    pygame.K_KP4:         0x4,
    pygame.K_KP5:         0x5,
    pygame.K_KP6:         0x6,
    pygame.K_KP1:         0x7,
    pygame.K_KP2:         0x8,
    pygame.K_KP3:         0x9,
    pygame.K_KP0:         0xA,
    pygame.K_KP_ENTER:    0xB,
    pygame.K_KP_DIVIDE:   0xC,
    pygame.K_KP_MULTIPLY: 0xD,
    pygame.K_KP_MINUS:    0xE,
    pygame.K_KP_PLUS:     0xF,
}

PIXEL_ON = (255, 255, 255)
PIXEL_OFF = (0, 0, 0)


class WindowFrontend:
    """pygame window running the emulator at config.fps frames per second."""

    def __init__(self, emu: Chip8Emulator, config: RunConfig, title: str = 'chip8'):
        self.emu = emu
        self.config = config
        self.title = title
        self.frames = 0
        self._running = False

    def handle_event(self, event) -> None:
        if event.type == pygame.QUIT:
            self._running = False
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self._running = False
            elif event.key in KEY_MAP:
                self.emu.keypad.press(KEY_MAP[event.key])
        elif event.type == pygame.KEYUP:
            if event.key in KEY_MAP:
                self.emu.keypad.release(KEY_MAP[event.key])

    def draw(self, surface) -> None:
        scale = self.config.scale
        surface.fill(PIXEL_OFF)
        for y, row in enumerate(self.emu.display.pixels):
            for x, on in enumerate(row):
                if on:
                    surface.fill(PIXEL_ON, (x * scale, y * scale, scale, scale))

    def run(self) -> int:
        """Run until the window closes or max_frames. Returns frames run."""
        pygame.init()
        try:
            scale = self.config.scale
            surface = pygame.display.set_mode((WIDTH * scale, HEIGHT * scale))
            pygame.display.set_caption(self.title)
            clock = pygame.time.Clock()
            log.info("Window %dx%d, %d cycles/frame at %d fps",
                     WIDTH * scale, HEIGHT * scale,
                     self.config.cycles_per_frame, self.config.fps)

            self._running = True
            while self._running:
                self.emu.run_frame(self.config.cycles_per_frame)
                self.frames += 1

                self.draw(surface)
                for event in pygame.event.get():
                    self.handle_event(event)
                pygame.display.flip()

                if (self.config.max_frames is not None
                        and self.frames >= self.config.max_frames):
                    break
                clock.tick(self.config.fps)
        finally:
            pygame.quit()
        return self.frames
