"""
CHIP-8 Virtual Emulator - Delay + Sound Timers

Two 8-bit down-counters. Both decrement by one per tick() and stop at
zero. The machine has no clock of its own: the frame driver calls tick()
once per frame (60 Hz on the original hardware), before that frame's
instruction cycles.

  DT  - delay timer, read/written by Fx07 / Fx15
  ST  - sound timer, written by Fx18; the buzzer sounds while ST > 0
"""


class Timers:
    """Delay and sound timers."""

    __slots__ = ('delay', 'sound')

    def __init__(self):
        self.delay = 0
        self.sound = 0

    def tick(self):
        """Advance both timers by one frame."""
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1

    @property
    def sound_active(self) -> bool:
        return self.sound > 0

    def reset(self):
        self.delay = 0
        self.sound = 0
