"""
CHIP-8 Virtual Emulator - 16-Key Hex Keypad

The original COSMAC VIP keypad layout:

    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F

Key state is level-triggered: the keypad only records which keys are
held right now. Frontends call press()/release() from their input events
before each frame's cycles run.
"""

from typing import List, Optional

NUM_KEYS = 16


class Keypad:
    """Key-down flags for keys 0x0-0xF."""

    def __init__(self):
        self.keys: List[bool] = [False] * NUM_KEYS

    def press(self, key: int):
        self.keys[key & 0x0F] = True

    def release(self, key: int):
        self.keys[key & 0x0F] = False

    def set(self, key: int, down: bool):
        self.keys[key & 0x0F] = bool(down)

    def is_pressed(self, key: int) -> bool:
        return self.keys[key & 0x0F]

    def first_pressed(self) -> Optional[int]:
        """Lowest numbered key currently held, or None."""
        for key, down in enumerate(self.keys):
            if down:
                return key
        return None

    def reset(self):
        self.keys = [False] * NUM_KEYS
