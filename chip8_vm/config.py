"""
CHIP-8 Virtual Emulator - Configuration

Chip8Options holds the two compatibility quirks, fixed for a run:

  saving_increases_reg_i - Fx55/Fx65 leave I pointing past the last
                           register copied (original COSMAC VIP)
  shift_vy_not_vx        - 8xy6/8xyE shift Vy into Vx instead of
                           shifting Vx in place (original COSMAC VIP)

Both default off, matching CHIP-48/SUPER-CHIP behaviour that most
programs written after 1990 expect.

RunConfig carries the frame driver settings from the command line to
the frontends.
"""

from dataclasses import dataclass
from typing import Optional

DEFAULT_CYCLES_PER_FRAME = 8
MIN_CYCLES_PER_FRAME = 1
MAX_CYCLES_PER_FRAME = 1000

# Quirk names as accepted on the command line
QUIRK_NAMES = {
    'savingIncreasesRegI': 'saving_increases_reg_i',
    'shiftVyNotVx': 'shift_vy_not_vx',
}


@dataclass(frozen=True)
class Chip8Options:
    saving_increases_reg_i: bool = False
    shift_vy_not_vx: bool = False


@dataclass
class RunConfig:
    cycles_per_frame: int = DEFAULT_CYCLES_PER_FRAME
    fps: int = 60
    scale: int = 12
    max_frames: Optional[int] = None


def cycles_for_speed(multiplier: float) -> int:
    """Convert a speed multiplier to instructions per frame.

    Raises ValueError with the allowed multiplier range when the result
    falls outside 1..1000.
    """
    cycles = int(DEFAULT_CYCLES_PER_FRAME * multiplier)
    if cycles < MIN_CYCLES_PER_FRAME:
        raise ValueError(
            f"Speed multiplier too low (min: "
            f"{MIN_CYCLES_PER_FRAME / DEFAULT_CYCLES_PER_FRAME})")
    if cycles > MAX_CYCLES_PER_FRAME:
        raise ValueError(
            f"Speed multiplier too high (max: "
            f"{MAX_CYCLES_PER_FRAME / DEFAULT_CYCLES_PER_FRAME})")
    return cycles
