"""
CHIP-8 Virtual Emulator - Random Byte Source for Cxkk

Any zero-argument callable that returns 0-255 can stand in for this
(tests pass a lambda). Passing a seed gives a repeatable sequence, which
is what --seed on the command line is for.
"""

import random
from typing import Optional


class RandomByteSource:
    """Callable returning one uniformly distributed byte per call."""

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            self._rng = random.SystemRandom()
        else:
            self._rng = random.Random(seed)

    def __call__(self) -> int:
        return self._rng.getrandbits(8)
