# CHIP-8 Virtual Emulator - Pure-software CHIP-8 interpreter
#
# Layout:
#   cpu/     register file + call stack, ALU helpers, decoder/disassembler
#   mem/     4K memory map, built-in font, ROM loading
#   periph/  timers, 64x32 display, hex keypad, random byte source
#   frontend/ pygame window and rich terminal views (not needed by the core)
#   emu.py   the interpreter: tick(), cycle(), run_frame(), run()
"""
CHIP-8 Virtual Emulator
=======================

    from chip8_vm import Chip8Emulator, Chip8Options, load_rom

    emu = Chip8Emulator(load_rom('maze.ch8'), Chip8Options())
    emu.run_frame(cycles_per_frame=8)
    print(emu.display.render_text())
"""

__version__ = "1.0.0"

from .config import Chip8Options, RunConfig, cycles_for_speed
from .emu import Chip8Emulator, StopReason
from .faults import EmulatorFault, MemoryFault, StackOverflow, StackUnderflow
from .mem.memory import load_rom
