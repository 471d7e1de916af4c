"""
CHIP-8 Virtual Emulator - Main Emulator Class

Integrates:
  - CPU registers + call stack (cpu/regs.py)
  - 4K memory with font (mem/memory.py)
  - Instruction decoder (cpu/decoder.py)
  - ALU helpers (cpu/alu.py)
  - Peripherals: timers, display, keypad, random byte source

Execution model, one cycle():
  1. If waiting on Fx0A: poll the keypad, resolve or return
  2. Fetch the 16-bit word at PC
  3. Dispatch on the top nibble, then on the group's sub-key
  4. Control flow handlers set PC themselves and return True;
     everything else falls through to PC += 2

The emulator never looks at a clock. The frame driver calls tick() once
per frame and cycle() as many times per frame as it likes
(run_frame() does both in that order).

Fatal faults (stack overflow/underflow, memory access out of range) are
raised out of cycle(). Unknown opcodes and jumps into the reserved area
below $200 are logged as warnings and execution continues.
5xyN and 9xyN decode only with N == 0; any other low nibble is an
unknown opcode rather than a register compare.
"""

import logging
from enum import Enum
from collections import deque
from typing import Callable, Deque, Optional, Set

from .config import Chip8Options, DEFAULT_CYCLES_PER_FRAME
from .cpu import alu
from .cpu.decoder import Instruction, decode, mnemonic
from .cpu.regs import Registers, PROGRAM_START
from .faults import EmulatorFault, MemoryFault
from .mem.font import glyph_address
from .mem.memory import Memory
from .periph.display import Display
from .periph.entropy import RandomByteSource
from .periph.keypad import Keypad
from .periph.timer import Timers

log = logging.getLogger(__name__)

# Trace lines kept in memory; older lines are dropped
TRACE_LIMIT = 10_000


class StopReason(Enum):
    TIMEOUT = 'TIMEOUT'
    BREAK = 'BREAK'
    FAULT = 'FAULT'


class Chip8Emulator:
    """CHIP-8 interpreter.

    Usage:
        emu = Chip8Emulator(load_rom('pong.ch8'))
        while running:
            update_keys(emu.keypad)
            emu.run_frame(cycles_per_frame=8)
            draw(emu.display.pixels)
    """

    def __init__(self, program: bytes = b'',
                 options: Optional[Chip8Options] = None,
                 rng: Optional[Callable[[], int]] = None):
        self.options = options if options is not None else Chip8Options()
        self.rng = rng if rng is not None else RandomByteSource()

        # Machine state
        self.regs = Registers()
        self.mem = Memory()
        self.timers = Timers()
        self.display = Display()
        self.keypad = Keypad()

        # Fx0A wait state
        self.awaiting_keypress = False
        self.target_register = 0

        self._program = bytes(program)
        self.mem.load_program(self._program)

        self.cycles = 0
        self.fault: Optional[EmulatorFault] = None

        self._breakpoints: Set[int] = set()
        self._trace = False
        self._trace_output: Deque[str] = deque(maxlen=TRACE_LIMIT)

        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Frame driver interface
    # ══════════════════════════════════════════════

    def tick(self):
        """Advance the delay and sound timers by one frame."""
        self.timers.tick()

    def cycle(self):
        """Execute one instruction, or poll the keypad while waiting on Fx0A."""
        if self.awaiting_keypress:
            key = self.keypad.first_pressed()
            if key is not None:
                self.regs.V[self.target_register] = key
                self.awaiting_keypress = False
                log.debug("V%X received keypress %X", self.target_register, key)
            return

        pc = self.regs.PC
        try:
            ins = decode(self.mem.read8(pc), self.mem.read8(pc + 1))

            if self._trace:
                self._trace_output.append(
                    f"${pc:03X}: {ins.word:04X} {mnemonic(ins.word):18s} "
                    f"{self.regs.display()}")
                log.debug(self._trace_output[-1])

            if not self._dispatch[ins.op](ins):
                self.regs.PC += 2
        except MemoryFault as e:
            if e.pc is None:
                raise MemoryFault(e.addr, pc) from None
            raise

        self.cycles += 1

    def run_frame(self, cycles_per_frame: int = DEFAULT_CYCLES_PER_FRAME):
        """One frame: tick the timers once, then run cycles_per_frame cycles."""
        self.tick()
        for _ in range(cycles_per_frame):
            self.cycle()

    def run(self, max_frames: int,
            cycles_per_frame: int = DEFAULT_CYCLES_PER_FRAME) -> StopReason:
        """Run headless for up to max_frames frames.

        Returns:
            StopReason.TIMEOUT after max_frames frames,
            StopReason.BREAK when PC reaches a breakpoint (before executing it),
            StopReason.FAULT on a fatal fault, kept in self.fault
        """
        for _ in range(max_frames):
            self.tick()
            for _ in range(cycles_per_frame):
                if not self.awaiting_keypress and self.regs.PC in self._breakpoints:
                    return StopReason.BREAK
                try:
                    self.cycle()
                except EmulatorFault as e:
                    self.fault = e
                    log.error("Emulator fault: %s", e)
                    return StopReason.FAULT
        return StopReason.TIMEOUT

    # ══════════════════════════════════════════════
    # Dispatch
    # ══════════════════════════════════════════════
    # Handler signature: handler(ins) -> bool
    # Return True when the handler has set PC itself.

    def _build_dispatch(self) -> dict:
        """Build the top-nibble dispatch table and the per-group sub-tables."""
        self._sys_ops = {
            0x0E0: self._op_cls,
            0x0EE: self._op_ret,
        }
        self._alu_ops = {
            0x0: self._op_ld_vy,
            0x1: self._op_or,
            0x2: self._op_and,
            0x3: self._op_xor,
            0x4: self._op_add_vy,
            0x5: self._op_sub,
            0x6: self._op_shr,
            0x7: self._op_subn,
            0xE: self._op_shl,
        }
        self._key_ops = {
            0x9E: self._op_skp,
            0xA1: self._op_sknp,
        }
        self._misc_ops = {
            0x07: self._op_ld_vx_dt,
            0x0A: self._op_ld_vx_k,
            0x15: self._op_ld_dt_vx,
            0x18: self._op_ld_st_vx,
            0x1E: self._op_add_i_vx,
            0x29: self._op_ld_f_vx,
            0x33: self._op_ld_b_vx,
            0x55: self._op_ld_mem_vx,
            0x65: self._op_ld_vx_mem,
        }
        return {
            0x0: self._op_sys_group,
            0x1: self._op_jp,
            0x2: self._op_call,
            0x3: self._op_se_kk,
            0x4: self._op_sne_kk,
            0x5: self._op_se_vy,
            0x6: self._op_ld_kk,
            0x7: self._op_add_kk,
            0x8: self._op_alu_group,
            0x9: self._op_sne_vy,
            0xA: self._op_ld_i,
            0xB: self._op_jp_v0,
            0xC: self._op_rnd,
            0xD: self._op_drw,
            0xE: self._op_key_group,
            0xF: self._op_misc_group,
        }

    def _op_sys_group(self, ins: Instruction) -> bool:
        handler = self._sys_ops.get(ins.nnn, self._op_unknown)
        return handler(ins)

    def _op_alu_group(self, ins: Instruction) -> bool:
        handler = self._alu_ops.get(ins.n, self._op_unknown)
        return handler(ins)

    def _op_key_group(self, ins: Instruction) -> bool:
        handler = self._key_ops.get(ins.kk, self._op_unknown)
        return handler(ins)

    def _op_misc_group(self, ins: Instruction) -> bool:
        handler = self._misc_ops.get(ins.kk, self._op_unknown)
        return handler(ins)

    def _op_unknown(self, ins: Instruction) -> bool:
        log.warning("Call to unimplemented opcode $%04X at $%03X",
                    ins.word, self.regs.PC)
        return False

    # ── Flow control helpers ──

    def _jump(self, addr: int) -> bool:
        if addr < PROGRAM_START:
            log.warning("Program attempted to jump to address $%03X "
                        "(from $%03X)", addr, self.regs.PC)
        self.regs.PC = addr
        return True

    def _skip(self, cond: bool) -> bool:
        self.regs.PC += 4 if cond else 2
        return True

    # ── 0 group ──

    def _op_cls(self, ins):
        self.display.clear()
        return False

    def _op_ret(self, ins):
        self.regs.PC = self.regs.pop()
        return True

    # ── Jumps, calls, skips ──

    def _op_jp(self, ins):
        return self._jump(ins.nnn)

    def _op_call(self, ins):
        self.regs.push(self.regs.PC + 2)
        return self._jump(ins.nnn)

    def _op_jp_v0(self, ins):
        return self._jump(ins.nnn + self.regs.V[0])

    def _op_se_kk(self, ins):
        return self._skip(self.regs.V[ins.x] == ins.kk)

    def _op_sne_kk(self, ins):
        return self._skip(self.regs.V[ins.x] != ins.kk)

    def _op_se_vy(self, ins):
        if ins.n != 0:
            return self._op_unknown(ins)
        return self._skip(self.regs.V[ins.x] == self.regs.V[ins.y])

    def _op_sne_vy(self, ins):
        if ins.n != 0:
            return self._op_unknown(ins)
        return self._skip(self.regs.V[ins.x] != self.regs.V[ins.y])

    def _op_skp(self, ins):
        return self._skip(self.keypad.is_pressed(self.regs.V[ins.x]))

    def _op_sknp(self, ins):
        return self._skip(not self.keypad.is_pressed(self.regs.V[ins.x]))

    # ── Immediate loads ──

    def _op_ld_kk(self, ins):
        self.regs.V[ins.x] = ins.kk
        return False

    def _op_add_kk(self, ins):
        # 7xkk never touches VF
        self.regs.V[ins.x] = (self.regs.V[ins.x] + ins.kk) & 0xFF
        return False

    def _op_ld_i(self, ins):
        self.regs.I = ins.nnn
        return False

    def _op_rnd(self, ins):
        self.regs.V[ins.x] = self.rng() & ins.kk & 0xFF
        return False

    # ── ALU (8xyN) ──
    # VF is written before Vx, so for x == F the result is what remains.

    def _op_ld_vy(self, ins):
        self.regs.V[ins.x] = self.regs.V[ins.y]
        return False

    def _op_or(self, ins):
        self.regs.V[ins.x] |= self.regs.V[ins.y]
        return False

    def _op_and(self, ins):
        self.regs.V[ins.x] &= self.regs.V[ins.y]
        return False

    def _op_xor(self, ins):
        self.regs.V[ins.x] ^= self.regs.V[ins.y]
        return False

    def _op_add_vy(self, ins):
        total, carry = alu.add8(self.regs.V[ins.x], self.regs.V[ins.y])
        self.regs.flag = carry
        self.regs.V[ins.x] = total
        return False

    def _op_sub(self, ins):
        diff, borrow = alu.sub8(self.regs.V[ins.x], self.regs.V[ins.y])
        self.regs.flag = borrow ^ 1
        self.regs.V[ins.x] = diff
        return False

    def _op_subn(self, ins):
        diff, borrow = alu.sub8(self.regs.V[ins.y], self.regs.V[ins.x])
        self.regs.flag = borrow ^ 1
        self.regs.V[ins.x] = diff
        return False

    def _shift_source(self, ins) -> int:
        if self.options.shift_vy_not_vx:
            return self.regs.V[ins.y]
        return self.regs.V[ins.x]

    def _op_shr(self, ins):
        result, out = alu.shr8(self._shift_source(ins))
        self.regs.flag = out
        self.regs.V[ins.x] = result
        return False

    def _op_shl(self, ins):
        result, out = alu.shl8(self._shift_source(ins))
        self.regs.flag = out
        self.regs.V[ins.x] = result
        return False

    # ── Display ──

    def _op_drw(self, ins):
        rows = self.mem.read_block(self.regs.I, ins.n)
        erased = self.display.draw_sprite(
            self.regs.V[ins.x], self.regs.V[ins.y], rows)
        self.regs.flag = int(erased)
        return False

    # ── F group: timers, keypad wait, I arithmetic, memory ──

    def _op_ld_vx_dt(self, ins):
        self.regs.V[ins.x] = self.timers.delay
        return False

    def _op_ld_vx_k(self, ins):
        self.awaiting_keypress = True
        self.target_register = ins.x
        return False

    def _op_ld_dt_vx(self, ins):
        self.timers.delay = self.regs.V[ins.x]
        return False

    def _op_ld_st_vx(self, ins):
        self.timers.sound = self.regs.V[ins.x]
        return False

    def _op_add_i_vx(self, ins):
        self.regs.I = (self.regs.I + self.regs.V[ins.x]) & 0xFFFF
        return False

    def _op_ld_f_vx(self, ins):
        self.regs.I = glyph_address(self.regs.V[ins.x])
        return False

    def _op_ld_b_vx(self, ins):
        self.mem.write_block(self.regs.I, bytes(alu.bcd3(self.regs.V[ins.x])))
        return False

    def _op_ld_mem_vx(self, ins):
        self.mem.write_block(self.regs.I, bytes(self.regs.V[:ins.x + 1]))
        if self.options.saving_increases_reg_i:
            self.regs.I = (self.regs.I + ins.x + 1) & 0xFFFF
        return False

    def _op_ld_vx_mem(self, ins):
        data = self.mem.read_block(self.regs.I, ins.x + 1)
        self.regs.V[:ins.x + 1] = list(data)
        if self.options.saving_increases_reg_i:
            self.regs.I = (self.regs.I + ins.x + 1) & 0xFFFF
        return False

    # ══════════════════════════════════════════════
    # Breakpoint API
    # ══════════════════════════════════════════════

    def add_breakpoint(self, addr: int):
        """Stop run() when PC reaches addr, before the instruction executes."""
        self._breakpoints.add(addr)

    def remove_breakpoint(self, addr: int):
        self._breakpoints.discard(addr)

    def clear_breakpoints(self):
        self._breakpoints.clear()

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Record every executed instruction with the register state before it."""
        self._trace = enable

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

    def reset(self):
        """Power-on reset. The program image loaded at construction is kept."""
        self.regs.reset()
        self.mem.clear()
        self.mem.load_program(self._program)
        self.timers.reset()
        self.display.clear()
        self.keypad.reset()
        self.awaiting_keypress = False
        self.target_register = 0
        self.cycles = 0
        self.fault = None
        self._breakpoints.clear()
        self._trace_output.clear()
