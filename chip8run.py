#!/usr/bin/env python3
"""
chip8run - CHIP-8 Virtual Emulator CLI

Usage:
    python chip8run.py <rom> [speed multiplier] [quirk ...] [options]

Quirks (historical COSMAC VIP behaviour, both off by default):
    savingIncreasesRegI   Fx55/Fx65 advance I past the registers copied
    shiftVyNotVx          8xy6/8xyE shift Vy into Vx

Speed: 1.0 runs 8 instructions per frame. The multiplier must keep that
between 1 and 1000 instructions per frame.

Examples:
    python chip8run.py pong.ch8
    python chip8run.py pong.ch8 2.5
    python chip8run.py invaders.ch8 1 savingIncreasesRegI shiftVyNotVx
    python chip8run.py maze.ch8 --frontend headless --frames 120 --seed 7
    python chip8run.py maze.ch8 --disasm
"""

import argparse
import logging
import sys
from pathlib import Path

from chip8_vm import __version__
from chip8_vm.config import Chip8Options, RunConfig, QUIRK_NAMES, cycles_for_speed
from chip8_vm.cpu.decoder import disassemble
from chip8_vm.emu import Chip8Emulator, StopReason
from chip8_vm.faults import EmulatorFault
from chip8_vm.log_setup import setup_logging
from chip8_vm.mem.memory import load_rom
from chip8_vm.periph.entropy import RandomByteSource

log = logging.getLogger("chip8_vm.run")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8run",
        description="CHIP-8 interpreter",
        epilog="Quirks: " + ", ".join(QUIRK_NAMES),
    )
    parser.add_argument("rom", help="CHIP-8 program image (loaded at $200)")
    parser.add_argument("speed", nargs="?", type=float, default=1.0,
                        help="Speed multiplier (default: 1 = 8 cycles/frame)")
    parser.add_argument("quirks", nargs="*", metavar="quirk",
                        help="Compatibility quirk: " + ", ".join(QUIRK_NAMES))
    parser.add_argument("--saving-increases-reg-i", action="store_true",
                        help="Same as the savingIncreasesRegI quirk")
    parser.add_argument("--shift-vy-not-vx", action="store_true",
                        help="Same as the shiftVyNotVx quirk")
    parser.add_argument("--frontend", choices=["window", "terminal", "headless"],
                        default="window",
                        help="Where to show the screen (default: window)")
    parser.add_argument("--fps", type=int, default=60,
                        help="Frames per second (default: 60)")
    parser.add_argument("--scale", type=int, default=12,
                        help="Window pixel scale (default: 12)")
    parser.add_argument("--frames", type=int, default=None,
                        help="Stop after this many frames (required for headless)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed the random byte source for repeatable runs")
    parser.add_argument("--trace", action="store_true",
                        help="Log every executed instruction (needs --log-file or -vv)")
    parser.add_argument("--disasm", action="store_true",
                        help="Print a disassembly of the ROM and exit")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Console log level: -v info, -vv debug")
    parser.add_argument("--log-file", type=Path, default=None,
                        help="Write a full DEBUG log to this file")
    parser.add_argument("--version", action="version",
                        version=f"chip8run {__version__}")
    return parser


def options_from_args(args) -> Chip8Options:
    quirks = {QUIRK_NAMES[name] for name in args.quirks}
    return Chip8Options(
        saving_increases_reg_i=(args.saving_increases_reg_i
                                or 'saving_increases_reg_i' in quirks),
        shift_vy_not_vx=(args.shift_vy_not_vx
                         or 'shift_vy_not_vx' in quirks),
    )


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    for name in args.quirks:
        if name not in QUIRK_NAMES:
            parser.error(f"Unknown option: {name}")

    console_level = {0: logging.WARNING, 1: logging.INFO}.get(
        args.verbose, logging.DEBUG)
    setup_logging(console_level=console_level, log_file=args.log_file)

    try:
        cycles_per_frame = cycles_for_speed(args.speed)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    for flag, value in (("--fps", args.fps), ("--scale", args.scale)):
        if value < 1:
            print(f"Error: {flag} must be at least 1 (got {value})",
                  file=sys.stderr)
            return 1

    if args.frontend == "headless" and args.frames is None:
        print("Error: --frontend headless needs --frames", file=sys.stderr)
        return 1

    try:
        program = load_rom(args.rom)
    except FileNotFoundError:
        print(f"Error: File not found: {args.rom}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error reading {args.rom}: {e}", file=sys.stderr)
        return 1

    if args.disasm:
        print('\n'.join(disassemble(program)))
        return 0

    options = options_from_args(args)
    emu = Chip8Emulator(program, options, rng=RandomByteSource(args.seed))
    emu.enable_trace(args.trace)
    config = RunConfig(cycles_per_frame=cycles_per_frame, fps=args.fps,
                       scale=args.scale, max_frames=args.frames)
    title = f"chip8 - {Path(args.rom).name}"

    log.info("ROM: %s (%d bytes)", args.rom, len(program))
    log.info("Speed: %d cycles/frame, options: %s", cycles_per_frame, options)

    try:
        if args.frontend == "headless":
            from chip8_vm.frontend.terminal import run_headless
            reason = run_headless(emu, config, title=title)
            if reason is StopReason.FAULT:
                print(f"Error: {emu.fault}", file=sys.stderr)
                return 1
            return 0

        if args.frontend == "terminal":
            from chip8_vm.frontend.terminal import TerminalFrontend
            frontend = TerminalFrontend(emu, config, title=title)
        else:
            try:
                from chip8_vm.frontend.window import WindowFrontend
            except ImportError as e:
                print(f"Error: window frontend needs pygame ({e}); "
                      "install chip8-vm[window] or use --frontend terminal",
                      file=sys.stderr)
                return 1
            frontend = WindowFrontend(emu, config, title=title)
        frames = frontend.run()
        log.info("Ran %d frames, %d instructions", frames, emu.cycles)
    except EmulatorFault as e:
        log.error("Emulator fault: %s", e)
        log.debug("Registers: %s", emu.regs.display())
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
