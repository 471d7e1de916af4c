"""Terminal frontend tests (rich rendering, headless runs)."""

import io

from rich.console import Console

from chip8_vm.config import RunConfig
from chip8_vm.emu import Chip8Emulator, StopReason
from chip8_vm.frontend.terminal import (
    TerminalFrontend, render_half_blocks, run_headless, status_line,
)


def quiet_console() -> Console:
    return Console(file=io.StringIO(), width=120, color_system=None)


class TestRendering:

    def test_half_blocks(self):
        pixels = [[1, 0, 1, 0],
                  [1, 1, 0, 0]]
        assert render_half_blocks(pixels).plain == '█▄▀ '

    def test_screen_is_sixteen_lines(self):
        emu = Chip8Emulator()
        lines = render_half_blocks(emu.display.pixels).plain.split('\n')
        assert len(lines) == 16
        assert all(len(line) == 64 for line in lines)

    def test_status_line_shows_wait(self):
        emu = Chip8Emulator(bytes([0xF3, 0x0A]))
        emu.cycle()
        text = status_line(emu).plain
        assert "PC $202" in text
        assert "V3" in text


class TestHeadless:

    def test_runs_and_prints_screen(self):
        # F029 D015: draw the '0' glyph, then spin
        emu = Chip8Emulator(bytes([0xF0, 0x29, 0xD0, 0x15, 0x12, 0x04]))
        console = quiet_console()
        reason = run_headless(emu, RunConfig(max_frames=2), console, title='t')
        assert reason is StopReason.TIMEOUT
        out = console.file.getvalue()
        assert "TIMEOUT" in out
        assert "▀" in out

    def test_fault(self):
        emu = Chip8Emulator(bytes([0x00, 0xEE]))
        reason = run_headless(emu, RunConfig(max_frames=1), quiet_console())
        assert reason is StopReason.FAULT


class TestLiveView:

    def test_stops_after_max_frames(self):
        emu = Chip8Emulator(bytes([0x12, 0x00]))
        config = RunConfig(cycles_per_frame=2, fps=1000, max_frames=3)
        frames = TerminalFrontend(emu, config, console=quiet_console()).run()
        assert frames == 3
        assert emu.cycles == 6
