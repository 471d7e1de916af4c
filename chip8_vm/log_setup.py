"""
CHIP-8 Virtual Emulator - Logging Setup

Same pattern as the other tools: a rich console handler for the
important stuff, and an optional file handler that captures everything
down to DEBUG (instruction traces included).

Library modules only ever call logging.getLogger(__name__); this is
called once, from the command-line runner.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = (
    "%(asctime)s | %(levelname)-7s | %(name)s | "
    "%(funcName)s:%(lineno)d | %(message)s"
)


def setup_logging(
    name: str = "chip8_vm",
    console_level: int = logging.WARNING,
    log_file: Optional[Path] = None,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Configure and return the package logger.

    Console: RichHandler at console_level, written to stderr so it
    does not fight with the terminal frontend on stdout.
    File: everything (DEBUG+) when log_file is given.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG if log_file is not None else console_level)

    # ── Console handler ──
    ch = RichHandler(
        console=console or Console(stderr=True),
        level=console_level,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    ch.setLevel(console_level)
    logger.addHandler(ch)

    # ── File handler: captures everything ──
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(FILE_FORMAT,
                                          datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(fh)
        logger.info("Log file: %s", log_path)

    return logger
