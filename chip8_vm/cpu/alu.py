"""
CHIP-8 Virtual Emulator - ALU Helpers

Pure functions behind the 8xyN group. Each returns (result, flag) and
leaves it to the caller to write VF, because the 8xy5/8xy7 handlers store
the inverse of the borrow flag returned here.

All arithmetic is modulo 256. Nothing in here raises on overflow.
"""


def add8(a: int, b: int) -> tuple:
    """Unsigned 8-bit add. Returns (sum, carry) with carry 1 when a+b > 255."""
    result = a + b
    return (result & 0xFF, int(result > 0xFF))


def sub8(a: int, b: int) -> tuple:
    """Unsigned 8-bit subtract. Returns (difference, borrow) with borrow 1 when a < b."""
    result = a - b
    return (result & 0xFF, int(result < 0))


def shr8(val: int) -> tuple:
    """Shift right one bit. Returns (result, bit shifted out of bit 0)."""
    return ((val >> 1) & 0x7F, val & 0x01)


def shl8(val: int) -> tuple:
    """Shift left one bit. Returns (result, bit shifted out of bit 7)."""
    return ((val << 1) & 0xFF, (val >> 7) & 0x01)


def bcd3(val: int) -> tuple:
    """Split a byte into (hundreds, tens, ones) decimal digits for Fx33."""
    val &= 0xFF
    return (val // 100, (val // 10) % 10, val % 10)
