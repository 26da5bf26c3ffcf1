"""Fixed-point trigonometry lookup tables and angle helpers.

Angles are expressed in table units: a full turn is 512 steps for the
``*512`` helpers and 256 steps for the ``*256`` helpers and the arc-tangent
lookup. Sine and cosine values are scaled integers.
"""

from __future__ import annotations

import math
import random
from array import array

__all__ = [
    "TrigTables",
    "calculate_trig_angles",
    "sin512",
    "cos512",
    "sin256",
    "cos256",
    "arctan_lookup",
]

_ATAN_SCALE = array("f", [40.743664])[0]


def _to_float32(value: float) -> float:
    return array("f", [value])[0]


class TrigTables:
    """Precomputed sine, cosine and arc-tangent tables.

    Attributes:
        sin_m, cos_m: 512 entries scaled by 4096.
        sin512, cos512: 512 entries scaled by 512.
        sin256, cos256: 256 entries scaled by 256.
        arctan256: 65536 byte angles indexed by ``(x << 8) + y``.
    """

    def __init__(self) -> None:
        self.sin_m = [int(math.sin((i / 256.0) * math.pi) * 4096.0) for i in range(0x200)]
        self.cos_m = [int(math.cos((i / 256.0) * math.pi) * 4096.0) for i in range(0x200)]
        self._pin_quadrants(self.sin_m, self.cos_m, 0x1000)

        self.sin512 = [
            int(_to_float32(math.sin(_to_float32((i / 256.0) * math.pi))) * 512.0)
            for i in range(0x200)
        ]
        self.cos512 = [
            int(_to_float32(math.cos(_to_float32((i / 256.0) * math.pi))) * 512.0)
            for i in range(0x200)
        ]
        self._pin_quadrants(self.sin512, self.cos512, 0x200)

        self.sin256 = [value >> 1 for value in self.sin512[::2]]
        self.cos256 = [value >> 1 for value in self.cos512[::2]]

        angles = array(
            "f", (math.atan2(y, x) for x in range(0x100) for y in range(0x100))
        )
        scaled = array("f", (angle * _ATAN_SCALE for angle in angles))
        self.arctan256 = bytes(int(value) & 0xFF for value in scaled)

    @staticmethod
    def _pin_quadrants(sines: list[int], cosines: list[int], one: int) -> None:
        cosines[0x00] = one
        cosines[0x80] = 0
        cosines[0x100] = -one
        cosines[0x180] = 0

        sines[0x00] = 0
        sines[0x80] = one
        sines[0x100] = 0
        sines[0x180] = -one


_tables: TrigTables | None = None


def _current() -> TrigTables:
    global _tables
    if _tables is None:
        _tables = TrigTables()
    return _tables


def calculate_trig_angles() -> TrigTables:
    """Rebuild the shared lookup tables, reseed the RNG and return the tables."""
    global _tables
    random.seed()
    _tables = TrigTables()
    return _tables


def _wrap(angle: int, size: int) -> int:
    if angle < 0:
        angle = size - angle
    return angle & (size - 1)


def sin512(angle: int) -> int:
    """Sine of ``angle`` (512 steps per turn), scaled by 512."""
    return _current().sin512[_wrap(angle, 0x200)]


def cos512(angle: int) -> int:
    """Cosine of ``angle`` (512 steps per turn), scaled by 512."""
    return _current().cos512[_wrap(angle, 0x200)]


def sin256(angle: int) -> int:
    """Sine of ``angle`` (256 steps per turn), scaled by 256."""
    return _current().sin256[_wrap(angle, 0x100)]


def cos256(angle: int) -> int:
    """Cosine of ``angle`` (256 steps per turn), scaled by 256."""
    return _current().cos256[_wrap(angle, 0x100)]


def arctan_lookup(x: int, y: int) -> int:
    """Angle of the vector ``(x, y)`` as a byte, 256 steps per turn."""
    ax = abs(x)
    ay = abs(y)
    limit = ay if ax <= ay else ax
    while limit > 0xFF:
        ax >>= 4
        ay >>= 4
        limit >>= 4

    value = _current().arctan256[(ax << 8) + ay]
    if x <= 0:
        if y <= 0:
            return (value - 0x80) & 0xFF
        return (-0x80 - value) & 0xFF
    if y <= 0:
        return -value & 0xFF
    return value