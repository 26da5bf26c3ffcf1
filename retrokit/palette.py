"""Indexed colour palettes with fades, rotation and per-line selection."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from retrokit.datafile import DataFileError, DataFileReader

__all__ = [
    "RenderType",
    "PaletteEntry",
    "PaletteBank",
    "rgb888_to_rgb565",
    "rgb888_to_rgb5551",
    "PALETTE_COUNT",
    "PALETTE_SIZE",
]

PALETTE_COUNT = 8
PALETTE_SIZE = 0x100
_ACTIVE = 0xFF


class RenderType(enum.Enum):
    """Renderer that decides how colours are packed."""

    SOFTWARE = "software"
    HARDWARE = "hardware"


@dataclass(frozen=True)
class PaletteEntry:
    """A 24-bit colour."""

    r: int = 0
    g: int = 0
    b: int = 0


def rgb888_to_rgb565(r: int, g: int, b: int) -> int:
    """Pack a 24-bit colour into 16-bit RGB565."""
    return (b >> 3) | ((g >> 2) << 5) | ((r >> 3) << 11)


def rgb888_to_rgb5551(r: int, g: int, b: int) -> int:
    """Pack a 24-bit colour into 16-bit RGB5551 with the alpha bit clear."""
    return ((b >> 3) << 1) | ((g >> 3) << 6) | ((r >> 3) << 11)


class PaletteBank:
    """Eight 256-colour palettes, kept both packed and as 24-bit colours."""

    def __init__(self, render_type: RenderType = RenderType.SOFTWARE, screen_height: int = 240) -> None:
        self.render_type = render_type
        self.full_palette = [[0] * PALETTE_SIZE for _ in range(PALETTE_COUNT)]
        self.full_palette32 = [[PaletteEntry()] * PALETTE_SIZE for _ in range(PALETTE_COUNT)]
        self.line_buffer = [0] * screen_height
        self.active_index = 0
        self.tex_palette_num = 0
        self.palette_mode = 0
        self.fade_mode = 0
        self.fade_r = 0
        self.fade_g = 0
        self.fade_b = 0
        self.fade_a = 0

    @property
    def active_palette(self) -> list[int]:
        """Packed colours of the active palette."""
        return self.full_palette[self.active_index]

    @property
    def active_palette32(self) -> list[PaletteEntry]:
        """24-bit colours of the active palette."""
        return self.full_palette32[self.active_index]

    def _pack(self, r: int, g: int, b: int) -> int:
        if self.render_type is RenderType.HARDWARE:
            return rgb888_to_rgb5551(r, g, b)
        return rgb888_to_rgb565(r, g, b)

    def set_active_palette(self, palette_id: int, start_line: int, end_line: int) -> None:
        """Select ``palette_id`` for screen lines ``start_line`` to ``end_line``."""
        palette_id &= 0xFF
        if self.render_type is RenderType.SOFTWARE:
            if palette_id < PALETTE_COUNT:
                for line in range(max(start_line, 0), min(end_line, len(self.line_buffer))):
                    self.line_buffer[line] = palette_id
            self.active_index = self.line_buffer[0]
        elif palette_id < PALETTE_COUNT:
            self.tex_palette_num = palette_id

    def set_entry(self, palette_index: int, index: int, r: int, g: int, b: int) -> None:
        """Set one colour; a palette index of -1 (0xFF) means the active palette."""
        palette_index &= 0xFF
        index &= 0xFF
        r, g, b = r & 0xFF, g & 0xFF, b & 0xFF
        target = self.active_index if palette_index == _ACTIVE else palette_index
        packed = self._pack(r, g, b)
        if self.render_type is RenderType.HARDWARE and index:
            packed |= 1
        self.full_palette[target][index] = packed
        self.full_palette32[target][index] = PaletteEntry(r, g, b)

    def copy(self, src: int, dest: int) -> None:
        """Copy palette ``src`` over palette ``dest``."""
        if src < PALETTE_COUNT and dest < PALETTE_COUNT:
            self.full_palette[dest] = list(self.full_palette[src])
            self.full_palette32[dest] = list(self.full_palette32[src])

    def rotate(self, start_index: int, end_index: int, right: bool) -> None:
        """Rotate the active palette's colours between two indices, inclusive."""
        for colours in (self.active_palette, self.active_palette32):
            if start_index > end_index:
                if right:
                    colours[start_index] = colours[end_index]
                else:
                    colours[end_index] = colours[start_index]
                continue
            segment = colours[start_index:end_index + 1]
            if right:
                segment = segment[-1:] + segment[:-1]
            else:
                segment = segment[1:] + segment[:1]
            colours[start_index:end_index + 1] = segment

    def set_fade(self, r: int, g: int, b: int, a: int) -> None:
        """Start a full-screen fade towards a colour."""
        self.fade_mode = 1
        self.fade_r = r
        self.fade_g = g
        self.fade_b = b
        self.fade_a = min(a, 0xFF)

    def set_limited_fade(
        self,
        palette_id: int,
        r: int,
        g: int,
        b: int,
        alpha: int,
        start_index: int,
        end_index: int,
    ) -> None:
        """Blend a range of ``palette_id``'s colours towards a colour and make it active."""
        if palette_id >= PALETTE_COUNT:
            return
        self.palette_mode = 1
        self.active_index = palette_id
        if alpha >= 0x100:
            alpha = 0xFF
        if start_index >= end_index:
            return

        inverse = 0xFF - alpha
        packed = self.active_palette
        colours = self.active_palette32
        for i in range(start_index, end_index):
            old = colours[i]
            nr = ((r * alpha + inverse * old.r) & 0xFFFF) >> 8
            ng = ((g * alpha + inverse * old.g) & 0xFFFF) >> 8
            nb = ((b * alpha + inverse * old.b) & 0xFFFF) >> 8
            packed[i] = self._pack(nr, ng, nb)
            if self.render_type is RenderType.HARDWARE:
                colours[i] = PaletteEntry(nr, ng, nb)
                packed[i] |= 1

    def load(
        self,
        reader: DataFileReader,
        file_path: str,
        palette_id: int,
        start_palette_index: int,
        start_index: int,
        end_index: int,
    ) -> None:
        """Load colours ``start_index``..``end_index`` of a ``Data/Palettes`` file.

        Palette 0 (or an out-of-range id) loads into the active palette.
        """
        reader.load_file("Data/Palettes/" + file_path)
        try:
            reader.seek(3 * start_index)
            if palette_id >= PALETTE_COUNT or palette_id < 0:
                palette_id = 0
            target = palette_id if palette_id else -1
            for _ in range(start_index, end_index):
                colour = reader.read(3)
                if len(colour) != 3:
                    raise DataFileError(f"palette file '{file_path}' is truncated")
                self.set_entry(target, start_palette_index, colour[0], colour[1], colour[2])
                start_palette_index += 1
        finally:
            reader.close()