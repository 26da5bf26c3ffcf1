"""Reading game assets from a packed data file or from loose files on disk.

A packed data file starts with a directory table followed by per-directory
file tables; file contents are stored with a rolling XOR/nibble-swap cipher
keyed on the file size. Loose files are read unchanged.
"""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, replace
from pathlib import Path
from typing import BinaryIO, Mapping

__all__ = [
    "BytecodeMode",
    "DataFileError",
    "FileInfo",
    "DataFileReader",
    "check_rsdk_file",
    "copy_file_path",
]

_KEY_A = b"4RaS9D7KaEbxcp2o5r6t"
_KEY_B = b"3tRaUxLmEaSn"


class BytecodeMode(enum.Enum):
    """Flavour of precompiled script bytecode found alongside the assets."""

    MOBILE = "mobile"
    PC = "pc"


class DataFileError(Exception):
    """A file could not be found, opened or parsed."""


@dataclass
class FileInfo:
    """Snapshot of an open file, enough to reopen it at the same position."""

    file_name: str
    file_size: int
    v_file_size: int
    read_pos: int = 0
    virtual_file_offset: int = 0
    e_string_pos_a: int = 0
    e_string_pos_b: int = 0
    e_string_no: int = 0
    e_nybble_swap: bool = False
    is_mod: bool = False
    virtual: bool = False


@dataclass
class _Cipher:
    number: int
    pos_a: int
    pos_b: int
    swap: bool = False

    @classmethod
    def for_size(cls, size: int) -> "_Cipher":
        number = (size & 0x1FC) >> 2
        pos_b = number % 9 + 1
        pos_a = number % pos_b + 1
        return cls(number, pos_a, pos_b, False)

    def advance(self) -> None:
        self.pos_a += 1
        self.pos_b += 1
        if self.pos_a <= 19 or self.pos_b <= 11:
            if self.pos_a > 19:
                self.pos_a = 1
                self.swap = not self.swap
            if self.pos_b > 11:
                self.pos_b = 1
                self.swap = not self.swap
        else:
            self.number = (self.number + 1) & 0x7F
            if self.swap:
                self.swap = False
                self.pos_a = self.number % 12 + 6
                self.pos_b = self.number % 5 + 4
            else:
                self.swap = True
                self.pos_a = self.number % 15 + 3
                self.pos_b = self.number % 7 + 1

    def decrypt(self, value: int) -> int:
        value ^= _KEY_B[self.pos_b] ^ self.number
        if self.swap:
            value = ((value & 0xF) << 4) | (value >> 4)
        value ^= _KEY_A[self.pos_a]
        self.advance()
        return value


def _read_exact(handle: BinaryIO, size: int) -> bytes:
    data = handle.read(size)
    if len(data) != size:
        raise DataFileError("data file is truncated")
    return data


def _read_u32(handle: BinaryIO) -> int:
    return struct.unpack("<I", _read_exact(handle, 4))[0]


def _read_dir_name(handle: BinaryIO) -> str:
    length = _read_exact(handle, 1)[0]
    mask = 0xFF - length
    return bytes(b ^ mask for b in _read_exact(handle, length)).decode("latin-1")


def _read_file_name(handle: BinaryIO) -> str:
    length = _read_exact(handle, 1)[0]
    return bytes(~b & 0xFF for b in _read_exact(handle, length)).decode("latin-1")


def _locate(handle: BinaryIO, container_size: int, file_path: str) -> tuple[int, int]:
    """Return the data offset and size of ``file_path`` inside the container."""
    directory, slash, name = file_path.rpartition("/")
    dir_name = (directory + slash).lower()
    name = name.lower()

    handle.seek(0)
    header_size = _read_u32(handle)
    dir_count = struct.unpack("<H", _read_exact(handle, 2))[0]

    file_offset = None
    next_offset = 0
    for index in range(dir_count):
        entry_name = _read_dir_name(handle)
        offset = _read_u32(handle)
        if entry_name.lower() == dir_name:
            file_offset = offset
            if index == dir_count - 1:
                next_offset = container_size - header_size
            else:
                _read_dir_name(handle)
                next_offset = _read_u32(handle)
            break

    if file_offset is None:
        raise DataFileError(f"Couldn't load file '{file_path}'")

    position = file_offset + header_size
    handle.seek(position)
    while True:
        entry_name = _read_file_name(handle)
        position += 1 + len(entry_name)
        size = _read_u32(handle)
        position += 4
        found = entry_name.lower() == name
        if not found:
            position += size
        if position >= next_offset + header_size:
            raise DataFileError(f"Couldn't load file '{file_path}'")
        if found:
            return position, size
        handle.seek(position)


class DataFileReader:
    """Opens asset files one at a time from a packed data file or a folder.

    ``overrides`` maps lower-case asset paths to replacement files on disk;
    those always win over the packed data file.
    """

    def __init__(
        self,
        data_file: str | Path | None = None,
        root: str | Path = ".",
        overrides: Mapping[str, str] | None = None,
    ) -> None:
        self.data_file = Path(data_file) if data_file is not None else None
        self.root = Path(root)
        self.overrides = dict(overrides or {})
        self.force_use_scripts = False
        self.bytecode_mode: BytecodeMode | None = None
        self._handle: BinaryIO | None = None
        self._current: FileInfo | None = None
        self._cipher: _Cipher | None = None
        self._pos = 0

    @property
    def using_data_file(self) -> bool:
        """Whether assets come from a packed data file."""
        return self.data_file is not None

    def load_file(self, file_path: str) -> FileInfo:
        """Open ``file_path`` for reading and return its description."""
        self.close()
        path = file_path
        is_mod = False
        force_folder = False
        add_root = True

        override = self.overrides.get(file_path.lower())
        if override is not None:
            path = override
            force_folder = is_mod = True
            add_root = False
        elif (
            self.force_use_scripts
            and path.startswith("Data/Scripts/")
            and path.endswith("txt")
        ):
            path = path[len("Data/"):]
            force_folder = is_mod = True

        if self.data_file is not None and not force_folder:
            return self._open_virtual(file_path)
        full = self.root / path if add_root else Path(path)
        return self._open_folder(full, is_mod)

    def _open_folder(self, full: Path, is_mod: bool) -> FileInfo:
        try:
            handle = open(full, "rb")
        except OSError as exc:
            raise DataFileError(f"Couldn't load file '{full}'") from exc
        size = handle.seek(0, 2)
        handle.seek(0)
        self._handle = handle
        self._cipher = None
        self._pos = 0
        self._current = FileInfo(
            file_name=str(full), file_size=size, v_file_size=size, is_mod=is_mod
        )
        return replace(self._current)

    def _open_container(self) -> BinaryIO:
        assert self.data_file is not None
        try:
            return open(self.data_file, "rb")
        except OSError as exc:
            raise DataFileError(f"Couldn't open data file '{self.data_file}'") from exc

    def _open_virtual(self, file_path: str) -> FileInfo:
        handle = self._open_container()
        try:
            container_size = handle.seek(0, 2)
            offset, size = _locate(handle, container_size, file_path)
        except DataFileError:
            handle.close()
            raise
        handle.seek(offset)
        self._handle = handle
        self._cipher = _Cipher.for_size(size)
        self._pos = offset
        self._current = FileInfo(
            file_name=file_path,
            file_size=size,
            v_file_size=size,
            read_pos=offset,
            virtual_file_offset=offset,
            virtual=True,
        )
        return self.get_file_info()

    def close(self) -> None:
        """Close the open file, if any."""
        if self._handle is not None:
            self._handle.close()
        self._handle = None
        self._current = None
        self._cipher = None
        self._pos = 0

    def _require_open(self) -> tuple[BinaryIO, FileInfo]:
        if self._handle is None or self._current is None:
            raise DataFileError("no file is open")
        return self._handle, self._current

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes, decrypting packed data."""
        handle, _ = self._require_open()
        if size < 0:
            raise ValueError("size must not be negative")
        raw = handle.read(size)
        self._pos += len(raw)
        if self._cipher is None:
            return raw
        return bytes(self._cipher.decrypt(b) for b in raw)

    def get_file_info(self) -> FileInfo:
        """Return a snapshot of the open file and its read position."""
        _, current = self._require_open()
        cipher = self._cipher or _Cipher(0, 0, 0, False)
        return replace(
            current,
            read_pos=self._pos,
            e_string_pos_a=cipher.pos_a,
            e_string_pos_b=cipher.pos_b,
            e_string_no=cipher.number,
            e_nybble_swap=cipher.swap,
        )

    def set_file_info(self, info: FileInfo) -> None:
        """Reopen the file described by ``info`` at its saved position."""
        self.close()
        if info.virtual:
            if self.data_file is None:
                raise DataFileError("no data file to reopen a packed file from")
            handle = self._open_container()
            self._cipher = _Cipher(
                info.e_string_no, info.e_string_pos_a, info.e_string_pos_b,
                info.e_nybble_swap,
            )
        else:
            try:
                handle = open(info.file_name, "rb")
            except OSError as exc:
                raise DataFileError(f"Couldn't load file '{info.file_name}'") from exc
            self._cipher = None
        handle.seek(info.read_pos)
        self._handle = handle
        self._pos = info.read_pos
        self._current = replace(info)

    def tell(self) -> int:
        """Position within the open file."""
        _, current = self._require_open()
        return self._pos - current.virtual_file_offset

    def seek(self, position: int) -> None:
        """Move to ``position`` within the open file."""
        handle, current = self._require_open()
        if position < 0:
            raise ValueError("position must not be negative")
        if current.virtual:
            cipher = _Cipher.for_size(current.v_file_size)
            for _ in range(position):
                cipher.advance()
            self._cipher = cipher
        self._pos = current.virtual_file_offset + position
        handle.seek(self._pos)

    def at_end(self) -> bool:
        """Whether the read position has reached the end of the file."""
        _, current = self._require_open()
        return self.tell() >= current.v_file_size

    def __enter__(self) -> "DataFileReader":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def check_rsdk_file(data_file: str | Path, root: str | Path = ".") -> DataFileReader:
    """Build a reader, using ``data_file`` under ``root`` if it exists.

    The returned reader's ``bytecode_mode`` tells which precompiled script
    bytecode is available, or is None when there is none.
    """
    root_path = Path(root)
    container = root_path / data_file
    reader = DataFileReader(container if container.is_file() else None, root_path)
    probes = (
        ("Data/Scripts/ByteCode/GlobalCode.bin", BytecodeMode.MOBILE),
        ("Data/Scripts/ByteCode/GS000.bin", BytecodeMode.PC),
    )
    for probe, mode in probes:
        try:
            reader.load_file(probe)
        except DataFileError:
            continue
        reader.close()
        reader.bytecode_mode = mode
        break
    return reader


def copy_file_path(path: str) -> str:
    """Return ``path`` with forward slashes turned into backslashes."""
    return path.replace("/", "\\")