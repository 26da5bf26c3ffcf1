"""Simple INI configuration files as read and written by the engine.

Parsing follows the engine's own rules: lines starting with ``#`` are
skipped, ``[name]`` opens a section, and ``key=value`` lines become items.
The key keeps any whitespace around it; whitespace right after ``=`` is
skipped and the value runs up to the first tab or line break.
"""

from __future__ import annotations

import enum
import re
from array import array
from dataclasses import dataclass
from pathlib import Path

__all__ = ["ItemType", "ConfigItem", "IniParser"]

_SECTION = re.compile(r"\[([^\[\]]+)")
_KEY = re.compile(r"([^;=]+)=")
_VALUE = re.compile(r"[^\t\r\n]+")
_C_SPACE = " \t\n\v\f\r"
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:inf(?:inity)?|nan|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))",
    re.IGNORECASE,
)


def _float32(value: float) -> float:
    return array("f", [value])[0]


class ItemType(enum.IntEnum):
    """How an item's value was stored."""

    STRING = 0
    INT = 1
    FLOAT = 2
    BOOL = 3
    COMMENT = 4


@dataclass
class ConfigItem:
    """One ``key=value`` entry, or a comment, inside an optional section."""

    section: str = ""
    key: str = ""
    value: str = ""
    has_section: bool = False
    type: ItemType = ItemType.STRING


def _parse_key_value(line: str) -> tuple[str, str] | None:
    match = _KEY.match(line)
    if match is None:
        return None
    rest = line[match.end():]
    value = _VALUE.match(rest.lstrip(_C_SPACE)) or _VALUE.match(rest)
    if value is None:
        return None
    return match.group(1), value.group(0)


class IniParser:
    """An ordered list of configuration items with typed accessors."""

    def __init__(self, filename: str | Path | None = None) -> None:
        self.items: list[ConfigItem] = []
        if filename is not None:
            with open(filename, encoding="utf-8", errors="surrogateescape", newline="") as handle:
                self.parse(handle.read())

    def parse(self, text: str) -> None:
        """Add the items found in ``text``."""
        section = ""
        has_section = False
        for line in text.split("\n"):
            if line.startswith("#"):
                continue
            header = _SECTION.match(line)
            if header is not None:
                section = header.group(1)
                has_section = True
                continue
            pair = _parse_key_value(line)
            if pair is not None:
                key, value = pair
                self.items.append(
                    ConfigItem(
                        section=section if has_section else "",
                        key=key,
                        value=value,
                        has_section=has_section,
                    )
                )

    def _find(self, section: str, key: str) -> ConfigItem | None:
        return next(
            (item for item in self.items if item.section == section and item.key == key),
            None,
        )

    def get_string(self, section: str, key: str) -> str | None:
        """Value of ``key`` in ``section``, or None when absent."""
        item = self._find(section, key)
        return None if item is None else item.value

    def get_integer(self, section: str, key: str) -> int | None:
        """Leading integer of the value (0 if there is none), or None when absent."""
        value = self.get_string(section, key)
        if value is None:
            return None
        match = _INT_PREFIX.match(value)
        return int(match.group(1)) if match else 0

    def get_float(self, section: str, key: str) -> float | None:
        """Leading number of the value (0.0 if there is none), or None when absent."""
        value = self.get_string(section, key)
        if value is None:
            return None
        match = _FLOAT_PREFIX.match(value)
        return _float32(float(match.group(1))) if match else 0.0

    def get_bool(self, section: str, key: str) -> bool | None:
        """True for ``true`` in any case or ``1``; None when absent."""
        value = self.get_string(section, key)
        if value is None:
            return None
        return value.lower() == "true" or value == "1"

    def _store(self, section: str, key: str, value: str, kind: ItemType) -> None:
        item = self._find(section, key)
        if item is None:
            item = ConfigItem()
            self.items.append(item)
        item.section = section
        item.key = key
        item.value = value
        item.type = kind

    def set_string(self, section: str, key: str, value: str) -> None:
        """Set ``key`` in ``section`` to a string."""
        self._store(section, key, value, ItemType.STRING)

    def set_integer(self, section: str, key: str, value: int) -> None:
        """Set ``key`` in ``section`` to an integer."""
        self._store(section, key, str(int(value)), ItemType.INT)

    def set_float(self, section: str, key: str, value: float) -> None:
        """Set ``key`` in ``section`` to a float, written with six decimals."""
        self._store(section, key, f"{_float32(value):f}", ItemType.FLOAT)

    def set_bool(self, section: str, key: str, value: bool) -> None:
        """Set ``key`` in ``section`` to ``true`` or ``false``."""
        self._store(section, key, "true" if value else "false", ItemType.BOOL)

    def set_comment(self, section: str, key: str, comment: str) -> None:
        """Store a comment under ``key``; it is written as ``; comment``."""
        self._store(section, key, comment, ItemType.COMMENT)

    def _sections(self) -> list[str]:
        sections: list[str] = []
        past = ""
        for item in self.items:
            if item.section != past:
                past = item.section
                sections.append(item.section)
        if len(sections) > 1 and sections[0] == sections[-1]:
            sections.pop()
        return sections

    @staticmethod
    def _format(item: ConfigItem) -> str:
        if item.type is ItemType.COMMENT:
            return f"; {item.value}\n"
        return f"{item.key}={item.value}\n"

    def dumps(self) -> str:
        """Render the items as INI text."""
        parts = [self._format(item) for item in self.items if item.section == ""]
        parts.append("\n")
        blocks = []
        for section in self._sections():
            lines = [f"[{section}]\n"]
            lines.extend(self._format(item) for item in self.items if item.section == section)
            blocks.append("".join(lines))
        parts.append("\n".join(blocks))
        return "".join(parts)

    def write(self, filename: str | Path) -> None:
        """Write the items to ``filename``."""
        with open(filename, "w", encoding="utf-8", errors="surrogateescape", newline="") as handle:
            handle.write(self.dumps())