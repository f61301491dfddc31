"""Byte-level encoding for SparkFun SerLCD backpacks.

Every instruction is a prefix byte followed by an opcode or data:

- ``0xFE`` routes the next byte to the LCD's own controller chip
  (cursor moves, clear).
- ``0x7C`` routes the next byte(s) to the SerLCD board itself
  (backlight, splash screen).

Text is sent as raw bytes, one per character.  The encoder is pure: each
operation returns the ordered chunks to send and never touches a port.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Protocol, Sequence

logger = logging.getLogger(__name__)

SET_ADDRESS = 0x80
CLEAR = 0x01
SPLASH_TOGGLE = 0x09
SPLASH_SAVE = b"\nj"

_ERROR_POLICIES = {"strict", "replace"}
_PLACEHOLDER = b"?"


class CommandPrefix(IntEnum):
    DISPLAY = 0xFE
    CONTROLLER = 0x7C


class ByteSink(Protocol):
    def send(self, data: bytes) -> None:
        ...


class CharacterEncodingError(ValueError):
    """Text holds a character the display's 8-bit character set cannot show."""


@dataclass(frozen=True)
class LineAddressRange:
    """One physical row: inclusive logical bounds and its internal base offset."""

    start: int
    end: int
    base: int

    @property
    def width(self) -> int:
        return self.end - self.start + 1

    def __contains__(self, position: object) -> bool:
        return isinstance(position, int) and self.start <= position <= self.end


@dataclass(frozen=True)
class DisplayGeometry:
    rows: tuple[LineAddressRange, ...]
    columns: int

    def __post_init__(self) -> None:
        if self.columns <= 0:
            raise ValueError("columns must be > 0")
        if not self.rows:
            raise ValueError("geometry needs at least one row")
        expected = 0
        for i, row in enumerate(self.rows):
            if row.start != expected:
                raise ValueError(f"rows[{i}] must start at {expected}, got {row.start}")
            if row.width != self.columns:
                raise ValueError(f"rows[{i}] is {row.width} cells wide, expected {self.columns}")
            if row.base < 0 or row.base + self.columns - 1 > 0x7F:
                raise ValueError(f"rows[{i}] base 0x{row.base:02X} does not fit the address field")
            expected = row.end + 1

    @classmethod
    def uniform(cls, columns: int, bases: Iterable[int]) -> "DisplayGeometry":
        rows = tuple(
            LineAddressRange(start=i * columns, end=(i + 1) * columns - 1, base=base)
            for i, base in enumerate(bases)
        )
        return cls(rows=rows, columns=columns)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def total_cells(self) -> int:
        return self.row_count * self.columns

    def row_of(self, position: int) -> LineAddressRange | None:
        for row in self.rows:
            if position in row:
                return row
        return None

    def address_of(self, position: int) -> int:
        """Hardware address byte for ``position``; out-of-range positions map to 0."""
        row = self.row_of(position)
        if row is None:
            logger.debug("position %d outside 0..%d, using 0", position, self.total_cells - 1)
            row = self.rows[0]
            position = row.start
        return SET_ADDRESS + row.base + (position - row.start)


# Row 1 is reached at 0x80 + 0x30 + column, as the reference backpack expects.
REFERENCE_GEOMETRY = DisplayGeometry.uniform(16, (0x00, 0x30))
# HD44780 DDRAM layout: row 1 starts at address 0x40.
DDRAM_GEOMETRY = DisplayGeometry.uniform(16, (0x00, 0x40))


@dataclass(frozen=True)
class BacklightRange:
    minimum: int = 128
    maximum: int = 157

    def __post_init__(self) -> None:
        if not 0 <= self.minimum <= self.maximum <= 0xFF:
            raise ValueError(
                f"backlight range must satisfy 0 <= min <= max <= 255, "
                f"got {self.minimum}..{self.maximum}"
            )


def backlight_byte(percent: int, backlight: BacklightRange = BacklightRange()) -> int:
    # No clamping: out-of-range percentages give out-of-range levels, as the
    # backpack firmware has always received them.  Division truncates toward zero.
    scaled = (backlight.maximum - backlight.minimum) * int(percent)
    step = abs(scaled) // 100
    if scaled < 0:
        step = -step
    return (step + backlight.minimum) & 0xFF


def truncate(text: str, limit: int) -> str:
    if len(text) > limit:
        logger.debug("truncating %d chars to %d", len(text), limit)
        return text[:limit]
    return text


def check_charset(charset: str) -> None:
    """Raise ValueError unless ``charset`` is a known text codec."""
    try:
        "".encode(charset)
    except LookupError as e:
        raise ValueError(f"unknown charset '{charset}'") from e


def emit(sink: ByteSink, chunks: Sequence[bytes]) -> None:
    for chunk in chunks:
        sink.send(chunk)


class DisplayProtocolEncoder:
    """Turns display operations into ordered byte chunks for one geometry.

    Usage::

        enc = DisplayProtocolEncoder()
        emit(sink, enc.write_two_lines("boo!", "yah!"))
    """

    def __init__(
        self,
        geometry: DisplayGeometry = REFERENCE_GEOMETRY,
        backlight: BacklightRange = BacklightRange(),
        charset: str = "latin-1",
        errors: str = "strict",
    ) -> None:
        if errors not in _ERROR_POLICIES:
            raise ValueError(f"unknown character policy '{errors}'")
        check_charset(charset)
        self.geometry = geometry
        self.backlight = backlight
        self.charset = charset
        self.errors = errors

    @staticmethod
    def _command(prefix: CommandPrefix, *body: int) -> bytes:
        return bytes([prefix, *body])

    def encode_text(self, text: str) -> bytes:
        out = bytearray()
        for i, ch in enumerate(text):
            try:
                b = ch.encode(self.charset)
            except UnicodeEncodeError:
                b = b""
            if len(b) != 1:
                if self.errors == "strict":
                    raise CharacterEncodingError(
                        f"character {ch!r} at index {i} has no single-byte form in {self.charset}"
                    )
                b = _PLACEHOLDER
            out += b
        return bytes(out)

    def move_cursor(self, position: int) -> List[bytes]:
        return [self._command(CommandPrefix.DISPLAY, self.geometry.address_of(position))]

    def move_cursor_to_line(self, row: int) -> List[bytes]:
        if not 0 <= row < self.geometry.row_count:
            raise ValueError(f"row must be in 0..{self.geometry.row_count - 1}, got {row}")
        return self.move_cursor(self.geometry.rows[row].start)

    def clear(self) -> List[bytes]:
        return [self._command(CommandPrefix.DISPLAY, CLEAR)]

    def set_backlight(self, percent: int) -> List[bytes]:
        return [self._command(CommandPrefix.CONTROLLER, backlight_byte(percent, self.backlight))]

    def backlight_on(self) -> List[bytes]:
        return self.set_backlight(100)

    def backlight_off(self) -> List[bytes]:
        return self.set_backlight(0)

    def toggle_splash_screen(self) -> List[bytes]:
        return [self._command(CommandPrefix.CONTROLLER, SPLASH_TOGGLE)]

    def set_splash_screen_text(self, line1: str, line2: str) -> List[bytes]:
        # Saves whatever the two lines show as the power-on splash.
        return (
            self.clear()
            + self.write_two_lines(line1, line2)
            + [self._command(CommandPrefix.CONTROLLER, *SPLASH_SAVE)]
        )

    def write_char_sequence(self, text: str, start: int) -> List[bytes]:
        """Cursor to ``start`` then the raw text; no truncation here."""
        payload = self.encode_text(text)
        chunks = self.move_cursor(start)
        if payload:
            chunks.append(payload)
        return chunks

    def write_one_line(self, message: str) -> List[bytes]:
        return self.write_char_sequence(truncate(message, self.geometry.columns), 0)

    def write_two_lines(self, line1: str, line2: str) -> List[bytes]:
        cols = self.geometry.columns
        return (
            self.clear()
            + self.write_char_sequence(truncate(line1, cols), 0)
            + self.write_char_sequence(truncate(line2, cols), cols)
        )

    def write_wrapped(self, message: str) -> List[bytes]:
        # The controller's auto-increment carries the text onto the next row.
        return self.write_char_sequence(truncate(message, self.geometry.total_cells), 0)

    def write_byte(self, value: int) -> List[bytes]:
        if not 0 <= value <= 0xFF:
            raise ValueError(f"byte value must be in 0..255, got {value}")
        return [bytes([value])]
