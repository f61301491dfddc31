from __future__ import annotations

import logging
from typing import List, Optional

from .protocol import ByteSink, DisplayProtocolEncoder, emit

logger = logging.getLogger(__name__)


class SerLCD:
    """A SerLCD on a caller-owned sink; every call encodes and sends at once.

    The sink is never opened or closed here, and transport errors propagate
    unchanged.  Only one caller may drive a sink at a time, otherwise bytes
    of different commands interleave.
    """

    def __init__(self, sink: ByteSink, encoder: Optional[DisplayProtocolEncoder] = None) -> None:
        self.sink = sink
        self.encoder = encoder if encoder is not None else DisplayProtocolEncoder()

    def _send(self, op: str, chunks: List[bytes]) -> None:
        logger.debug("%s: %s", op, b"".join(chunks).hex(" "))
        emit(self.sink, chunks)

    def move_cursor(self, position: int) -> None:
        self._send("move_cursor", self.encoder.move_cursor(position))

    def move_cursor_to_line0(self) -> None:
        self._send("move_cursor_to_line0", self.encoder.move_cursor_to_line(0))

    def move_cursor_to_line1(self) -> None:
        self._send("move_cursor_to_line1", self.encoder.move_cursor_to_line(1))

    def clear(self) -> None:
        self._send("clear", self.encoder.clear())

    def set_backlight(self, percent: int) -> None:
        self._send("set_backlight", self.encoder.set_backlight(percent))

    def backlight_on(self) -> None:
        self._send("backlight_on", self.encoder.backlight_on())

    def backlight_off(self) -> None:
        self._send("backlight_off", self.encoder.backlight_off())

    def toggle_splash_screen(self) -> None:
        self._send("toggle_splash_screen", self.encoder.toggle_splash_screen())

    def set_splash_screen_text(self, line1: str, line2: str) -> None:
        self._send("set_splash_screen_text", self.encoder.set_splash_screen_text(line1, line2))

    def write_one_line(self, message: str) -> None:
        self._send("write_one_line", self.encoder.write_one_line(message))

    def write_two_lines(self, line1: str, line2: str) -> None:
        self._send("write_two_lines", self.encoder.write_two_lines(line1, line2))

    def write_wrapped(self, message: str) -> None:
        self._send("write_wrapped", self.encoder.write_wrapped(message))

    def write_char_sequence(self, text: str, start: int) -> None:
        self._send("write_char_sequence", self.encoder.write_char_sequence(text, start))

    def send_byte(self, value: int) -> None:
        self._send("send_byte", self.encoder.write_byte(value))
