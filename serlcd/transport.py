"""Byte sinks: a pyserial port for real hardware and a hex dump for dry runs."""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

import serial

logger = logging.getLogger(__name__)

DEFAULT_BAUD = 9600


class SerialSink:
    """Owns a serial port and writes byte chunks to it in order.

    Usage::

        with SerialSink("/dev/ttyUSB0") as sink:
            sink.send(b"\\xfe\\x01")
    """

    def __init__(self, port: str, baud: int = DEFAULT_BAUD, timeout: float = 1.0) -> None:
        self.port = port
        self.baud = baud
        self.timeout = timeout
        self._ser: serial.Serial | None = None

    @property
    def connected(self) -> bool:
        return self._ser is not None

    def open(self) -> None:
        """Open the port.

        Raises:
            ConnectionError: If the port cannot be opened.
        """
        if self._ser is not None:
            return
        try:
            self._ser = serial.Serial(self.port, self.baud, timeout=self.timeout)
        except (serial.SerialException, OSError, ValueError) as e:
            raise ConnectionError(f"could not open serial port {self.port}: {e}") from e
        logger.info("opened %s at %d baud", self.port, self.baud)

    def close(self) -> None:
        if self._ser is None:
            return
        try:
            self._ser.close()
        except Exception as e:
            logger.warning("error closing %s: %s", self.port, e)
        finally:
            self._ser = None
            logger.info("closed %s", self.port)

    def send(self, data: bytes) -> None:
        if self._ser is None:
            raise ConnectionError(f"serial port {self.port} is not open")
        self._ser.write(data)
        self._ser.flush()

    def __enter__(self) -> "SerialSink":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class HexDumpSink:
    """Prints each chunk as one line of hex instead of sending it."""

    def __init__(self, stream: Optional[IO[str]] = None) -> None:
        self._stream = stream

    def send(self, data: bytes) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        print(data.hex(" ").upper(), file=stream)
