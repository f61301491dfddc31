from __future__ import annotations

import io
import sys
from pathlib import Path

import serial

import serlcd.main as main_mod
import serlcd.transport as transport
from serlcd.main import main as cli_main


class FakeSerial:
    last: "FakeSerial | None" = None

    def __init__(self, port: str, baud: int, timeout: float | None = None) -> None:
        self.port = port
        self.baud = baud
        self.writes: list[bytes] = []
        self.closed = False
        FakeSerial.last = self

    def write(self, b: bytes) -> int:
        self.writes.append(b)
        return len(b)

    def flush(self) -> None:
        return None

    def close(self) -> None:
        self.closed = True


def test_dry_run_prints_hex(monkeypatch) -> None:
    buf = io.StringIO()
    monkeypatch.setattr(sys, "stdout", buf)
    rc = cli_main(["--dry-run", "/dev/null", "hello", "world"])
    assert rc == 0
    out = buf.getvalue().strip().splitlines()
    assert out == [
        "7C 9A",
        "FE 01",
        "FE 80",
        "68 65 6C 6C 6F 20 77 6F 72 6C 64",
    ]


def test_writes_to_serial_port(monkeypatch) -> None:
    monkeypatch.setattr(transport.serial, "Serial", FakeSerial)
    monkeypatch.setattr(main_mod.time, "sleep", lambda s: None)
    rc = cli_main(["--backlight", "100", "--baud", "19200", "/dev/ttyS3", "A wrapped message...Yeah that's it!"])
    assert rc == 0
    ser = FakeSerial.last
    assert ser is not None
    assert (ser.port, ser.baud) == ("/dev/ttyS3", 19200)
    assert b"".join(ser.writes) == (
        b"\x7c\x9d" + b"\xfe\x01" + b"\xfe\x80" + b"A wrapped message...Yeah that's "
    )
    assert ser.closed


def test_open_failure_exit_code(monkeypatch) -> None:
    def boom(*args, **kwargs):
        raise serial.SerialException("port busy")

    monkeypatch.setattr(transport.serial, "Serial", boom)
    assert cli_main(["/dev/ttyS3", "hi"]) == 3


def test_write_failure_exit_code(monkeypatch) -> None:
    class FlakySerial(FakeSerial):
        def write(self, b: bytes) -> int:
            raise serial.SerialTimeoutException("write timeout")

    monkeypatch.setattr(transport.serial, "Serial", FlakySerial)
    monkeypatch.setattr(main_mod.time, "sleep", lambda s: None)
    assert cli_main(["/dev/ttyS3", "hi"]) == 3
    assert FakeSerial.last is not None and FakeSerial.last.closed


def test_unencodable_text_exit_code(monkeypatch) -> None:
    monkeypatch.setattr(sys, "stdout", io.StringIO())
    assert cli_main(["--dry-run", "/dev/null", "snow ☃"]) == 2


def test_bad_config_exit_code(tmp_path: Path) -> None:
    cfg_path = tmp_path / "cfg.yaml"
    cfg_path.write_text("display:\n  on_unsupported: shrug\n")
    assert cli_main(["--config", str(cfg_path), "--dry-run", "/dev/null", "hi"]) == 2


def test_config_profile_applies_to_dry_run(tmp_path: Path, monkeypatch) -> None:
    cfg_path = tmp_path / "cfg.yaml"
    cfg_path.write_text("display:\n  on_unsupported: replace\n")
    buf = io.StringIO()
    monkeypatch.setattr(sys, "stdout", buf)
    assert cli_main(["--config", str(cfg_path), "--dry-run", "/dev/null", "☃"]) == 0
    assert buf.getvalue().splitlines()[-1] == "3F"
