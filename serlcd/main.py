from __future__ import annotations

import argparse
import logging
import sys
import time

import serial

from .config import AppConfig, build_encoder, load_and_validate_config, validate_config
from .display import SerLCD
from .protocol import CharacterEncodingError
from .transport import HexDumpSink, SerialSink


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Write a message to a SparkFun SerLCD")
    p.add_argument("port", help="Serial port the SerLCD is attached to")
    p.add_argument("text", nargs="+", help="Text to show; words are joined with spaces")
    p.add_argument("--config", default=None, help="Path to YAML config")
    p.add_argument("--baud", type=int, default=None, help="Override serial.baud from config")
    p.add_argument(
        "--backlight",
        type=int,
        default=90,
        help="Backlight level in percent (default: 90)",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the encoded bytes as hex instead of opening the port",
    )
    p.add_argument(
        "--verbose",
        action="store_true",
        help="Enable INFO-level logging (default is ERROR)",
    )
    return p.parse_args(argv)


def _settle(seconds: float) -> None:
    if seconds > 0:
        time.sleep(seconds)


def show_message(lcd: SerLCD, text: str, backlight: int, settle: float = 0.0) -> None:
    """Backlight, clear, then the message wrapped over both rows."""
    lcd.set_backlight(backlight)
    _settle(settle)
    lcd.clear()
    lcd.write_wrapped(text)


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    lvl = logging.INFO if args.verbose else logging.ERROR
    logging.basicConfig(level=lvl, format="%(levelname)s:%(name)s:%(message)s", stream=sys.stderr)
    log = logging.getLogger(__name__)

    try:
        cfg = load_and_validate_config(args.config) if args.config else AppConfig()
        cfg.serial.port = args.port
        if args.baud is not None:
            cfg.serial.baud = args.baud
        validate_config(cfg)
        encoder = build_encoder(cfg)
    except Exception as e:
        log.error("Failed to load config: %s", e)
        return 2

    text = " ".join(args.text)

    if args.dry_run:
        try:
            show_message(SerLCD(HexDumpSink(), encoder), text, args.backlight)
        except CharacterEncodingError as e:
            log.error("cannot encode message: %s", e)
            return 2
        return 0

    log.info("writing %r to LCD on %s", text, cfg.serial.port)
    sink = SerialSink(cfg.serial.port, cfg.serial.baud)
    try:
        sink.open()
        _settle(cfg.settle)
        show_message(SerLCD(sink, encoder), text, args.backlight, cfg.settle)
    except CharacterEncodingError as e:
        log.error("cannot encode message: %s", e)
        return 2
    except (ConnectionError, serial.SerialException, OSError) as e:
        log.error("serial transport failed on %s: %s", cfg.serial.port, e)
        return 3
    finally:
        sink.close()
    return 0


def run() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    run()
