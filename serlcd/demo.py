"""Manual walk-through for checking a SerLCD by eye.

Runs the backlight through a few levels, walks the cursor over every cell,
then shows a two-line and a wrapped message, pausing between steps.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import Callable, Iterator, List, Tuple

from .config import AppConfig, build_encoder, load_and_validate_config
from .display import SerLCD
from .transport import SerialSink

Step = Tuple[str, Callable[[SerLCD], None]]


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Manual SerLCD walk-through")
    p.add_argument("--config", default=None, help="Path to YAML config")
    p.add_argument("--port", default=None, help="Serial port (default: serial.port from config)")
    p.add_argument(
        "--delay",
        type=float,
        default=0.5,
        help="Seconds between steps (default: 0.5)",
    )
    return p.parse_args(argv)


def demo_steps(cells: int) -> Iterator[Step]:
    for pct in (0, 100, 30, 70):
        yield f"backlight {pct}%", lambda lcd, pct=pct: lcd.set_backlight(pct)

    def mark(pos: int) -> Callable[[SerLCD], None]:
        def _run(lcd: SerLCD) -> None:
            lcd.clear()
            lcd.move_cursor(pos)
            lcd.send_byte(ord(str(pos)[0]))

        return _run

    for pos in range(cells):
        yield f"cell {pos}", mark(pos)

    yield "two lines", lambda lcd: lcd.write_two_lines("boo!", "yah!")

    def wrapped(lcd: SerLCD) -> None:
        lcd.clear()
        lcd.write_wrapped("A wrapped message...Yeah that's it!")

    yield "wrapped", wrapped


def run_demo(lcd: SerLCD, delay: float, sleep: Callable[[float], None] = time.sleep) -> List[str]:
    done: List[str] = []
    for name, step in demo_steps(lcd.encoder.geometry.total_cells):
        logging.getLogger(__name__).info("step: %s", name)
        step(lcd)
        done.append(name)
        sleep(delay)
    return done


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s", stream=sys.stderr)
    try:
        cfg = load_and_validate_config(args.config) if args.config else AppConfig()
    except Exception as e:
        print(f"Failed to load config: {e}", file=sys.stderr)
        return 2
    port = args.port or cfg.serial.port

    sink = SerialSink(port, cfg.serial.baud)
    try:
        sink.open()
    except ConnectionError as e:  # pragma: no cover - hardware dependent
        print(f"Failed to open serial port {port}: {e}", file=sys.stderr)
        return 3

    try:
        time.sleep(cfg.settle)
        run_demo(SerLCD(sink, build_encoder(cfg)), args.delay)
    except KeyboardInterrupt:  # pragma: no cover - manual stop
        return 0
    finally:
        sink.close()
    return 0


def run() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    run()
