from __future__ import annotations

from pathlib import Path

import pytest

from serlcd.config import (
    AppConfig,
    DisplayConfig,
    SerialConfig,
    build_encoder,
    load_and_validate_config,
    load_config,
    validate_config,
)


def test_load_minimal_tmpfile(tmp_path: Path) -> None:
    cfg_path = tmp_path / "cfg.yaml"
    cfg_path.write_text(
        """
serial:
  port: /dev/ttyACM0
  baud: 19200
settle: 0.1
display:
  row_bases: [0x00, 0x40]
  charset: ascii
  on_unsupported: replace
"""
    )
    cfg = load_config(cfg_path)
    assert isinstance(cfg, AppConfig)
    assert cfg.serial.port == "/dev/ttyACM0"
    assert cfg.serial.baud == 19200
    assert cfg.settle == 0.1
    assert cfg.display.row_bases == [0x00, 0x40]
    assert cfg.display.columns == 16
    assert cfg.display.backlight_min == 128
    assert cfg.display.on_unsupported == "replace"


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    cfg_path = tmp_path / "empty.yaml"
    cfg_path.write_text("")
    cfg = load_and_validate_config(cfg_path)
    assert cfg == AppConfig()


def test_bad_scalars_fall_back(tmp_path: Path) -> None:
    cfg_path = tmp_path / "cfg.yaml"
    cfg_path.write_text("serial:\n  baud: fast\nsettle: soon\n")
    cfg = load_config(cfg_path)
    assert cfg.serial.baud == 9600
    assert cfg.settle == 0.5


def test_example_config_is_valid() -> None:
    example = Path(__file__).resolve().parents[1] / "config.example.yaml"
    cfg = load_and_validate_config(example)
    assert cfg.display.row_bases == [0x00, 0x30]


def test_build_encoder_follows_config() -> None:
    cfg = AppConfig(display=DisplayConfig(row_bases=[0x00, 0x40], backlight_min=0, backlight_max=100))
    enc = build_encoder(cfg)
    assert b"".join(enc.move_cursor(16)) == b"\xfe\xc0"
    assert b"".join(enc.set_backlight(50)) == b"\x7c\x32"


@pytest.mark.parametrize(
    "cfg",
    [
        AppConfig(serial=SerialConfig(port="")),
        AppConfig(serial=SerialConfig(baud=0)),
        AppConfig(settle=-1.0),
        AppConfig(display=DisplayConfig(on_unsupported="ignore")),
        AppConfig(display=DisplayConfig(charset="klingon")),
        AppConfig(display=DisplayConfig(row_bases=[])),
        AppConfig(display=DisplayConfig(row_bases=[0x00, 0x75])),
        AppConfig(display=DisplayConfig(columns=0)),
        AppConfig(display=DisplayConfig(backlight_min=160, backlight_max=150)),
    ],
)
def test_validate_rejects(cfg: AppConfig) -> None:
    with pytest.raises(ValueError):
        validate_config(cfg)


def test_validate_ok_default() -> None:
    validate_config(AppConfig())
