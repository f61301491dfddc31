from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List

import yaml

from .protocol import (
    BacklightRange,
    DisplayGeometry,
    DisplayProtocolEncoder,
    check_charset,
)
from .transport import DEFAULT_BAUD


@dataclass
class SerialConfig:
    port: str = "/dev/ttyUSB0"
    baud: int = DEFAULT_BAUD


@dataclass
class DisplayConfig:
    columns: int = 16
    row_bases: List[int] = field(default_factory=lambda: [0x00, 0x30])
    backlight_min: int = 128
    backlight_max: int = 157
    charset: str = "latin-1"
    on_unsupported: str = "strict"  # strict | replace


@dataclass
class AppConfig:
    serial: SerialConfig = field(default_factory=SerialConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    settle: float = 0.5  # seconds to let the backpack catch up after open/backlight


_ALLOWED_POLICIES = {"strict", "replace"}


def _as_int(val: Any, default: int) -> int:
    try:
        return int(val)
    except Exception:
        return default


def _as_float(val: Any, default: float) -> float:
    try:
        return float(val)
    except Exception:
        return default


def _load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text())
    return data or {}


def load_config(path: str | Path) -> AppConfig:
    p = Path(path)
    data = _load_yaml(p)

    # serial
    serial_raw = data.get("serial", {}) or {}
    serial = SerialConfig(
        port=str(serial_raw.get("port", SerialConfig.port)),
        baud=_as_int(serial_raw.get("baud", SerialConfig.baud), SerialConfig.baud),
    )

    # display profile
    disp_raw = data.get("display", {}) or {}
    defaults = DisplayConfig()
    bases_raw = disp_raw.get("row_bases")
    if isinstance(bases_raw, list):
        row_bases = [_as_int(b, -1) for b in bases_raw]
    else:
        row_bases = list(defaults.row_bases)
    display = DisplayConfig(
        columns=_as_int(disp_raw.get("columns", defaults.columns), defaults.columns),
        row_bases=row_bases,
        backlight_min=_as_int(
            disp_raw.get("backlight_min", defaults.backlight_min), defaults.backlight_min
        ),
        backlight_max=_as_int(
            disp_raw.get("backlight_max", defaults.backlight_max), defaults.backlight_max
        ),
        charset=str(disp_raw.get("charset", defaults.charset)).strip(),
        on_unsupported=str(disp_raw.get("on_unsupported", defaults.on_unsupported)).strip(),
    )

    settle = _as_float(data.get("settle", AppConfig.settle), AppConfig.settle)

    return AppConfig(serial=serial, display=display, settle=settle)


def validate_config(cfg: AppConfig) -> None:
    if not cfg.serial.port:
        raise ValueError("serial.port must be a non-empty string")
    if cfg.serial.baud <= 0:
        raise ValueError("serial.baud must be > 0")
    if cfg.settle < 0:
        raise ValueError("settle must be >= 0")

    d = cfg.display
    if d.on_unsupported not in _ALLOWED_POLICIES:
        raise ValueError(f"display.on_unsupported: unknown policy '{d.on_unsupported}'")
    if not d.row_bases:
        raise ValueError("display.row_bases must list at least one row")
    for i, b in enumerate(d.row_bases):
        if b < 0:
            raise ValueError(f"display.row_bases[{i}] must be a non-negative integer")
    check_charset(d.charset)
    # Geometry and backlight check their own invariants on construction.
    build_geometry(cfg)
    BacklightRange(minimum=d.backlight_min, maximum=d.backlight_max)


def load_and_validate_config(path: str | Path) -> AppConfig:
    cfg = load_config(path)
    validate_config(cfg)
    return cfg


def build_geometry(cfg: AppConfig) -> DisplayGeometry:
    return DisplayGeometry.uniform(cfg.display.columns, cfg.display.row_bases)


def build_encoder(cfg: AppConfig) -> DisplayProtocolEncoder:
    d = cfg.display
    return DisplayProtocolEncoder(
        geometry=build_geometry(cfg),
        backlight=BacklightRange(minimum=d.backlight_min, maximum=d.backlight_max),
        charset=d.charset,
        errors=d.on_unsupported,
    )
