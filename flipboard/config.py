# flipboard/config.py
from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional, Tuple

from .protocol_config import (
    LINK_SETTINGS,
    REFERENCE_GREETING,
    REFERENCE_ROWS,
    ROW_COOLDOWN,
    TICK_INTERVAL,
    WriteErrorPolicy,
    parse_write_error_policy,
)
from .validation import ConfigValidationError, validate_capacity, validate_row_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowConfig:
    id: str
    capacity: int

    def __post_init__(self) -> None:
        validate_row_id(self.id)
        validate_capacity(self.capacity, self.id)

    @property
    def blank(self) -> str:
        """All-space text filling the row."""
        return " " * self.capacity


@dataclass(frozen=True)
class SerialConfig:
    port: str = "/dev/ttyUSB0"
    baudrate: int = LINK_SETTINGS.baudrate
    write_timeout: float = LINK_SETTINGS.write_timeout
    mock: bool = True

    def __post_init__(self) -> None:
        if self.baudrate <= 0:
            raise ValueError("Serial baudrate must be > 0")
        if self.write_timeout <= 0:
            raise ValueError("Serial write_timeout must be > 0")


@dataclass(frozen=True)
class BootConfig:
    enabled: bool = True
    greeting: Tuple[str, ...] = REFERENCE_GREETING
    settle_delay: float = 1.0
    row_delay: float = 0.5
    hold_delay: float = 3.0
    release_delay: float = 1.5

    def __post_init__(self) -> None:
        for name in ("settle_delay", "row_delay", "hold_delay", "release_delay"):
            if getattr(self, name) < 0:
                raise ValueError(f"Boot {name} must be >= 0")


@dataclass(frozen=True)
class BoardConfig:
    rows: List[RowConfig]
    serial: SerialConfig = field(default_factory=SerialConfig)
    boot: BootConfig = field(default_factory=BootConfig)
    cooldown: float = ROW_COOLDOWN
    tick_interval: float = TICK_INTERVAL
    on_write_error: WriteErrorPolicy = WriteErrorPolicy.IGNORE

    def __post_init__(self) -> None:
        if self.cooldown <= 0:
            raise ValueError("cooldown must be > 0")
        if self.tick_interval <= 0:
            raise ValueError("tick_interval must be > 0")

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def validate(self) -> None:
        from .validation import validate_board_config

        validate_board_config(self)

    def with_port(self, port: Optional[str]) -> BoardConfig:
        """Copy of this config talking to hardware on `port`, or to the mock if None."""
        if port is None:
            serial = replace(self.serial, mock=True)
        else:
            serial = replace(self.serial, port=port, mock=False)
        return replace(self, rows=list(self.rows), serial=serial)

    def without_boot(self) -> BoardConfig:
        return replace(self, rows=list(self.rows), boot=replace(self.boot, enabled=False))


def _load_row(index: int, entry: dict) -> RowConfig:
    missing = [key for key in ("id", "capacity") if key not in entry]
    if missing:
        raise ConfigValidationError(f"[[rows]] entry {index} is missing {', '.join(missing)}")
    try:
        capacity = int(entry["capacity"])
    except (TypeError, ValueError) as e:
        raise ConfigValidationError(
            f"[[rows]] entry {index} has a non-integer capacity: {entry['capacity']!r}"
        ) from e
    return RowConfig(id=str(entry["id"]), capacity=capacity)


def _load_boot(boot: dict) -> BootConfig:
    defaults = BootConfig()
    greeting = boot.get("greeting")
    return BootConfig(
        enabled=bool(boot.get("enabled", defaults.enabled)),
        greeting=tuple(str(g) for g in greeting) if greeting is not None else defaults.greeting,
        settle_delay=float(boot.get("settle_delay", defaults.settle_delay)),
        row_delay=float(boot.get("row_delay", defaults.row_delay)),
        hold_delay=float(boot.get("hold_delay", defaults.hold_delay)),
        release_delay=float(boot.get("release_delay", defaults.release_delay)),
    )


def load_from_toml(config_path: str | Path) -> BoardConfig:
    """
    Load a BoardConfig from a TOML file.

    Expected TOML structure:

    [[rows]]
    id = "A"
    capacity = 6

    [[rows]]
    id = "B"
    capacity = 7

    [serial]
    port = "/dev/ttyUSB0"
    baudrate = 2400
    write_timeout = 10.0
    mock = false

    [runtime]
    cooldown = 1.0
    tick_interval = 0.06
    on_write_error = "ignore"   # ignore|retry|raise

    [boot]
    enabled = true
    greeting = ["TELAND", "TER ZEE"]
    settle_delay = 1.0
    row_delay = 0.5
    hold_delay = 3.0
    release_delay = 1.5

    Omitting [[rows]] gives the reference A-D table. Omitting [boot]
    gives the reference greeting, which only fits the reference table.
    """
    p = Path(config_path)
    if not p.exists():
        raise FileNotFoundError(f"Configuration file not found: {p}")

    with p.open("rb") as f:
        data = tomllib.load(f)

    serial = data.get("serial") or {}
    runtime = data.get("runtime") or {}
    rows = data.get("rows")

    if rows:
        row_configs = [_load_row(i, e) for i, e in enumerate(rows)]
    else:
        row_configs = [RowConfig(rid, cap) for rid, cap in REFERENCE_ROWS]

    cfg = BoardConfig(
        rows=row_configs,
        serial=SerialConfig(
            port=str(serial.get("port", "/dev/ttyUSB0")),
            baudrate=int(serial.get("baudrate", LINK_SETTINGS.baudrate)),
            write_timeout=float(serial.get("write_timeout", LINK_SETTINGS.write_timeout)),
            mock=bool(serial.get("mock", True)),
        ),
        boot=_load_boot(data.get("boot") or {}),
        cooldown=float(runtime.get("cooldown", ROW_COOLDOWN)),
        tick_interval=float(runtime.get("tick_interval", TICK_INTERVAL)),
        on_write_error=parse_write_error_policy(runtime.get("on_write_error", "ignore")),
    )

    # Early validations
    cfg.validate()

    logger.info(
        "Loaded BoardConfig: %d rows, serial=%s@%d (mock=%s), on_write_error=%s",
        cfg.row_count,
        cfg.serial.port,
        cfg.serial.baudrate,
        cfg.serial.mock,
        cfg.on_write_error,
    )
    return cfg


def default_config() -> BoardConfig:
    """The reference board: rows A (6 chars) and B, C, D (7 chars) on a mock port."""
    cfg = BoardConfig(
        rows=[RowConfig(rid, cap) for rid, cap in REFERENCE_ROWS],
        serial=SerialConfig(port="/dev/ttyUSB0", mock=True),
        boot=BootConfig(),
    )
    cfg.validate()
    return cfg
