"""Tests for the background ticker thread."""

import time

import pytest

from flipboard.board_controller import BoardController
from flipboard.config import BoardConfig, BootConfig, RowConfig
from flipboard.protocol_encoder import encode_row_frame
from flipboard.serial_port import MockSerialPort
from flipboard.ticker import BoardTicker


def wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.fixture
def fast_board() -> BoardController:
    cfg = BoardConfig(
        rows=[RowConfig("A", 6), RowConfig("B", 7)],
        boot=BootConfig(enabled=False),
        cooldown=0.1,
        tick_interval=0.01,
    )
    return BoardController(cfg, serial_port=MockSerialPort(cfg.serial))


def test_ticker_flushes_queued_text(fast_board):
    port = fast_board.serial_port
    fast_board.write(0, "AAAAAA")
    fast_board.write(0, "BBBBBB")
    assert len(port.frames) == 1

    with BoardTicker(fast_board) as ticker:
        assert ticker.running
        assert wait_for(lambda: len(port.frames) == 2)

    assert not ticker.running
    assert port.frames[-1] == encode_row_frame("A", 6, "BBBBBB")
    stats = ticker.get_stats()
    assert stats["frames_sent"] == 1
    assert stats["ticks"] >= 1


def test_ticker_survives_tick_errors(fast_board, monkeypatch):
    calls = []

    def broken_tick():
        calls.append(1)
        raise RuntimeError("port vanished")

    monkeypatch.setattr(fast_board, "tick", broken_tick)
    ticker = BoardTicker(fast_board)
    ticker.start()
    try:
        assert wait_for(lambda: len(calls) >= 3)
    finally:
        ticker.stop()
    assert ticker.get_stats()["tick_errors"] >= 3


def test_ticker_start_twice_is_harmless(fast_board):
    ticker = BoardTicker(fast_board)
    ticker.start()
    ticker.start()
    ticker.stop()
    assert not ticker.running


def test_ticker_interval_defaults_to_config(fast_board):
    assert BoardTicker(fast_board).interval == 0.01
    assert BoardTicker(fast_board, interval=0.05).interval == 0.05


@pytest.mark.parametrize("interval", [0, -1, 0.1, 0.5])
def test_ticker_interval_must_be_below_cooldown(fast_board, interval):
    with pytest.raises(ValueError):
        BoardTicker(fast_board, interval=interval)
