import pytest

from flipboard.config import BoardConfig, BootConfig, RowConfig, SerialConfig
from flipboard.serial_port import MockSerialPort


class FakeClock:
    """Monotonic clock whose sleep just moves time forward."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_port() -> MockSerialPort:
    port = MockSerialPort(SerialConfig(mock=True))
    port.connect()
    return port


@pytest.fixture
def reference_rows() -> list[RowConfig]:
    return [RowConfig("A", 6), RowConfig("B", 7), RowConfig("C", 7), RowConfig("D", 7)]


@pytest.fixture
def quiet_config(reference_rows) -> BoardConfig:
    """Reference board with the boot sequence switched off."""
    return BoardConfig(
        rows=reference_rows,
        serial=SerialConfig(mock=True),
        boot=BootConfig(enabled=False),
    )
