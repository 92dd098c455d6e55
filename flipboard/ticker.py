import logging
import threading
from typing import Optional

from .board_controller import BoardController

logger = logging.getLogger(__name__)


class BoardTicker:
    """
    Periodic driver calling `board.tick()` from a background thread.

    The cadence must stay below the row cooldown so queued updates go out as
    soon as their row is allowed to change.
    """

    def __init__(self, board: BoardController, interval: Optional[float] = None):
        self.board = board
        self.interval = interval if interval is not None else board.config.tick_interval
        if self.interval <= 0:
            raise ValueError("Tick interval must be > 0")
        if self.interval >= board.config.cooldown:
            raise ValueError(
                f"Tick interval {self.interval}s must be below the row cooldown "
                f"({board.config.cooldown}s)"
            )

        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._stats = {"ticks": 0, "frames_sent": 0, "tick_errors": 0}

    def __enter__(self) -> "BoardTicker":
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, tb) -> None:
        self.stop()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            logger.warning("Board ticker already running")
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="board-ticker", daemon=True
        )
        self._thread.start()
        logger.info(f"Board ticker started ({self.interval * 1000:.0f} ms)")

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
            logger.info("Board ticker stopped")

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self._stats["frames_sent"] += self.board.tick()
            except Exception as e:
                # Keep ticking
                self._stats["tick_errors"] += 1
                logger.error(f"Board tick failed: {e}")
            self._stats["ticks"] += 1

    def get_stats(self) -> dict:
        return dict(self._stats, running=self.running, interval=self.interval)
