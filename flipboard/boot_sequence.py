"""
Boot Sequence

A fixed power-up animation that doubles as a wiring self-test:
clear every row, type a greeting in row by row, hold it, clear again.

The sequence is strictly linear with blocking sleeps between steps and no
error recovery of its own. Writes go through the board, so the usual row
cooldown and change suppression apply.
"""

import logging
import time
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from .config import BootConfig

if TYPE_CHECKING:
    from .board_controller import BoardController


logger = logging.getLogger(__name__)


class BootStage(Enum):
    CLEARING = "clearing"
    GREETING = "greeting"
    HOLD = "hold"
    FINAL_CLEAR = "final_clear"
    READY = "ready"

    def __str__(self) -> str:
        return self.value


class BootSequence:
    def __init__(self, config: BootConfig, sleep: Callable[[float], None] = time.sleep):
        self.config = config
        self._sleep = sleep
        self.stage: Optional[BootStage] = None

    def run(self, board: "BoardController") -> None:
        """Run the whole sequence on `board`. Returns once the board is READY."""
        if not self.config.enabled:
            logger.info("Boot sequence disabled")
            self._enter(BootStage.READY)
            return

        self._enter(BootStage.CLEARING)
        self._clear(board)
        self._sleep(self.config.settle_delay)

        self._enter(BootStage.GREETING)
        for index, text in enumerate(self.config.greeting):
            if index:
                self._sleep(self.config.row_delay)
            board.write(index, text)

        self._enter(BootStage.HOLD)
        self._sleep(self.config.hold_delay)

        self._enter(BootStage.FINAL_CLEAR)
        self._clear(board)
        self._sleep(self.config.release_delay)

        self._enter(BootStage.READY)

    def _clear(self, board: "BoardController") -> None:
        for index, row in enumerate(board.config.rows):
            board.write(index, row.blank)

    def _enter(self, stage: BootStage) -> None:
        self.stage = stage
        logger.info(f"Boot stage: {stage}")
