#!/usr/bin/env python3
"""
Flipboard - command line runner

Opens the board (or a mock port when no serial port is given), runs the
boot sequence, shows the requested row texts and keeps ticking until the
requested duration elapses or Ctrl-C.
"""

import argparse
import logging
import sys
import threading
from typing import List, Optional, Tuple

from .board_controller import BoardController, BoardControllerError
from .config import BoardConfig, default_config, load_from_toml
from .text import fit_text
from .ticker import BoardTicker
from .validation import ValidationError

logger = logging.getLogger(__name__)


def parse_row_assignment(value: str) -> Tuple[int, str]:
    """Parse `INDEX=TEXT` (TEXT may be empty or contain '=')."""
    index, sep, text = value.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected INDEX=TEXT, got '{value}'")
    try:
        return int(index), text
    except ValueError:
        raise argparse.ArgumentTypeError(f"row index must be an integer, got '{index}'") from None


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Split-character board driver")
    parser.add_argument("--config", help="Path to TOML configuration file")
    parser.add_argument(
        "--port", help="Serial port of the board; without one the board runs headless"
    )
    parser.add_argument(
        "--row",
        action="append",
        default=[],
        type=parse_row_assignment,
        metavar="INDEX=TEXT",
        help="Text for a row, padded or truncated to its capacity (repeatable)",
    )
    parser.add_argument(
        "--align",
        choices=["left", "right", "center"],
        default="left",
        help="Alignment used when padding row text",
    )
    parser.add_argument("--no-boot", action="store_true", help="Skip the boot sequence")
    parser.add_argument(
        "--duration",
        type=float,
        help="Seconds to keep ticking before exiting (default: until Ctrl-C)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> BoardConfig:
    cfg = load_from_toml(args.config) if args.config else default_config()

    if args.port:
        cfg = cfg.with_port(args.port)
    elif cfg.serial.mock:
        logger.warning("Port not supplied, running headless.")

    if args.no_boot:
        cfg = cfg.without_boot()
    return cfg


def run(args: argparse.Namespace) -> int:
    try:
        cfg = build_config(args)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    try:
        board = BoardController(cfg)
    except (BoardControllerError, ValidationError) as e:
        logger.error(f"Board unavailable: {e}")
        return 1

    with board:
        try:
            for index, text in args.row:
                row = board.get_row(index)
                board.write(index, fit_text(text, row.capacity, align=args.align))
        except (BoardControllerError, ValidationError) as e:
            logger.error(f"Cannot show row text: {e}")
            return 1

        with BoardTicker(board) as ticker:
            threading.Event().wait(args.duration)
            logger.info(f"Ticker stats: {ticker.get_stats()}")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        return run(args)
    except KeyboardInterrupt:
        logger.info("Board stopped by user")
        return 0


if __name__ == "__main__":
    sys.exit(main())
