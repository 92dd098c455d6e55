"""
Split-character board driver package.

This package provides:
- Frame encoding for the board's row protocol
- Per-row rate limiting and change suppression
- Board control with a power-up boot sequence
- Serial communication with the board (hardware or mock)
- Configuration loading for row layouts and timing
"""

__version__ = "0.1.0"
