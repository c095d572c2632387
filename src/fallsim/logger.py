"""
CSV logging of the sample series.

Buffers rows in memory and writes in batches to minimize I/O overhead.
Implements context manager protocol for safe resource handling.
"""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, TextIO

from fallsim.dynamics.state import KinematicState

HEADER = ["run", "t", "velocity", "height", "acceleration"]


class CSVLogger:
    """
    Buffered CSV writer for committed simulation samples.

    Every row carries a run index so several runs separated by resets can
    share one file.

    Parameters
    ----------
    filepath : str | Path
        Output CSV file path
    buffer_size : int
        Number of rows to buffer before writing. Higher = fewer writes but
        more memory.

    Notes
    -----
    **Usage Patterns:**

    1. Context manager (recommended):
    >>> with CSVLogger("drop.csv") as logger:
    ...     controller = simulate(params, logger=logger)

    2. Manual management:
    >>> logger = CSVLogger("drop.csv")
    >>> controller = SimulationController(params, logger=logger)
    >>> ...
    >>> logger.close()  # Important!
    """

    def __init__(self, filepath: str | Path, buffer_size: int = 1000) -> None:
        if buffer_size < 1:
            raise ValueError(f"buffer_size must be >= 1, got {buffer_size}")
        self.filepath = Path(filepath)
        self.buffer_size = buffer_size

        self._buffer: list[list[str]] = []
        self._file: TextIO | None = None
        self._writer: Any = None  # csv.writer is a function, not a type

        self.filepath.parent.mkdir(parents=True, exist_ok=True)

    def __enter__(self) -> CSVLogger:
        """Open file and write the header."""
        self._open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close file, flushing any remaining data."""
        self.close()

    def _open(self) -> None:
        self._file = open(self.filepath, "w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._file)
        self._writer.writerow(HEADER)
        self._file.flush()  # Ensure header written immediately

    def log(self, state: KinematicState, run: int = 0) -> None:
        """
        Add one committed state to the buffer.

        Automatically opens the file on first call if not used as a context
        manager. Writes to disk when the buffer is full.
        """
        if self._file is None:
            self._open()

        self._buffer.append([
            str(run),
            f"{state.time:.10f}",
            f"{state.velocity:.10e}",
            f"{state.height:.10e}",
            f"{state.acceleration:.10e}",
        ])

        if len(self._buffer) >= self.buffer_size:
            self.flush()

    def flush(self) -> None:
        """Write buffered rows to disk and clear buffer."""
        if self._writer and self._buffer:
            self._writer.writerows(self._buffer)
            if self._file:
                self._file.flush()
            self._buffer.clear()

    def close(self) -> None:
        """Flush remaining data and close file."""
        self.flush()
        if self._file:
            self._file.close()
            self._file = None
            self._writer = None
