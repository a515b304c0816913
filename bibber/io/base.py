"""Base class for trajectory writers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from ..system import Snapshot


class TrajectoryWriter(ABC):
    """
    Abstract base class for trajectory writers.

    Trajectory writers serialize snapshots to a text format, one frame per
    call to ``write``. The target is either a path, opened and closed by the
    writer, or an already open text stream such as ``sys.stdout``, which
    the writer never closes.

    Example:
        with GROWriter("trajectory.gro", title="argon") as writer:
            for snapshot in snapshots:
                writer.write(snapshot)
    """

    def __init__(self, target: str | Path | TextIO) -> None:
        """
        Initialize trajectory writer.

        Args:
            target: Output file path or open text stream.
        """
        if isinstance(target, (str, Path)):
            self.filename: Path | None = Path(target)
            self._stream: TextIO | None = None
        else:
            self.filename = None
            self._stream = target
        self._file: TextIO | None = None
        self._n_frames = 0

    @abstractmethod
    def write(self, snapshot: Snapshot) -> None:
        """
        Write a single frame.

        Args:
            snapshot: Snapshot to write.
        """
        ...

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def _require_open(self) -> TextIO:
        if self._file is None:
            raise RuntimeError("File not open. Use context manager or call open().")
        return self._file

    def open(self) -> None:
        """Open the target for writing."""
        if self._file is not None:
            return
        if self.filename is not None:
            self._file = self.filename.open("w")
        else:
            self._file = self._stream

    def flush(self) -> None:
        if self._file is not None:
            self._file.flush()

    def close(self) -> None:
        """Close the file; streams passed in are only flushed."""
        if self._file is None:
            return
        if self.filename is not None:
            self._file.close()
        else:
            self._file.flush()
        self._file = None

    def __enter__(self) -> TrajectoryWriter:
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    @property
    def n_frames(self) -> int:
        """Number of frames written."""
        return self._n_frames
