"""Extended XYZ trajectory format implementation."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import numpy as np

from ...units import ANGSTROM
from ..base import TrajectoryWriter

if TYPE_CHECKING:
    from ...system import Snapshot


class XYZWriter(TrajectoryWriter):
    """
    Extended XYZ format trajectory writer.

    XYZ is a simple text format:
        N
        Lattice="..." Time=... Properties=species:S:1:pos:R:3
        element x y z
        ...

    Coordinates and lattice in ångström, time in ps.
    """

    def __init__(
        self,
        target: str | Path | TextIO,
        element: str = "X",
        precision: int = 6,
    ) -> None:
        """
        Initialize XYZ writer.

        Args:
            target: Output file path or open text stream.
            element: Element symbol written for every particle.
            precision: Decimal places for coordinates.
        """
        super().__init__(target)
        self.element = element
        self.precision = precision

    def write(self, snapshot: Snapshot) -> None:
        """Write a single frame in extended XYZ format."""
        file = self._require_open()

        positions = snapshot.positions / ANGSTROM
        lattice = np.diag(snapshot.box_lengths / ANGSTROM).flatten()
        lattice_str = " ".join(f"{v:.6f}" for v in lattice)
        comment = (
            f'Lattice="{lattice_str}" Time={snapshot.time_ps:.4f} '
            f"Properties=species:S:1:pos:R:3"
        )

        fmt = (
            f"{{}} {{:.{self.precision}f}} {{:.{self.precision}f}} "
            f"{{:.{self.precision}f}}\n"
        )
        lines = [f"{snapshot.n_particles}\n", f"{comment}\n"]
        lines.extend(fmt.format(self.element, *position) for position in positions)

        file.write("".join(lines))
        self._n_frames += 1
