"""GROMACS GRO trajectory format implementation."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from ...units import NANOMETER, PICOSECOND
from ..base import TrajectoryWriter

if TYPE_CHECKING:
    from ...system import Snapshot

# GRO index fields are five characters wide
_INDEX_MODULUS = 100000


class GROWriter(TrajectoryWriter):
    """
    GRO format trajectory writer.

    Each frame is written as::

        title, t= 1.0
        N
        resnr resname atomname atomnr x y z vx vy vz
        ...
        box_x box_y box_z

    Positions and box in nm, velocities in nm/ps, time in ps. Every
    particle is written as residue ``DUMMY`` with atom name ``DUM``;
    indices are 1-based and wrap at 100000 as the format requires.
    """

    def __init__(
        self,
        target: str | Path | TextIO,
        title: str = "bibber",
        residue_name: str = "DUMMY",
        atom_name: str = "DUM",
    ) -> None:
        """
        Initialize GRO writer.

        Args:
            target: Output file path or open text stream.
            title: Title written at the start of every frame.
            residue_name: Residue name (at most five characters).
            atom_name: Atom name (at most five characters).
        """
        super().__init__(target)
        self.title = title
        self.residue_name = residue_name[:5]
        self.atom_name = atom_name[:5]

    def write(self, snapshot: Snapshot) -> None:
        """Write a single frame in GRO format."""
        file = self._require_open()

        positions = snapshot.positions / NANOMETER
        # m/s -> nm/ps
        velocities = snapshot.velocities * (PICOSECOND / NANOMETER)

        lines = [
            f"{self.title}, t= {snapshot.time_ps:.4f}\n",
            f"{snapshot.n_particles:5d}\n",
        ]
        for i in range(snapshot.n_particles):
            index = (i + 1) % _INDEX_MODULUS
            x, y, z = positions[i]
            vx, vy, vz = velocities[i]
            lines.append(
                f"{index:5d}{self.residue_name:<5s}{self.atom_name:>5s}{index:5d}"
                f"{x:8.3f}{y:8.3f}{z:8.3f}{vx:8.4f}{vy:8.4f}{vz:8.4f}\n"
            )
        bx, by, bz = snapshot.box_lengths / NANOMETER
        lines.append(f"{bx:10.5f}{by:10.5f}{bz:10.5f}\n")

        file.write("".join(lines))
        self._n_frames += 1
