"""Trajectory output."""

from .base import TrajectoryWriter
from .formats.gro import GROWriter
from .formats.xyz import XYZWriter

__all__ = ["TrajectoryWriter", "GROWriter", "XYZWriter"]
