"""Trajectory format implementations."""

from .gro import GROWriter
from .xyz import XYZWriter

__all__ = ["GROWriter", "XYZWriter"]
