"""Periodic simulation box."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..errors import ConfigurationError


class BoundaryShape(Enum):
    """Supported periodic cell shapes."""

    CUBIC = "cubic"

    @classmethod
    def parse(cls, keyword: str) -> BoundaryShape:
        """
        Look up a shape by its recipe keyword.

        Raises:
            ConfigurationError: If the shape is not supported.
        """
        try:
            return cls(keyword.lower())
        except ValueError:
            supported = ", ".join(shape.value for shape in cls)
            raise ConfigurationError(
                f"unsupported boundary shape {keyword!r} (supported: {supported})"
            ) from None


@dataclass(frozen=True)
class Box:
    """
    Periodic simulation box.

    Only the cubic cell is supported: three equal, positive edge lengths.
    Positions are kept in the primary cell ``[0, L)`` on every axis.

    Attributes:
        lengths: Edge lengths (Lx, Ly, Lz) in metres.
        shape: Cell shape.
    """

    lengths: NDArray[np.floating]
    shape: BoundaryShape = field(default=BoundaryShape.CUBIC)

    def __post_init__(self) -> None:
        """Validate and convert lengths."""
        lengths = np.asarray(self.lengths, dtype=np.float64)
        if lengths.shape != (3,):
            raise ConfigurationError(
                f"box needs three edge lengths, got shape {lengths.shape}"
            )
        if not np.all(np.isfinite(lengths)) or np.any(lengths <= 0):
            raise ConfigurationError(f"box lengths must be positive, got {lengths}")
        if not isinstance(self.shape, BoundaryShape):
            raise ConfigurationError(f"unsupported boundary shape {self.shape!r}")
        if self.shape is BoundaryShape.CUBIC and not (
            lengths[0] == lengths[1] == lengths[2]
        ):
            raise ConfigurationError(
                f"cubic box needs equal edge lengths, got {lengths}"
            )
        lengths.flags.writeable = False
        # Use object.__setattr__ since dataclass is frozen
        object.__setattr__(self, "lengths", lengths)

    @classmethod
    def cubic(cls, length: float) -> Box:
        """Create a cubic box with given edge length."""
        return cls(np.array([length, length, length]), BoundaryShape.CUBIC)

    @classmethod
    def from_dimensions(
        cls, shape: BoundaryShape | str, lengths: Sequence[float] | ArrayLike
    ) -> Box:
        """
        Create a box from a shape keyword and three edge lengths.

        Raises:
            ConfigurationError: Unsupported shape or invalid lengths.
        """
        if isinstance(shape, str):
            shape = BoundaryShape.parse(shape)
        return cls(np.asarray(lengths, dtype=np.float64), shape)

    @property
    def volume(self) -> float:
        """Return box volume."""
        return float(np.prod(self.lengths))

    def wrap(self, positions: ArrayLike) -> NDArray[np.floating]:
        """
        Wrap positions into the primary cell.

        Works for any number of periods in either direction. ``r / L`` can
        round up to the next integer just below a multiple of ``L``, leaving
        a tiny negative remainder, and ``-epsilon + L`` can round to exactly
        ``L``; both are folded back so every returned component lies in
        ``[0, L)``.

        Args:
            positions: Positions of shape (3,) or (N, 3).

        Returns:
            Wrapped positions of the same shape.
        """
        positions = np.asarray(positions, dtype=np.float64)
        wrapped = positions - self.lengths * np.floor(positions / self.lengths)
        wrapped = np.where(wrapped < 0.0, wrapped + self.lengths, wrapped)
        return np.where(wrapped >= self.lengths, wrapped - self.lengths, wrapped)

    def minimum_image(self, dr: ArrayLike) -> NDArray[np.floating]:
        """
        Reduce displacement vectors to their shortest periodic image.

        Every component of the result has magnitude at most ``L / 2``.

        Args:
            dr: Displacement(s), shape (3,) or (N, 3).
        """
        dr = np.asarray(dr, dtype=np.float64)
        return dr - self.lengths * np.round(dr / self.lengths)

    def displacement(self, r1: ArrayLike, r2: ArrayLike) -> NDArray[np.floating]:
        """
        Compute minimum image displacement vector r2 - r1.

        Args:
            r1: First position(s), shape (3,) or (N, 3).
            r2: Second position(s), shape (3,) or (N, 3).
        """
        return self.minimum_image(np.asarray(r2) - np.asarray(r1))

    def minimum_image_distance(
        self, r1: ArrayLike, r2: ArrayLike
    ) -> float | NDArray[np.floating]:
        """Compute minimum image distance between positions."""
        return np.linalg.norm(self.displacement(r1, r2), axis=-1)

    def contains(self, positions: ArrayLike) -> bool:
        """Check that every coordinate lies in the primary cell."""
        positions = np.asarray(positions)
        return bool(np.all((positions >= 0.0) & (positions < self.lengths)))
