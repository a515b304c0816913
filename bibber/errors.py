"""Exception hierarchy."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """
    Invalid or incomplete simulation configuration.

    Raised before any integration step runs: missing recipe file, bad
    quantities, unsupported boundary shape, non-positive timestep, and so on.
    """


class RecipeParseError(ConfigurationError):
    """
    Syntax error in a recipe file.

    Attributes:
        line: 1-based line number of the offending entry, or None when the
            error is not tied to a single line (e.g. a missing key).
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class InvariantError(RuntimeError):
    """
    Engine invariant violated.

    Particle count changed, a position escaped the primary cell after
    wrapping, or a position/velocity became non-finite. This always
    indicates a defect; continuing would corrupt the trajectory.
    """
