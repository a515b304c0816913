"""Command-line entry point.

Reads the recipe (``recipe.bibber`` in the working directory by default),
runs the NVT simulation and writes the trajectory to standard output.
Progress and diagnostics go to standard error.
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from collections.abc import Sequence

from . import __version__, plotting, simulate
from .config import DEFAULT_RECIPE_FILENAME, load_recipe
from .errors import ConfigurationError, InvariantError
from .forcefields import LennardJonesForce, NoForce
from .io import GROWriter, XYZWriter
from .system import (
    MaxwellBoltzmannVelocities,
    UniformVelocities,
    VelocityInitializer,
    ZeroVelocities,
)
from .units import BOLTZMANN, parse_length

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIGURATION_ERROR = 1
EXIT_ENGINE_ERROR = 2

_WRITERS = {"gro": GROWriter, "xyz": XYZWriter}
_FORCE_FIELDS = {"none": NoForce, "lj": LennardJonesForce}


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="bibber", description=__doc__)
    parser.add_argument(
        "--recipe", default=DEFAULT_RECIPE_FILENAME, help="Recipe file to read."
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the trajectory to this file instead of stdout.",
    )
    parser.add_argument(
        "--format", choices=sorted(_WRITERS), default="gro", help="Trajectory format."
    )
    parser.add_argument(
        "--force-field",
        choices=sorted(_FORCE_FIELDS),
        default="none",
        help="Force law between particles (lj uses argon parameters).",
    )
    parser.add_argument(
        "--velocities",
        choices=["zero", "uniform", "maxwell"],
        default="zero",
        help="Initial velocity policy.",
    )
    parser.add_argument(
        "--min-separation",
        default=None,
        help="Minimum particle distance at placement, e.g. 0.5:nm.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for placement and velocities.",
    )
    parser.add_argument(
        "--plot",
        default=None,
        help="Save a temperature/energy plot to this file (needs matplotlib).",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output."
    )
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", help="Only log warnings and errors."
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser.parse_args(argv)


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


def _velocity_policy(
    name: str, temperature: float, mass: float
) -> VelocityInitializer:
    if name == "uniform":
        # Components in +-v_rms at the target temperature
        return UniformVelocities(math.sqrt(3.0 * BOLTZMANN * temperature / mass))
    if name == "maxwell":
        return MaxwellBoltzmannVelocities(temperature)
    return ZeroVelocities()


def main(argv: Sequence[str] | None = None) -> int:
    """Run one simulation; returns the process exit status."""
    args = _parse_args(argv)
    _configure_logging(args)

    if args.plot and not plotting.HAS_MATPLOTLIB:
        LOGGER.error("--plot needs matplotlib: pip install bibber[plot]")
        return EXIT_CONFIGURATION_ERROR

    try:
        recipe = load_recipe(args.recipe)
        parameters = recipe.to_parameters()
        min_separation = (
            parse_length(args.min_separation) if args.min_separation else 0.0
        )
        velocities = _velocity_policy(
            args.velocities, parameters.target_temperature, parameters.particle_mass
        )
        LOGGER.info("Loaded recipe %r from %s", recipe.title, args.recipe)

        target = args.output if args.output is not None else sys.stdout
        with _WRITERS[args.format](target) as writer:
            if isinstance(writer, GROWriter):
                writer.title = recipe.title
            result = simulate.run(
                parameters,
                force_provider=_FORCE_FIELDS[args.force_field](),
                velocities=velocities,
                seed=args.seed,
                min_separation=min_separation,
                writer=writer,
            )
    except ConfigurationError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return EXIT_CONFIGURATION_ERROR
    except InvariantError as exc:
        LOGGER.error("Simulation aborted: %s", exc)
        return EXIT_ENGINE_ERROR

    LOGGER.info(
        "Wrote %d snapshots, final T = %.2f K (%.0f steps/s)",
        result.n_snapshots,
        result.final_temperature,
        result.performance.get("steps_per_second", 0.0),
    )

    if args.plot:
        plotting.summary(result, show=False)
        plotting.save(args.plot)
        plotting.close()

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
