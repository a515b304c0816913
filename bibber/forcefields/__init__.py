"""Force field implementations."""

from .base import ForceProvider
from .composite import ForceField, NoForce
from .lennard_jones import LennardJonesForce

__all__ = ["ForceProvider", "ForceField", "NoForce", "LennardJonesForce"]
