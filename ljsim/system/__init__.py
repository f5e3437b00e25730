"""Particle state, periodic box and initial lattice."""

from .box import Box
from .lattice import lattice_positions
from .state import FrozenParticleSystem, ParticleSystem

__all__ = ["Box", "ParticleSystem", "FrozenParticleSystem", "lattice_positions"]
