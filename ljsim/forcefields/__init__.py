"""Pairwise interaction models."""

from .base import PairPotential
from .lj import ShiftedLennardJones

__all__ = ["PairPotential", "ShiftedLennardJones"]
