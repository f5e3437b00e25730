"""Integrator implementations."""

from .base import Integrator
from .euler import SemiImplicitEulerIntegrator

__all__ = ["Integrator", "SemiImplicitEulerIntegrator"]
