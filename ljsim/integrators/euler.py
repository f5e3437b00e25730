"""Semi-implicit Euler integrator."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from .base import Integrator

if TYPE_CHECKING:
    from ..system import ParticleSystem


class SemiImplicitEulerIntegrator(Integrator):
    """
    Semi-implicit (symplectic) Euler integrator with unit masses.

    Algorithm:
        v(t + dt) = v(t) + dt * F(t)
        r(t + dt) = r(t) + dt * v(t + dt)

    Velocities are updated first and the new velocities move the particles.
    One force evaluation per step. Positions are not wrapped back into the
    box; periodicity is applied when interactions are evaluated.

    Attributes:
        dt: Integration timestep.
    """

    def __init__(self, dt: float) -> None:
        """
        Initialize the integrator.

        Args:
            dt: Integration timestep.
        """
        if dt <= 0:
            raise ValueError(f"dt must be positive, got {dt}")
        self._dt = dt

    @property
    def timestep(self) -> float:
        """Return the integration timestep."""
        return self._dt

    def step(
        self, system: ParticleSystem, forces: NDArray[np.floating]
    ) -> ParticleSystem:
        """Perform one kick-then-drift step."""
        dt = self._dt
        new_system = system.copy()
        new_system.velocities = system.velocities + forces * dt
        new_system.positions = system.positions + new_system.velocities * dt
        new_system.forces = np.array(forces, dtype=np.float64)
        new_system.step = system.step + 1
        return new_system
