"""Time integrator interface used by the MD engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from ..system import ParticleSystem


class Integrator(ABC):
    """
    Advances a ParticleSystem by one fixed timestep.

    The MD engine evaluates net forces on the current positions and hands
    them over; the integrator returns the next state without mutating the
    one it was given.
    """

    @abstractmethod
    def step(
        self, system: ParticleSystem, forces: NDArray[np.floating]
    ) -> ParticleSystem:
        """
        Return the state one timestep later.

        Args:
            system: Current particle system.
            forces: Current net forces on all particles, shape (N, 3).

        Returns:
            New ParticleSystem after the integration step.
        """
        ...

    @property
    @abstractmethod
    def timestep(self) -> float:
        """Return the integration timestep."""
        ...
