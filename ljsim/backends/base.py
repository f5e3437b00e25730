"""Base interface for compute backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

if TYPE_CHECKING:
    from ..forcefields import PairPotential
    from ..system import Box


@dataclass(frozen=True)
class Evaluation:
    """
    Result of one backend evaluation.

    Every ordered pair (i, j) appears once, so each physical interaction is
    counted twice in the energy matrix.

    Attributes:
        energy_matrix: Pair energies, entry [i, j] for i with the nearest
            image of j, shape (N, N).
        force_matrix: Force on i from the nearest image of j, directed along
            r_j(image) - r_i, shape (N, N, 3), or None when forces were not
            requested.
    """

    energy_matrix: NDArray[np.floating]
    force_matrix: NDArray[np.floating] | None = None

    @property
    def n_particles(self) -> int:
        """Return number of particles."""
        return len(self.energy_matrix)

    @property
    def total_energy(self) -> float:
        """Return the physical potential energy (half the matrix sum)."""
        return float(np.sum(self.energy_matrix)) / 2

    @property
    def energy_per_particle(self) -> float:
        """Return total_energy / N."""
        return self.total_energy / self.n_particles

    @property
    def net_forces(self) -> NDArray[np.floating]:
        """
        Return the net force on each particle, shape (N, 3).

        Raises:
            ValueError: If forces were not computed.
        """
        if self.force_matrix is None:
            raise ValueError("Evaluation was computed without forces")
        return np.sum(self.force_matrix, axis=1)


class ComputeBackend(ABC):
    """
    Abstract base class for pairwise energy/force evaluation.

    Engines hand the current positions to ``evaluate`` and receive freshly
    allocated matrices; nothing is retained between calls. The call is
    synchronous from the caller's point of view, and any failure raises
    BackendError, which aborts the run.

    Backends may hold worker threads or device handles, so they support
    ``close()`` and use as a context manager.
    """

    def __init__(self, box: Box, potential: PairPotential) -> None:
        box.check_cutoff(potential.cutoff)
        self._box = box
        self._potential = potential

    @property
    @abstractmethod
    def name(self) -> str:
        """Return backend name."""
        ...

    @property
    def box(self) -> Box:
        """Return the periodic box."""
        return self._box

    @property
    def potential(self) -> PairPotential:
        """Return the pair potential."""
        return self._potential

    @abstractmethod
    def evaluate(
        self, positions: ArrayLike, compute_forces: bool = False
    ) -> Evaluation:
        """
        Evaluate all pairwise interactions for one configuration.

        Args:
            positions: Particle positions, shape (N, 3). Not modified.
            compute_forces: Also compute the pairwise force matrix.

        Returns:
            Evaluation holding the energy (and force) matrices.

        Raises:
            BackendError: If the evaluation could not be completed.
        """
        ...

    def close(self) -> None:
        """Release workers or device resources."""
        pass

    def __enter__(self) -> ComputeBackend:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
