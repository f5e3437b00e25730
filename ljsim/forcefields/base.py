"""Base interface for pairwise potentials."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import ArrayLike, NDArray


class PairPotential(ABC):
    """
    Abstract base class for radially symmetric pair interactions.

    Potentials are pure functions of the squared pair distance so that every
    compute backend, in-process or on a device, evaluates the same math.
    """

    @property
    @abstractmethod
    def cutoff(self) -> float:
        """Return the interaction cutoff radius."""
        ...

    @abstractmethod
    def energy(self, d2: ArrayLike) -> NDArray[np.floating]:
        """
        Compute pair energies.

        Args:
            d2: Squared pair distance(s).

        Returns:
            Pair energies, zero beyond the cutoff.
        """
        ...

    @abstractmethod
    def force_multiplier(self, d2: ArrayLike) -> NDArray[np.floating]:
        """
        Compute the scalar that turns a displacement into a force.

        The force on particle i from j is (r_j - r_i) * force_multiplier(d2).

        Args:
            d2: Squared pair distance(s).

        Returns:
            Multipliers, zero beyond the cutoff.
        """
        ...

    def pair_terms(
        self, displacements: NDArray[np.floating], d2: NDArray[np.floating]
    ) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
        """
        Compute energies and force vectors for a batch of pairs.

        Args:
            displacements: Vectors r_j - r_i, shape (M, 3).
            d2: Squared distances, shape (M,).

        Returns:
            Tuple of (energies (M,), force vectors on i (M, 3)).
        """
        energies = self.energy(d2)
        multipliers = self.force_multiplier(d2)
        return energies, displacements * multipliers[:, np.newaxis]
