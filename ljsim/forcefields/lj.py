"""Truncated and shifted Lennard-Jones potential."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .base import PairPotential


class ShiftedLennardJones(PairPotential):
    """
    Lennard-Jones 12-6 potential truncated at rc and shifted to zero there.

    V(d) = 4 * epsilon * [(sigma/d)^12 - (sigma/d)^6] - Urc   for d <= rc
    V(d) = 0                                                  otherwise

    Urc is V evaluated at rc without the shift, so the potential is
    continuous at the cutoff. The force on particle i from particle j is

    F_i = (r_j - r_i) * 12 * epsilon * [sigma^12 / d^14 - sigma^6 / d^8]

    This force model is the one the reference runs integrate with. It is not
    the gradient of V: it vanishes at d = sigma rather than at the energy
    minimum 2^(1/6) sigma, and it points along r_j - r_i, so pairs closer
    than sigma are pulled together and pairs beyond sigma pushed apart.
    OPEN QUESTION: intentional? The orientation is opposite to -dV/dr.

    Overlapping particles (d = 0) produce non-finite energies; this is a
    limitation of the model and is not guarded.

    Attributes:
        epsilon: Well depth.
        sigma: Size parameter.
    """

    def __init__(
        self,
        cutoff: float = 3.0,
        epsilon: float = 1.0,
        sigma: float = 1.0,
    ) -> None:
        """
        Initialize the shifted Lennard-Jones potential.

        Args:
            cutoff: Cutoff radius rc.
            epsilon: Well depth.
            sigma: Size parameter.
        """
        if cutoff <= 0:
            raise ValueError(f"cutoff must be positive, got {cutoff}")
        self._cutoff = float(cutoff)
        self.epsilon = float(epsilon)
        self.sigma = float(sigma)
        self._sigma6 = self.sigma**6
        self._sigma12 = self._sigma6**2
        self._shift = self._unshifted(self._cutoff**2)

    def __repr__(self) -> str:
        return (
            f"ShiftedLennardJones(cutoff={self._cutoff}, "
            f"epsilon={self.epsilon}, sigma={self.sigma})"
        )

    @property
    def cutoff(self) -> float:
        """Return the cutoff radius."""
        return self._cutoff

    @property
    def shift(self) -> float:
        """Return the shift constant Urc."""
        return self._shift

    def _unshifted(self, d2: float) -> float:
        inv6 = 1.0 / d2**3
        return 4.0 * self.epsilon * (self._sigma12 * inv6 * inv6 - self._sigma6 * inv6)

    def energy(self, d2: ArrayLike) -> NDArray[np.floating]:
        """Compute shifted pair energies from squared distances."""
        d2 = np.asarray(d2, dtype=np.float64)
        inside = d2 <= self._cutoff**2
        with np.errstate(divide="ignore", invalid="ignore"):
            inv6 = 1.0 / np.where(inside, d2, 1.0) ** 3
            energy = (
                4.0 * self.epsilon * (self._sigma12 * inv6 * inv6 - self._sigma6 * inv6)
                - self._shift
            )
        return np.where(inside, energy, 0.0)

    def force_multiplier(self, d2: ArrayLike) -> NDArray[np.floating]:
        """Compute 12 * epsilon * (sigma^12 / d^14 - sigma^6 / d^8)."""
        d2 = np.asarray(d2, dtype=np.float64)
        inside = d2 <= self._cutoff**2
        with np.errstate(divide="ignore", invalid="ignore"):
            safe = np.where(inside, d2, 1.0)
            inv8 = 1.0 / safe**4
            inv14 = inv8 / safe**3
            multiplier = 12.0 * self.epsilon * (self._sigma12 * inv14 - self._sigma6 * inv8)
        return np.where(inside, multiplier, 0.0)
