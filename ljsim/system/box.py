"""Cubic periodic simulation box."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product

import numpy as np
from numpy.typing import NDArray

from ..errors import ConfigurationError


@dataclass(frozen=True)
class Box:
    """
    Cubic simulation box with periodic boundaries on all three axes.

    This is the single source of truth for periodicity. Two minimum-image
    strategies are provided and agree whenever cutoff <= length / 2:

    - ``minimum_image`` folds each displacement component into (-L/2, L/2].
    - ``nearest_image`` enumerates the 27 replicas explicitly.

    Attributes:
        length: Edge length L of the box.
    """

    length: float

    def __post_init__(self) -> None:
        """Validate and convert the edge length."""
        length = float(self.length)
        if not length > 0:
            raise ValueError(f"Box length must be positive, got {self.length}")
        object.__setattr__(self, "length", length)

    @classmethod
    def cubic(cls, length: float) -> Box:
        """Create a cubic box with given side length."""
        return cls(length)

    @property
    def half_length(self) -> float:
        """Return L / 2."""
        return 0.5 * self.length

    @property
    def image_shifts(self) -> NDArray[np.floating]:
        """
        Return the 27 replica offsets in {-L, 0, L}^3, shape (27, 3).

        Ordered with z outermost and x innermost; the zero shift is index 13.
        """
        steps = (-self.length, 0.0, self.length)
        return np.array([(x, y, z) for z, y, x in product(steps, repeat=3)])

    def check_cutoff(self, cutoff: float) -> None:
        """
        Ensure at most one periodic image of a particle lies within cutoff.

        Raises:
            ConfigurationError: If cutoff > L / 2.
        """
        if cutoff > self.half_length:
            raise ConfigurationError(
                f"cutoff {cutoff} exceeds half box length {self.half_length}"
            )

    def wrap_positions(self, positions: NDArray[np.floating]) -> NDArray[np.floating]:
        """
        Fold positions into the primary cell [0, L).

        Stored positions are never wrapped by the engines; this is for
        output and for backends that expect wrapped input.
        """
        positions = np.asarray(positions, dtype=np.float64)
        return positions - self.length * np.floor(positions / self.length)

    def wrap_centered(self, values: NDArray[np.floating]) -> NDArray[np.floating]:
        """
        Fold coordinates or displacement components into (-L/2, L/2].

        Computes c - L * ceil(c / L - 1/2) elementwise, the half-open form of
        c - L * round(c / L).
        """
        values = np.asarray(values, dtype=np.float64)
        return values - self.length * np.ceil(values / self.length - 0.5)

    def minimum_image(
        self, r1: NDArray[np.floating], r2: NDArray[np.floating]
    ) -> NDArray[np.floating]:
        """
        Displacement r2 - r1 folded to its shortest periodic representative.

        Args:
            r1: Origin position(s), shape (3,) or (N, 3).
            r2: Target position(s), broadcastable against r1.

        Returns:
            Folded displacement(s), each component in (-L/2, L/2].
        """
        return self.wrap_centered(np.asarray(r2) - np.asarray(r1))

    def minimum_image_distance(
        self, r1: NDArray[np.floating], r2: NDArray[np.floating]
    ) -> float | NDArray[np.floating]:
        """Compute minimum image distance(s) between positions."""
        dr = self.minimum_image(r1, r2)
        return np.linalg.norm(dr, axis=-1)

    def nearest_image(
        self,
        r1: NDArray[np.floating],
        r2: NDArray[np.floating],
        cutoff: float | None = None,
    ) -> tuple[NDArray[np.floating], bool]:
        """
        Find the replica of r2 closest to r1 by explicit enumeration.

        Args:
            r1: Reference position, shape (3,).
            r2: Position whose replicas are searched, shape (3,).
            cutoff: Optional cutoff radius; the image only counts as a
                neighbor when its squared distance is strictly below cutoff².

        Returns:
            Tuple of (displacement r2_image - r1, within_cutoff).
        """
        candidates = np.asarray(r2) + self.image_shifts - np.asarray(r1)
        d2 = np.einsum("ij,ij->i", candidates, candidates)
        best = int(np.argmin(d2))
        within = True if cutoff is None else bool(d2[best] < cutoff * cutoff)
        return candidates[best], within
